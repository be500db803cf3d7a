# GPLv3 License
#
# Copyright (C) 2020 Ubisoft
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Fire and forget delivery of encoded snapshots to the listener.

Each payload is sent on a new short lived TCP connection by one of a small pool of worker threads.
The caller never waits and is never told about the outcome: the listener is optional and may not be
running at all. Payloads are dropped when the listener cannot be reached or when too many of them are
waiting. Several workers may be sending at the same time, so the listener can receive payloads out of
order.
"""

import logging
import queue
import socket
import threading
from typing import List

from lightsync.errors import TransportFailure

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5173
DEFAULT_TIMEOUT = 5.0  # in seconds
DEFAULT_WORKERS = 2
DEFAULT_MAX_PENDING = 32

logger = logging.getLogger(__name__)


def send_payload(host: str, port: int, payload: bytes, timeout: float = DEFAULT_TIMEOUT):
    """
    Open a connection, send the whole payload and close the connection.

    Raises TransportFailure if the connection cannot be opened or the payload cannot be fully sent.
    """
    try:
        with socket.create_connection((host, port), timeout=timeout) as sock:
            sock.sendall(payload)
    except OSError as e:
        raise TransportFailure(f"Cannot send {len(payload)} bytes to {host}:{port}: {e}", (host, port)) from e


class AsyncTransport:
    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        timeout: float = DEFAULT_TIMEOUT,
        workers: int = DEFAULT_WORKERS,
        max_pending: int = DEFAULT_MAX_PENDING,
    ):
        if workers < 1:
            raise ValueError(f"AsyncTransport needs at least one worker, got {workers}")
        self.host = host
        self.port = port
        self.timeout = timeout
        self.workers = workers

        self._queue: queue.Queue = queue.Queue(max_pending)
        self._threads: List[threading.Thread] = []
        self._shutdown = threading.Event()
        self._mutex = threading.Lock()

        self.sent_count = 0
        self.dropped_count = 0

    def start(self):
        with self._mutex:
            if self._threads or self._shutdown.is_set():
                return
            for i in range(self.workers):
                thread = threading.Thread(None, self._run, name=f"lightsync-transport-{i}", daemon=True)
                thread.start()
                self._threads.append(thread)
        logger.info("Transport to %s:%s started with %d worker(s)", self.host, self.port, self.workers)

    def is_running(self) -> bool:
        return bool(self._threads) and not self._shutdown.is_set()

    def push(self, payload: bytes):
        """Queue a payload for delivery and return immediately."""
        if self._shutdown.is_set():
            logger.debug("Transport shut down, payload dropped")
            self._count_dropped()
            return

        self.start()
        try:
            self._queue.put_nowait(bytes(payload))
        except queue.Full:
            logger.warning("Too many pending payloads (%d), payload dropped", self._queue.maxsize)
            self._count_dropped()

    def flush(self):
        """Block until all the queued payloads have been processed. For tests and shutdown."""
        if self._threads:
            self._queue.join()

    def shutdown(self, wait: bool = False):
        """
        Stop the workers. Pending payloads are dropped, a payload being sent completes or times out.
        """
        self._shutdown.set()
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break
            self._count_dropped()
            self._queue.task_done()

        if wait:
            for thread in self._threads:
                thread.join()
        logger.info("Transport to %s:%s shut down", self.host, self.port)

    def _run(self):
        while not self._shutdown.is_set():
            try:
                # check for shutdown every 10th of a second
                payload = self._queue.get(timeout=0.1)
            except queue.Empty:
                continue

            try:
                self._deliver(payload)
            finally:
                self._queue.task_done()

    def _deliver(self, payload: bytes):
        try:
            send_payload(self.host, self.port, payload, self.timeout)
        except TransportFailure as e:
            logger.debug("%s", e)
            self._count_dropped()
        except Exception as e:
            logger.error("Unexpected error while sending payload: %s", e, exc_info=True)
            self._count_dropped()
        else:
            logger.debug("Sent %d bytes to %s:%s", len(payload), self.host, self.port)
            with self._mutex:
                self.sent_count += 1

    def _count_dropped(self):
        with self._mutex:
            self.dropped_count += 1
