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
A minimal listener that receives and logs the snapshots pushed by the add-on.

Development tool, to check what a game engine would receive:
    python -m lightsync.listener --port 5173 --log-level INFO
"""

from __future__ import annotations

import argparse
import logging
import select
import socket
import threading
from typing import Callable, Dict, Any, Optional

from lightsync import codec
from lightsync.cli_utils import init_logging, add_logging_cli_args
from lightsync.transport import DEFAULT_HOST, DEFAULT_PORT

logger = logging.getLogger() if __name__ == "__main__" else logging.getLogger(__name__)

MAX_MESSAGE_SIZE = 64 * 1024 * 1024


def summarize(message: Dict[str, Any]) -> str:
    lights = message.get("lights")
    if not isinstance(lights, list):
        lights = []
    types = [light.get("type") if isinstance(light, dict) else None for light in lights]
    return f"{message.get('event')}: {message.get('lightCount')} light(s) {types}"


class Listener:
    """
    Accept connections and read one message per connection, until the sender closes it.
    """

    def __init__(self, on_message: Callable[[Dict[str, Any]], None] = None):
        self._on_message = on_message
        self._shutdown = threading.Event()
        self._socket: Optional[socket.socket] = None
        self.message_count = 0
        self._count_lock = threading.Lock()

    @property
    def port(self) -> Optional[int]:
        if self._socket is None:
            return None
        return self._socket.getsockname()[1]

    def bind(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(64)
        self._socket = sock
        logger.info("Listening on %s:%s", host, self.port)

    def shutdown(self):
        self._shutdown.set()

    def run(self):
        if self._socket is None:
            self.bind()

        try:
            while not self._shutdown.is_set():
                try:
                    timeout = 0.1  # Check for a new connection every 10th of a second
                    readable, _, _ = select.select([self._socket], [], [], timeout)
                    if readable:
                        connection, address = self._socket.accept()
                        threading.Thread(None, self._handle, args=(connection, address), daemon=True).start()
                except KeyboardInterrupt:
                    break
        finally:
            logger.info("Shutting down listener")
            self._socket.close()
            self._socket = None

    def _handle(self, connection: socket.socket, address):
        with connection:
            chunks = []
            size = 0
            while True:
                chunk = connection.recv(65536)
                if not chunk:
                    break
                chunks.append(chunk)
                size += len(chunk)
                if size > MAX_MESSAGE_SIZE:
                    logger.warning("Message from %s too large, ignored", address)
                    return

        try:
            message = codec.decode(b"".join(chunks))
        except ValueError as e:
            logger.warning("Invalid message from %s: %s", address, e)
            return

        if not isinstance(message, dict):
            logger.warning("Invalid message from %s: not a JSON object", address)
            return

        with self._count_lock:
            self.message_count += 1
        logger.info("%s", summarize(message))
        if self._on_message is not None:
            self._on_message(message)


def main():
    args, _ = parse_cli_args()
    init_logging(args)

    listener = Listener()
    listener.bind(args.host, args.port)
    listener.run()


def parse_cli_args():
    parser = argparse.ArgumentParser(description="Receive and log the light snapshots sent by LightSync")
    add_logging_cli_args(parser)
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    return parser.parse_args(), parser


if __name__ == "__main__":
    main()
