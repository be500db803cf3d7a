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
State of the synchronization session of the add-on.
"""

from datetime import datetime
import logging
from typing import Optional

from lightsync.config import SyncConfig
from lightsync.dispatcher import EventDispatcher
from lightsync.transport import AsyncTransport
from lightsync.watcher import LightWatcher

logger = logging.getLogger(__name__)


class ShareData:
    def __init__(self):
        self.run_id = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        self.session_id = 0  # For logging and debug

        self.transport: Optional[AsyncTransport] = None
        self.dispatcher: Optional[EventDispatcher] = None
        self.watcher: Optional[LightWatcher] = None

    def start_session(self, host, config: SyncConfig):
        """
        Create the pipeline objects of a new session. Any previous session is stopped first.
        """
        self.stop_session()
        self.session_id += 1
        self.transport = config.make_transport()
        self.dispatcher = EventDispatcher(host, self.transport, config=config)
        self.watcher = LightWatcher(self.dispatcher)
        logger.info("Session %d started, sending to %s:%s", self.session_id, config.host, config.port)

    def stop_session(self):
        if self.transport is not None:
            self.transport.shutdown(wait=False)
        if self.dispatcher is not None:
            logger.info("Session %d stopped after %d update(s)", self.session_id, self.dispatcher.run_count)
        self.transport = None
        self.dispatcher = None
        self.watcher = None

    def is_syncing(self) -> bool:
        return self.dispatcher is not None


share_data = ShareData()
