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
Runtime settings of the synchronization, with defaults taken from environment variables.
"""

from dataclasses import dataclass, field
import logging
import os
import tempfile
from typing import Mapping, Optional

from lightsync import transport

logger = logging.getLogger(__name__)


def get_data_directory() -> str:
    return os.path.join(os.fspath(tempfile.gettempdir()), "lightsync")


def get_default_backup_path() -> str:
    return os.path.join(get_data_directory(), "Lights.txt")


def _env_flag(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() not in ("", "0", "false", "no", "off")


@dataclass
class SyncConfig:
    host: str = transport.DEFAULT_HOST
    port: int = transport.DEFAULT_PORT
    timeout: float = transport.DEFAULT_TIMEOUT
    workers: int = transport.DEFAULT_WORKERS
    max_pending: int = transport.DEFAULT_MAX_PENDING
    backup_enabled: bool = False
    backup_path: str = field(default_factory=get_default_backup_path)
    include_timestamp: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None) -> "SyncConfig":
        environ = os.environ if environ is None else environ
        config = cls()
        config.host = environ.get("LIGHTSYNC_HOST", config.host)
        try:
            config.port = int(environ.get("LIGHTSYNC_PORT", config.port))
        except ValueError as e:
            logger.error("Invalid LIGHTSYNC_PORT: %s. Using %d.", e, transport.DEFAULT_PORT)
        try:
            config.timeout = float(environ.get("LIGHTSYNC_TIMEOUT", config.timeout))
        except ValueError as e:
            logger.error("Invalid LIGHTSYNC_TIMEOUT: %s. Using %s.", e, transport.DEFAULT_TIMEOUT)
        config.backup_enabled = _env_flag(environ.get("LIGHTSYNC_BACKUP"))
        config.backup_path = environ.get("LIGHTSYNC_BACKUP_PATH", config.backup_path)
        config.include_timestamp = _env_flag(environ.get("LIGHTSYNC_TIMESTAMP"))
        return config

    def make_transport(self) -> transport.AsyncTransport:
        return transport.AsyncTransport(self.host, self.port, self.timeout, self.workers, self.max_pending)
