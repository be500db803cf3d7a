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
Entry point of the synchronization pipeline, called by the host for each light change.

Every event triggers a full resend of the scene lights: light counts are small and a missed event is
fixed by the next one. The host reaches the pipeline through the LightChangeObserver interface, and
the pipeline reaches the host through an object with a scene() method that returns None when there
is no active document, or an object with:
- lights(): the host light handles, in the host order (see SnapshotBuilder.build())
- length_unit: a units.LengthUnit or its name
- unit_scale: an additional meters per unit factor, 1.0 for most hosts
"""

from datetime import datetime
import logging
from typing import Any, Hashable, Optional

from lightsync import codec
from lightsync.backup import write_backup
from lightsync.blacklist import BlacklistTracker
from lightsync.codec import EventLabel
from lightsync.config import SyncConfig
from lightsync.errors import HostUnavailable, LightSyncError
from lightsync.snapshot import Snapshot, SnapshotBuilder
from lightsync.units import meters_per_unit

logger = logging.getLogger(__name__)


def snapshot_scene(host, builder: SnapshotBuilder) -> Snapshot:
    """Build a snapshot of the active scene of host. Raises HostUnavailable if there is none."""
    scene = host.scene()
    if scene is None:
        raise HostUnavailable("No active scene found for light event")
    scale = meters_per_unit(scene.length_unit) * scene.unit_scale
    return builder.build(scene.lights(), scale)


class LightChangeObserver:
    """Notifications sent by the host adapter when lights change"""

    def on_added(self, light_id: Hashable, light: Any = None):
        raise NotImplementedError

    def on_deleted(self, light_id: Hashable, light: Any = None):
        raise NotImplementedError

    def on_undeleted(self, light_id: Hashable, light: Any = None):
        raise NotImplementedError

    def on_modified(self, light_id: Hashable, light: Any = None):
        raise NotImplementedError


class EventDispatcher(LightChangeObserver):
    def __init__(self, host, transport, blacklist: BlacklistTracker = None, config: SyncConfig = None):
        self.host = host
        self.transport = transport
        self.blacklist = blacklist if blacklist is not None else BlacklistTracker()
        self.config = config if config is not None else SyncConfig()
        self.builder = SnapshotBuilder(self.blacklist)

        self.run_count = 0
        self.last_error: Optional[BaseException] = None

    def on_added(self, light_id, light=None):
        return self.dispatch(EventLabel.ADDED, light_id, light)

    def on_deleted(self, light_id, light=None):
        return self.dispatch(EventLabel.DELETED, light_id, light)

    def on_undeleted(self, light_id, light=None):
        return self.dispatch(EventLabel.UNDELETED, light_id, light)

    def on_modified(self, light_id, light=None):
        return self.dispatch(EventLabel.MODIFIED, light_id, light)

    def dispatch(self, event: EventLabel, light_id: Hashable = None, light: Any = None) -> Optional[bytes]:
        """
        Process one host event and return the payload handed to the transport, or None if the
        pipeline run was abandoned.

        Never raises: an exception that reaches the host notification may take the host down.
        """
        try:
            if not isinstance(event, EventLabel):
                logger.debug("Unknown event kind %s", event)
                event = EventLabel.UNKNOWN

            if light_id is not None:
                if event is EventLabel.DELETED:
                    self.blacklist.add(light_id)
                elif event is EventLabel.UNDELETED:
                    self.blacklist.remove(light_id)

            return self._run(event)
        except LightSyncError as e:
            logger.warning("%s: pipeline abandoned: %s", event, e)
            self.last_error = e
        except Exception as e:
            logger.error("%s: unexpected error, pipeline abandoned: %s", event, e, exc_info=True)
            self.last_error = e
        return None

    def build_snapshot(self) -> Snapshot:
        return snapshot_scene(self.host, self.builder)

    def _run(self, event: EventLabel) -> bytes:
        snapshot = self.build_snapshot()

        timestamp = None
        if self.config.include_timestamp:
            timestamp = datetime.now().isoformat(timespec="seconds")
        payload = codec.encode(event, snapshot, timestamp)
        logger.info("Light event: %s (total lights: %d)", event.value, len(snapshot))

        self.transport.push(payload)

        if self.config.backup_enabled:
            try:
                write_backup(snapshot, self.config.backup_path)
            except OSError as e:
                logger.warning("Failed to export light data to %s: %s", self.config.backup_path, e)

        self.run_count += 1
        return payload
