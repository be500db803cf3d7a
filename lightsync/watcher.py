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
Translation of successive scene states into light events.

Blender has no light table events: the update handler only tells that something changed. LightWatcher
compares the lights present in the scene with the ones present at the previous update and sends
the corresponding added/deleted/undeleted/modified notifications to a LightChangeObserver.
"""

import logging
from typing import Dict, Hashable, Iterable, List, Set, Tuple

from lightsync.blacklist import MAX_DELETED_IDS
from lightsync.codec import EventLabel
from lightsync.dispatcher import LightChangeObserver

logger = logging.getLogger(__name__)


class LightWatcher:
    def __init__(self, observer: LightChangeObserver, max_deleted: int = MAX_DELETED_IDS):
        self.observer = observer
        self.max_deleted = max_deleted
        self._known_ids: Set[Hashable] = set()
        # ids that were present once and disappeared, so that their return is an undelete.
        # Insertion ordered and bounded like the dispatcher blacklist, so that both forget the same ids
        self._deleted_ids: Dict[Hashable, None] = {}

    def reset(self, current_ids: Iterable[Hashable] = ()):
        """Forget the history, for instance after a file is loaded."""
        self._known_ids = set(current_ids)
        self._deleted_ids.clear()

    def compute_events(
        self, current_ids: Iterable[Hashable], modified_ids: Iterable[Hashable] = ()
    ) -> List[Tuple[EventLabel, Hashable]]:
        current_ids = set(current_ids)
        events = []

        for light_id in sorted(self._known_ids - current_ids, key=str):
            self._deleted_ids[light_id] = None
            while len(self._deleted_ids) > self.max_deleted:
                del self._deleted_ids[next(iter(self._deleted_ids))]
            events.append((EventLabel.DELETED, light_id))

        for light_id in sorted(current_ids - self._known_ids, key=str):
            if light_id in self._deleted_ids:
                del self._deleted_ids[light_id]
                events.append((EventLabel.UNDELETED, light_id))
            else:
                events.append((EventLabel.ADDED, light_id))

        self._known_ids = current_ids

        if not events:
            # one full resend covers all the modified lights
            modified = sorted(set(modified_ids) & current_ids, key=str)
            if modified:
                events.append((EventLabel.MODIFIED, modified[0]))

        return events

    def update(self, current_ids: Iterable[Hashable], modified_ids: Iterable[Hashable] = ()) -> int:
        """
        Notify the observer of the changes since the previous update and return the event count.
        """
        events = self.compute_events(current_ids, modified_ids)
        for event, light_id in events:
            logger.debug("%s %s", event.name, light_id)
            if event is EventLabel.ADDED:
                self.observer.on_added(light_id)
            elif event is EventLabel.DELETED:
                self.observer.on_deleted(light_id)
            elif event is EventLabel.UNDELETED:
                self.observer.on_undeleted(light_id)
            else:
                self.observer.on_modified(light_id)
        return len(events)
