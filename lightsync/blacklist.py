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

import logging
from typing import Dict, Hashable

logger = logging.getLogger(__name__)

# Far more than the undo depth of the host (Blender keeps 32 steps by default)
MAX_DELETED_IDS = 1024


class BlacklistTracker:
    """
    Identifiers of lights that are deleted but may still be enumerated by the host.

    Deleted lights can stay in the host tables (undo support) and keep reporting themselves as enabled.
    Only accessed from the thread that processes host events, so there is no locking.

    At most max_size ids are kept, the oldest deletions are forgotten first.
    """

    def __init__(self, max_size: int = MAX_DELETED_IDS):
        self.max_size = max_size
        # insertion ordered
        self._ids: Dict[Hashable, None] = {}

    def add(self, light_id: Hashable):
        logger.debug("blacklist add %s", light_id)
        self._ids.pop(light_id, None)
        self._ids[light_id] = None
        while len(self._ids) > self.max_size:
            oldest = next(iter(self._ids))
            del self._ids[oldest]
            logger.debug("blacklist full, %s forgotten", oldest)

    def remove(self, light_id: Hashable):
        logger.debug("blacklist remove %s", light_id)
        self._ids.pop(light_id, None)

    def contains(self, light_id: Hashable) -> bool:
        return light_id in self._ids

    def clear(self):
        self._ids.clear()

    def __contains__(self, light_id: Hashable) -> bool:
        return self.contains(light_id)

    def __len__(self):
        return len(self._ids)
