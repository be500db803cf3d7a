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
Conversion of light direction vectors to pitch/yaw/roll angles.

The source data has no twist around the direction, so roll is always 0.
"""

import math
from typing import NamedTuple, Sequence, Tuple

from lightsync.errors import DegenerateInputError


class Rotation(NamedTuple):
    pitch: float
    yaw: float
    roll: float = 0.0


def normalize(vector: Sequence[float]) -> Tuple[float, float, float]:
    x, y, z = (float(c) for c in vector)
    length = math.sqrt(x * x + y * y + z * z)
    if not math.isfinite(length) or length == 0.0:
        raise DegenerateInputError(f"Cannot normalize direction {tuple(vector)}")
    return x / length, y / length, z / length


def direction_to_rotation(direction: Sequence[float]) -> Rotation:
    """
    Convert a direction to pitch and yaw in degrees.

    The direction is always normalized again, even if the host claims it has unit length.
    A vertical direction has a zero horizontal projection and its yaw is defined as 0.
    """
    x, y, z = normalize(direction)
    pitch = math.degrees(math.asin(max(-1.0, min(1.0, -z))))
    if x == 0.0 and y == 0.0:
        yaw = 0.0
    else:
        yaw = math.degrees(math.atan2(y, x))
    return Rotation(pitch, yaw, 0.0)
