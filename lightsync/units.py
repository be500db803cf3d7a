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
Length unit conversion to meters, the unit shared with the listener.
"""

from enum import Enum
import logging
from typing import Sequence, Tuple, Union

logger = logging.getLogger(__name__)

Vector3 = Tuple[float, float, float]


class LengthUnit(Enum):
    # values are the identifiers used by bpy.types.UnitSettings.length_unit
    MILLIMETERS = "MILLIMETERS"
    CENTIMETERS = "CENTIMETERS"
    METERS = "METERS"
    KILOMETERS = "KILOMETERS"
    INCHES = "INCHES"
    FEET = "FEET"
    YARDS = "YARDS"
    MILES = "MILES"


_meters_per_unit = {
    LengthUnit.MILLIMETERS: 0.001,
    LengthUnit.CENTIMETERS: 0.01,
    LengthUnit.METERS: 1.0,
    LengthUnit.KILOMETERS: 1000.0,
    LengthUnit.INCHES: 0.0254,
    LengthUnit.FEET: 0.3048,
    LengthUnit.YARDS: 0.9144,
    LengthUnit.MILES: 1609.344,
}


def meters_per_unit(unit: Union[LengthUnit, str, None]) -> float:
    """
    Return the multiplier that converts a length expressed in unit into meters.

    Unrecognized units are considered to be meters already.
    """
    if not isinstance(unit, LengthUnit):
        try:
            unit = LengthUnit(str(unit).upper())
        except ValueError:
            logger.debug("Unrecognized length unit %s, using meters", unit)
            return 1.0
    return _meters_per_unit[unit]


def scale_position(position: Sequence[float], scale: float) -> Vector3:
    x, y, z = position
    return (x * scale, y * scale, z * scale)
