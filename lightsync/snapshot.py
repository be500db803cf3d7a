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
This module builds snapshots of the lighting state of a scene.

A snapshot is built from the light handles enumerated by the host. The host side is only accessed
through the attributes listed in SnapshotBuilder.build(), so that any object with these attributes
can be used (bl_host.BlenderLight for Blender, plain objects in tests).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import math
from typing import Any, Iterable, Iterator, Optional, Sequence, Tuple

from lightsync.blacklist import BlacklistTracker
from lightsync.errors import ConversionFailure
from lightsync.orientation import Rotation, direction_to_rotation
from lightsync.units import Vector3, scale_position

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]


class LightKind(Enum):
    # values are sent on the wire as is
    DIRECTIONAL = "Directional"
    POINT = "Point"
    SPOT = "Spot"
    AMBIENT = "Ambient"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class SpotParams:
    inner_angle_deg: float
    outer_angle_deg: float


@dataclass(frozen=True)
class LightRecord:
    id: int
    kind: LightKind
    position: Vector3
    orientation: Rotation
    intensity: float
    color: Color
    spot: Optional[SpotParams] = None

    # unscaled and not normalized, for reports only
    direction: Vector3 = (0.0, 0.0, -1.0)

    def __post_init__(self):
        if (self.spot is not None) != (self.kind is LightKind.SPOT):
            raise ValueError(f"Light {self.id}: spot parameters must be present for spot lights only")


@dataclass(frozen=True)
class Snapshot:
    records: Tuple[LightRecord, ...] = ()

    def __iter__(self) -> Iterator[LightRecord]:
        return iter(self.records)

    def __len__(self):
        return len(self.records)

    def __getitem__(self, index) -> LightRecord:
        return self.records[index]

    def ids(self):
        return [record.id for record in self.records]


def color_to_rgb8(color: Sequence[float]) -> Color:
    """Convert a color with float channels in [0, 1] to 8 bits channels"""
    return tuple(int(round(max(0.0, min(1.0, float(c))) * 255.0)) for c in color[:3])


def _clamp_channel(value: Any) -> int:
    return max(0, min(255, int(round(value))))


def _as_vector3(value: Sequence[float], what: str) -> Vector3:
    vector = tuple(float(c) for c in value)
    if len(vector) != 3 or not all(math.isfinite(c) for c in vector):
        raise ConversionFailure(f"Invalid {what} {value}")
    return vector


class SnapshotBuilder:
    def __init__(self, blacklist: BlacklistTracker):
        self.blacklist = blacklist

    def build(self, lights: Iterable[Any], scale: float = 1.0) -> Snapshot:
        """
        Build a snapshot from the host lights, enumerated in the host order.

        Each host light provides:
        - id: stable identifier
        - is_enabled: bool
        - kind: LightKind
        - position: 3 floats, in host units
        - direction: 3 floats, any length
        - intensity: float
        - color: 3 ints in [0, 255]
        - spot_angles: (inner, outer) in degrees, or None

        Disabled and blacklisted lights are left out, as well as the lights whose data cannot be read.
        """
        records = []
        for light in lights:
            try:
                light_id = light.id
                if not light.is_enabled:
                    continue
                if self.blacklist.contains(light_id):
                    logger.debug("Light %s is blacklisted, skipped", light_id)
                    continue
                records.append(self.make_record(light, scale))
            except (ConversionFailure, AttributeError, TypeError, ValueError) as e:
                logger.warning("Skipping light %s: %s", getattr(light, "id", "?"), e)

        return Snapshot(tuple(records))

    def make_record(self, light: Any, scale: float) -> LightRecord:
        kind = light.kind
        if not isinstance(kind, LightKind):
            kind = LightKind.UNKNOWN

        position = scale_position(_as_vector3(light.position, "position"), scale)
        direction = _as_vector3(light.direction, "direction")
        orientation = direction_to_rotation(direction)

        intensity = float(light.intensity)
        if not math.isfinite(intensity):
            raise ConversionFailure(f"Invalid intensity {intensity}")

        spot = None
        if kind is LightKind.SPOT:
            angles = light.spot_angles
            if angles is None:
                raise ConversionFailure("Spot light without spot angles")
            inner, outer = (float(a) for a in angles)
            if not (math.isfinite(inner) and math.isfinite(outer)):
                raise ConversionFailure(f"Invalid spot angles {angles}")
            spot = SpotParams(inner, outer)

        return LightRecord(
            id=light.id,
            kind=kind,
            position=position,
            orientation=orientation,
            intensity=max(0.0, intensity),
            color=tuple(_clamp_channel(c) for c in light.color[:3]),
            spot=spot,
            direction=direction,
        )
