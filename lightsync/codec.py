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
Encoding of snapshots into the text messages sent to the listener.

The output is JSON with a fixed key order and fixed precision numbers, so that two encodings of the
same snapshot are byte identical and can be diffed. The only strings written are taken from
closed enumerations (EventLabel, LightKind) and are never escaped: do not route arbitrary strings
through encode() without adding escaping.
"""

from enum import Enum
import json
import logging
from typing import Any, Dict, List, Optional

from lightsync.snapshot import LightKind, LightRecord, Snapshot

logger = logging.getLogger(__name__)

LOCATION_DECIMALS = 6
ROTATION_DECIMALS = 3
INTENSITY_DECIMALS = 6
ANGLE_DECIMALS = 3


class EventLabel(Enum):
    ADDED = "Light Added"
    DELETED = "Light Deleted"
    UNDELETED = "Light Undeleted"
    MODIFIED = "Light Modified"
    UNKNOWN = "Unknown Light Event"


def format_float(value: float, decimals: int) -> str:
    # %-formatting ignores the locale
    s = "%.*f" % (decimals, value)
    if s.startswith("-") and float(s) == 0.0:
        s = s[1:]
    return s


def _check_enum(value, enum_type):
    if not isinstance(value, enum_type):
        raise ValueError(f"Expected a {enum_type.__name__}, got {value!r}")
    return value.value


def _vector_block(names, values, decimals: int, indent: str) -> str:
    lines = [f'{indent}  "{name}": {format_float(value, decimals)}' for name, value in zip(names, values)]
    return "{\n" + ",\n".join(lines) + f"\n{indent}}}"


def encode_light(record: LightRecord, indent: str = "    ") -> str:
    inner = indent + "  "
    type_name = _check_enum(record.kind, LightKind)
    r, g, b = record.color
    fields = [
        f'{inner}"id": {int(record.id)}',
        f'{inner}"type": "{type_name}"',
        f'{inner}"location": ' + _vector_block("xyz", record.position, LOCATION_DECIMALS, inner),
        f'{inner}"rotation": '
        + _vector_block(("pitch", "yaw", "roll"), record.orientation, ROTATION_DECIMALS, inner),
        f'{inner}"intensity": {format_float(record.intensity, INTENSITY_DECIMALS)}',
        f'{inner}"color": {{\n{inner}  "r": {int(r)},\n{inner}  "g": {int(g)},\n{inner}  "b": {int(b)}\n{inner}}}',
    ]
    if record.kind is LightKind.SPOT:
        spot = record.spot
        fields.append(
            f'{inner}"spotLight": '
            + _vector_block(
                ("innerAngle", "outerAngle"), (spot.inner_angle_deg, spot.outer_angle_deg), ANGLE_DECIMALS, inner
            )
        )
    return f"{indent}{{\n" + ",\n".join(fields) + f"\n{indent}}}"


def encode(event: EventLabel, snapshot: Snapshot, timestamp: Optional[str] = None) -> bytes:
    """
    Encode a snapshot and the label of the event that triggered it, as UTF-8 bytes.

    timestamp is optional and must be an ISO 8601 string, it is written as is.
    """
    event_name = _check_enum(event, EventLabel)
    records: List[LightRecord] = list(snapshot)

    lines = ["{", f'  "event": "{event_name}",']
    if timestamp is not None:
        if '"' in timestamp or "\\" in timestamp:
            raise ValueError(f"Invalid timestamp {timestamp!r}")
        lines.append(f'  "timestamp": "{timestamp}",')
    lines.append(f'  "lightCount": {len(records)},')
    if records:
        lines.append('  "lights": [')
        lines.append(",\n".join(encode_light(record) for record in records))
        lines.append("  ]")
    else:
        lines.append('  "lights": []')
    lines.append("}")

    return "\n".join(lines).encode("utf-8")


def decode(payload: bytes) -> Dict[str, Any]:
    """Parse a message produced by encode()"""
    return json.loads(payload.decode("utf-8"))
