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
Human readable outputs of a snapshot: the backup text file and the inventory report.

Backup file format, one line per light after a 3 lines header:
    <Type> (x,y,z) (azimuth°, elevation°, 0.00°) <intensity> RGB(r,g,b) [inner° outer°]
"""

import logging
import os
from pathlib import Path

from lightsync.snapshot import LightRecord, Snapshot

logger = logging.getLogger(__name__)


def _g(value: float) -> str:
    s = f"{value:g}"
    return "0" if s == "-0" else s


def color_to_string(color) -> str:
    r, g, b = color
    return f"RGB({r},{g},{b})"


def rotation_to_string(record: LightRecord) -> str:
    # azimuth is the yaw, elevation points up when pitch points down
    azimuth = record.orientation.yaw
    elevation = -record.orientation.pitch
    return f"({_g(azimuth)}°, {_g(elevation)}°, 0.00°)"


def format_backup_line(record: LightRecord) -> str:
    x, y, z = record.position
    line = (
        f"{record.kind.value} ({_g(x)},{_g(y)},{_g(z)}) {rotation_to_string(record)} "
        f"{_g(record.intensity)} {color_to_string(record.color)}"
    )
    if record.spot is not None:
        line += f" {_g(record.spot.inner_angle_deg)}° {_g(record.spot.outer_angle_deg)}°"
    return line


def format_backup(snapshot: Snapshot) -> str:
    lines = [
        "# LightSync Export File",
        "# Format: <Type> <Location> <Rotation> <Intensity> <Color> [InnerAngle OuterAngle]",
        f"# Total Lights: {len(snapshot)}",
        "",
    ]
    lines.extend(format_backup_line(record) for record in snapshot)
    return "\n".join(lines) + "\n"


def write_backup(snapshot: Snapshot, path: str):
    """
    Overwrite the backup file at path, creating its directory if required.

    Raises OSError on failure.
    """
    path = Path(path)
    os.makedirs(path.parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(format_backup(snapshot))
    logger.info("Exported %d light(s) to %s", len(snapshot), path)


def format_inventory(snapshot: Snapshot) -> str:
    lines = ["=== Light Inventory Report ===", f"Scene contains {len(snapshot)} light(s):", ""]
    for index, record in enumerate(snapshot, 1):
        lines.append(f"Light {index}:")
        lines.append(f"  Id: {record.id}")
        lines.append(f"  Type: {record.kind.value}")
        lines.append("  Position: ({:.3f}, {:.3f}, {:.3f})".format(*record.position))
        lines.append("  Direction: ({:.3f}, {:.3f}, {:.3f})".format(*record.direction))
        lines.append(f"  Intensity: {record.intensity:.3f}")
        lines.append(f"  Color: {color_to_string(record.color)}")
        if record.spot is not None:
            lines.append(f"  Inner Angle: {record.spot.inner_angle_deg:.2f}°")
            lines.append(f"  Outer Angle: {record.spot.outer_angle_deg:.2f}°")
        lines.append("")
    lines.append("=== End of Light Report ===")
    return "\n".join(lines)
