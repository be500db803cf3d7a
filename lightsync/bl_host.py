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
Access to the Blender lights for the synchronization pipeline.

Blender values are in Blender units, converted to meters with the scene unit scale. The displayed
length unit (UnitSettings.length_unit) does not change the stored values and is ignored.
"""

import math
from typing import List, Optional, Tuple

import bpy
import bpy.types as T  # noqa N812
from mathutils import Vector

from lightsync.snapshot import LightKind, color_to_rgb8
from lightsync.units import LengthUnit

_light_kinds = {
    "SUN": LightKind.DIRECTIONAL,
    "POINT": LightKind.POINT,
    "SPOT": LightKind.SPOT,
    "AREA": LightKind.UNKNOWN,
}

# Blender lights emit along their local -Z axis
_local_direction = Vector((0.0, 0.0, -1.0))


def light_id(obj: T.Object) -> int:
    return obj.session_uid


def is_light_object(obj: T.Object) -> bool:
    return obj.type == "LIGHT" and obj.data is not None


class BlenderLight:
    def __init__(self, obj: T.Object):
        self._obj = obj

    @property
    def id(self) -> int:
        return light_id(self._obj)

    @property
    def is_enabled(self) -> bool:
        return not (self._obj.hide_viewport or self._obj.hide_render)

    @property
    def kind(self) -> LightKind:
        return _light_kinds.get(self._obj.data.type, LightKind.UNKNOWN)

    @property
    def position(self) -> Tuple[float, float, float]:
        return tuple(self._obj.matrix_world.translation)

    @property
    def direction(self) -> Tuple[float, float, float]:
        return tuple(self._obj.matrix_world.to_3x3() @ _local_direction)

    @property
    def intensity(self) -> float:
        return self._obj.data.energy

    @property
    def color(self) -> Tuple[int, int, int]:
        return color_to_rgb8(self._obj.data.color)

    @property
    def spot_angles(self) -> Optional[Tuple[float, float]]:
        light = self._obj.data
        if light.type != "SPOT":
            return None
        # spot_size is the full cone angle, spot_blend the fraction of the cone that fades out
        outer = math.degrees(light.spot_size) / 2.0
        inner = outer * (1.0 - light.spot_blend)
        return inner, outer


class BlenderScene:
    def __init__(self, scene: T.Scene):
        self._scene = scene

    @property
    def length_unit(self) -> LengthUnit:
        return LengthUnit.METERS

    @property
    def unit_scale(self) -> float:
        unit_settings = self._scene.unit_settings
        if unit_settings.system == "NONE":
            return 1.0
        return unit_settings.scale_length

    def light_objects(self) -> List[T.Object]:
        objects = [obj for obj in self._scene.objects if is_light_object(obj)]
        return sorted(objects, key=lambda obj: obj.name_full)

    def lights(self) -> List[BlenderLight]:
        return [BlenderLight(obj) for obj in self.light_objects()]


class BlenderHost:
    def scene(self) -> Optional[BlenderScene]:
        scene = getattr(bpy.context, "scene", None)
        if scene is None:
            return None
        return BlenderScene(scene)
