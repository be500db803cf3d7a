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
This module defines the Blender handlers that feed light changes to the synchronization pipeline.
"""

import logging
from typing import Set

import bpy
import bpy.types as T  # noqa N812
from bpy.app.handlers import persistent

from lightsync.bl_host import BlenderScene, is_light_object, light_id
from lightsync.share_data import share_data

logger = logging.getLogger(__name__)


def current_light_ids(scene: T.Scene) -> Set[int]:
    return {light_id(obj) for obj in BlenderScene(scene).light_objects()}


def modified_light_ids(scene: T.Scene, depsgraph: T.Depsgraph) -> Set[int]:
    modified = set()
    updated_lights = set()
    for update in depsgraph.updates:
        datablock = update.id.original
        if isinstance(datablock, T.Object) and is_light_object(datablock):
            modified.add(light_id(datablock))
        elif isinstance(datablock, T.Light):
            updated_lights.add(datablock)

    if updated_lights:
        # a Light datablock update (color, energy, ...) applies to all the objects that use it
        for obj in BlenderScene(scene).light_objects():
            if obj.data in updated_lights:
                modified.add(light_id(obj))
    return modified


@persistent
def on_depsgraph_update(scene, depsgraph):
    watcher = share_data.watcher
    if watcher is None:
        return

    # this runs inside Blender's notification: nothing may escape
    try:
        watcher.update(current_light_ids(scene), modified_light_ids(scene, depsgraph))
    except Exception as e:
        logger.error("Light update handler failed: %s", e, exc_info=True)


@persistent
def on_load(dummy):
    logger.info("on_load")
    if share_data.watcher is None:
        return
    try:
        share_data.dispatcher.blacklist.clear()
        share_data.watcher.reset(current_light_ids(bpy.context.scene))
        share_data.watcher.observer.on_modified(None)
    except Exception as e:
        logger.error("Light load handler failed: %s", e, exc_info=True)


def set_handlers(connect: bool):
    try:
        if connect:
            bpy.app.handlers.depsgraph_update_post.append(on_depsgraph_update)
            bpy.app.handlers.load_post.append(on_load)
        else:
            bpy.app.handlers.depsgraph_update_post.remove(on_depsgraph_update)
            bpy.app.handlers.load_post.remove(on_load)
    except ValueError as e:
        logger.warning("set_handlers(%s): %s", connect, e)


def handlers_registered() -> bool:
    return on_depsgraph_update in bpy.app.handlers.depsgraph_update_post
