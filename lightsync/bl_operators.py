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
This module define Blender Operators types for the addon.
"""

import logging

import bpy

from lightsync.backup import format_inventory, write_backup
from lightsync.blacklist import BlacklistTracker
from lightsync.bl_host import BlenderHost
from lightsync.bl_utils import config_from_prefs
from lightsync.dispatcher import snapshot_scene
from lightsync.errors import LightSyncError
from lightsync.handlers import current_light_ids, set_handlers
from lightsync.share_data import share_data
from lightsync.snapshot import SnapshotBuilder

logger = logging.getLogger(__name__)


def start_sync():
    config = config_from_prefs()
    share_data.start_session(BlenderHost(), config)
    share_data.watcher.reset(current_light_ids(bpy.context.scene))
    set_handlers(True)
    # initial full state for the listener
    share_data.dispatcher.on_modified(None)


def stop_sync():
    if share_data.is_syncing():
        set_handlers(False)
    share_data.stop_session()


class StartSyncOperator(bpy.types.Operator):
    """Send the lights to the listener each time they change"""

    bl_idname = "lightsync.start_sync"
    bl_label = "Start Light Sync"
    bl_options = {"REGISTER"}

    @classmethod
    def poll(cls, context):
        return not share_data.is_syncing()

    def execute(self, context):
        try:
            start_sync()
        except Exception as e:
            logger.error("start_sync failed: %s", e, exc_info=True)
            self.report({"ERROR"}, f"LightSync: cannot start synchronization ({e})")
            stop_sync()
            return {"CANCELLED"}
        return {"FINISHED"}


class StopSyncOperator(bpy.types.Operator):
    """Stop sending the lights to the listener"""

    bl_idname = "lightsync.stop_sync"
    bl_label = "Stop Light Sync"
    bl_options = {"REGISTER"}

    @classmethod
    def poll(cls, context):
        return share_data.is_syncing()

    def execute(self, context):
        stop_sync()
        return {"FINISHED"}


class ListLightsOperator(bpy.types.Operator):
    """Print the lights of the scene and export them to the backup file"""

    bl_idname = "lightsync.list_lights"
    bl_label = "List Lights"
    bl_options = {"REGISTER"}

    @classmethod
    def poll(cls, context):
        return context.scene is not None

    def execute(self, context):
        if share_data.is_syncing():
            blacklist = share_data.dispatcher.blacklist
        else:
            blacklist = BlacklistTracker()

        try:
            snapshot = snapshot_scene(BlenderHost(), SnapshotBuilder(blacklist))
        except LightSyncError as e:
            self.report({"ERROR"}, f"LightSync: {e}")
            return {"CANCELLED"}

        print(format_inventory(snapshot))

        path = config_from_prefs().backup_path
        try:
            write_backup(snapshot, path)
        except OSError as e:
            logger.warning("Failed to export light data to %s: %s", path, e)
            self.report({"WARNING"}, f"LightSync: failed to export light data to {path}")
        else:
            self.report({"INFO"}, f"LightSync: {len(snapshot)} light(s) exported to {path}")

        return {"FINISHED"}


classes = (
    StartSyncOperator,
    StopSyncOperator,
    ListLightsOperator,
)

register_factory, unregister_factory = bpy.utils.register_classes_factory(classes)


def register():
    register_factory()


def unregister():
    stop_sync()
    unregister_factory()
