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
This module defines the UI of the add-on.
"""

import logging

import bpy

from lightsync.share_data import share_data

logger = logging.getLogger(__name__)


def draw_preferences_ui(prefs, context):
    layout = prefs.layout

    box = layout.box().column()
    box.label(text="Listener")
    row = box.row()
    row.prop(prefs, "host")
    row.prop(prefs, "port")
    box.prop(prefs, "timeout")

    box = layout.box().column()
    box.label(text="Outputs")
    box.prop(prefs, "backup_enabled")
    row = box.row()
    row.enabled = prefs.backup_enabled
    row.prop(prefs, "backup_path")
    box.prop(prefs, "include_timestamp")

    box = layout.box().column()
    box.label(text="Misc")
    box.prop(prefs, "auto_start")
    box.prop(prefs, "log_level")


class LightSyncPanel(bpy.types.Panel):
    bl_label = "LightSync"
    bl_idname = "LIGHTSYNC_PT_lightsync"
    bl_space_type = "VIEW_3D"
    bl_region_type = "UI"
    bl_category = "LightSync"

    def draw(self, context):
        layout = self.layout.column()

        if share_data.is_syncing():
            transport = share_data.transport
            layout.label(text=f"Sending to {transport.host}:{transport.port}")
            layout.label(text=f"Updates: {share_data.dispatcher.run_count}")
            layout.label(text=f"Sent: {transport.sent_count}  Dropped: {transport.dropped_count}")
            layout.operator("lightsync.stop_sync", text="Stop")
        else:
            layout.operator("lightsync.start_sync", text="Start")

        layout.separator()
        layout.operator("lightsync.list_lights", text="List Lights")


classes = (LightSyncPanel,)

register_factory, unregister_factory = bpy.utils.register_classes_factory(classes)


def register():
    register_factory()


def unregister():
    unregister_factory()
