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
This module defines the add-on preferences.

Defaults come from the environment (see config.SyncConfig.from_env), so that they can be set for a
whole studio.
"""

import logging
import os

import bpy

from lightsync.config import SyncConfig
from lightsync.bl_panels import draw_preferences_ui

logger = logging.getLogger(__name__)

_env_config = SyncConfig.from_env()


def set_log_level(self, value):
    logging.getLogger(__package__).setLevel(value)
    logger.log(value, "Logging level changed")


class LightSyncPreferences(bpy.types.AddonPreferences):
    bl_idname = __package__

    host: bpy.props.StringProperty(name="Host", default=_env_config.host)
    port: bpy.props.IntProperty(name="Port", default=_env_config.port, min=1, max=65535)
    timeout: bpy.props.FloatProperty(
        name="Send Timeout", description="Seconds before a send is abandoned", default=_env_config.timeout, min=0.1
    )

    backup_enabled: bpy.props.BoolProperty(
        name="Backup File",
        description="Also write the lights to a text file on each update",
        default=_env_config.backup_enabled,
    )
    backup_path: bpy.props.StringProperty(
        name="Backup Path", default=_env_config.backup_path, subtype="FILE_PATH"
    )
    include_timestamp: bpy.props.BoolProperty(
        name="Timestamp", description="Add the local time to each message", default=_env_config.include_timestamp
    )

    auto_start: bpy.props.BoolProperty(
        name="Start On Load",
        description="Start the synchronization when the add-on is enabled",
        default=os.environ.get("LIGHTSYNC_AUTO_START") is not None,
    )

    def get_log_level(self):
        return logging.getLogger(__package__).level

    log_level: bpy.props.EnumProperty(
        name="Log Level",
        description="Logging level to use",
        items=[
            ("ERROR", "Error", "", logging.ERROR),
            ("WARNING", "Warning", "", logging.WARNING),
            ("INFO", "Info", "", logging.INFO),
            ("DEBUG", "Debug", "", logging.DEBUG),
        ],
        set=set_log_level,
        get=get_log_level,
    )

    def draw(self, context):
        draw_preferences_ui(self, context)


classes = (LightSyncPreferences,)

register_factory, unregister_factory = bpy.utils.register_classes_factory(classes)


def register():
    register_factory()


def unregister():
    unregister_factory()
