from __future__ import annotations
import bpy
from typing import TYPE_CHECKING

from lightsync.config import SyncConfig

if TYPE_CHECKING:
    from lightsync.bl_preferences import LightSyncPreferences


def get_lightsync_prefs() -> LightSyncPreferences:
    return bpy.context.preferences.addons[__package__].preferences


def config_from_prefs() -> SyncConfig:
    prefs = get_lightsync_prefs()
    config = SyncConfig.from_env()
    config.host = prefs.host
    config.port = prefs.port
    config.timeout = prefs.timeout
    config.backup_enabled = prefs.backup_enabled
    config.backup_path = bpy.path.abspath(prefs.backup_path)
    config.include_timestamp = prefs.include_timestamp
    return config
