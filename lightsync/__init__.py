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

import atexit
import logging
import os
from pathlib import Path
from typing import Dict, Any

bl_info: Dict[str, Any] = {
    "name": "LightSync",
    "author": "Ubisoft Animation Studio",
    "description": "Send the scene lights to an external application as they change",
    "version": (0, 1, 0),
    "blender": (2, 83, 0),
    "location": "View3D > Sidebar > LightSync",
    "warning": "",
    "wiki_url": "",
    "tracker_url": "",
    "category": "Lighting",
}

__version__ = f"v{bl_info['version'][0]}.{bl_info['version'][1]}.{bl_info['version'][2]}"

logger = logging.getLogger(__name__)
logger.propagate = False
MODULE_PATH = Path(__file__).parent.parent


def cleanup():
    from lightsync.bl_operators import stop_sync

    stop_sync()


class Formatter(logging.Formatter):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

    def format(self, record: logging.LogRecord):
        """
        The role of this custom formatter is:
        - append filepath and lineno to logging format but shorten path to files, to make logs more clear
        - to append "./" at the begining to permit going to the line quickly with VS Code CTRL+click from terminal
        """
        s = super().format(record)
        try:
            pathname = Path(record.pathname).relative_to(MODULE_PATH)
        except ValueError:
            pathname = Path(record.pathname)
        s += f" [{os.curdir}{os.sep}{pathname}:{record.lineno}]"
        return s


def get_logs_directory():
    def _get_logs_directory():
        import tempfile

        if "LIGHTSYNC_USER_LOGS_DIR" in os.environ:
            base_shared_path = Path(os.environ["LIGHTSYNC_USER_LOGS_DIR"])
            if os.path.exists(base_shared_path):
                return os.fspath(base_shared_path)
            logger.error(
                f"LIGHTSYNC_USER_LOGS_DIR env var set to {base_shared_path}, but directory does not exists. Falling back to default location."
            )
        return os.path.join(os.fspath(tempfile.gettempdir()), "lightsync")

    dir = _get_logs_directory()
    if not os.path.exists(dir):
        os.makedirs(dir)
    return dir


def get_log_file():
    from lightsync.share_data import share_data

    return os.path.join(get_logs_directory(), f"lightsync_logs_{share_data.run_id}.log")


def _auto_start():
    from lightsync.bl_operators import start_sync
    from lightsync.bl_utils import get_lightsync_prefs
    from lightsync.share_data import share_data

    try:
        if get_lightsync_prefs().auto_start and not share_data.is_syncing():
            start_sync()
    except Exception as e:
        logger.error("Automatic start failed: %s", e, exc_info=True)

    # Returning None from a timer unregister it
    return None


def register():
    import bpy
    from lightsync import bl_operators, bl_panels, bl_preferences

    if len(logger.handlers) == 0:
        logger.setLevel(logging.WARNING)
        formatter = Formatter("{asctime} {levelname[0]} {name:<36}  - {message:<80}", style="{")
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        handler = logging.FileHandler(get_log_file())
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    bl_preferences.register()
    bl_operators.register()
    bl_panels.register()

    atexit.register(cleanup)
    bpy.app.timers.register(_auto_start, first_interval=0.5)


def unregister():
    import bpy
    from lightsync import bl_operators, bl_panels, bl_preferences

    if bpy.app.timers.is_registered(_auto_start):
        bpy.app.timers.unregister(_auto_start)

    cleanup()

    atexit.unregister(cleanup)

    bl_panels.unregister()
    bl_operators.unregister()
    bl_preferences.unregister()
