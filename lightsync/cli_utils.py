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
Logging setup shared by the command line tools.
"""

import argparse
import logging
import logging.handlers

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s [%(pathname)s:%(lineno)d]"
LOG_FILE_MAX_BYTES = 16 * 1024 * 1024
LOG_FILE_BACKUP_COUNT = 4


def init_logging(args: argparse.Namespace):
    """
    Attach console and optional rotating file handlers to the root logger.
    """
    level = getattr(logging, args.log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {args.log_level}")

    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter(fmt=LOG_FORMAT)

    handlers = [logging.StreamHandler()]
    if args.log_file:
        handlers.append(
            logging.handlers.RotatingFileHandler(
                args.log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUP_COUNT
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    if args.log_file:
        root.info("Logging to file %s", args.log_file)


def add_logging_cli_args(parser: argparse.ArgumentParser):
    parser.add_argument("--log-level", default="INFO", help="Logging level: DEBUG, INFO, WARNING or ERROR.")
    parser.add_argument("--log-file", help="Also log to this file, rotated every 16 MB.")
