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
Exception types raised inside the synchronization pipeline.

Only the outermost boundaries (EventDispatcher.dispatch and the transport workers) turn these into
"log and drop". Everything below them lets the exceptions propagate.
"""


class LightSyncError(Exception):
    """Base class for all the errors of the pipeline."""


class HostUnavailable(LightSyncError):
    """There is no active scene or document to read lights from."""


class ConversionFailure(LightSyncError):
    """The data of a single light cannot be converted. The light is skipped."""


class DegenerateInputError(ConversionFailure, ValueError):
    """A direction vector cannot be normalized (zero length or not finite)."""


class TransportFailure(LightSyncError):
    """A payload could not be delivered to the listener."""

    def __init__(self, message, address=None):
        super().__init__(message)
        self.address = address
