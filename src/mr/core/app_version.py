#  Move Reminder - break reminder that is hard to ignore
#  Copyright (c) 2023 Constantine Kulak
#
#  This program is free software: you can redistribute it and/or modify
#  it under the terms of the GNU General Public License as published by
#  the Free Software Foundation; either version 3 of the License, or
#  (at your option) any later version.
#
#  This program is distributed in the hope that it will be useful,
#  but WITHOUT ANY WARRANTY; without even the implied warranty of
#  MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#  GNU General Public License for more details.
#
#  You should have received a copy of the GNU General Public License
#  along with this program.  If not, see <https://www.gnu.org/licenses/>.
import platform
import sys

from semantic_version import Version

# Keep in sync with pyproject.toml
APP_VERSION = '1.0.0'


def get_current_version() -> Version:
    return Version(APP_VERSION)


def get_versions(qt_version: str | None = None, qt_platform: str | None = None) -> str:
    res = f'- Move Reminder: {get_current_version()}\n'
    if qt_version is not None:
        res += f'- Qt: {qt_version} ({qt_platform})\n'
    res += (f'- Python: {sys.version}\n'
            f'- Platform: {platform.system()} {platform.release()} {platform.version()}\n')
    return res
