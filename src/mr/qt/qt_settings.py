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
import logging

from PySide6 import QtCore

from mr.core import events
from mr.core.abstract_settings import AbstractSettings
from mr.qt.qt_invoker import invoke_in_main_thread

logger = logging.getLogger(__name__)


class QtSettings(AbstractSettings):
    """Preferences stored with QSettings, i.e. in the registry on Windows, a plist on macOS
    and an ini file on Linux."""

    _settings: QtCore.QSettings
    _app_name: str

    def __init__(self, app_name: str = 'move-reminder'):
        self._app_name = app_name
        super().__init__(invoke_in_main_thread)
        self._settings = QtCore.QSettings("move-reminder", app_name)

    def set(self, values: dict[str, str], force_fire=False) -> None:
        old_values: dict[str, str] = dict()
        for name in values.keys():
            old_value = self.get(name)
            if old_value != values[name] or force_fire:
                old_values[name] = old_value
        if len(old_values) > 0:
            params = {
                'old_values': old_values,
                'new_values': values,
            }
            self._emit(events.BeforeSettingsChanged, params)
            for name in old_values.keys():  # This is not a typo, we've just filtered this list
                # to only contain settings which actually changed.
                self._settings.setValue(name, values[name])
            self._settings.sync()
            self._emit(events.AfterSettingsChanged, params)

    def get(self, name: str) -> str:
        return str(self._settings.value(name, self._defaults[name]))

    def location(self) -> str:
        return self._settings.fileName()

    def clear(self) -> None:
        self._settings.clear()
