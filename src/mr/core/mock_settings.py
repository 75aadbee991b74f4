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

from mr.core import events
from mr.core.abstract_event_emitter import invoke_direct
from mr.core.abstract_settings import AbstractSettings

logger = logging.getLogger(__name__)


class MockSettings(AbstractSettings):
    _settings: dict[str, str]

    def __init__(self, values: dict[str, str] | None = None):
        super().__init__(invoke_direct)
        self._settings = dict() if values is None else dict(values)

    def get(self, name: str) -> str:
        if name in self._settings:
            return self._settings[name]
        else:
            return self._defaults[name]

    def set(self, values: dict[str, str]) -> None:
        old_values: dict[str, str] = dict()
        for name in values.keys():
            old_value = self.get(name)
            if old_value != values[name]:
                old_values[name] = old_value
        if len(old_values) > 0:
            params = {
                'old_values': old_values,
                'new_values': values,
            }
            self._emit(events.BeforeSettingsChanged, params, None)
            for name in old_values.keys():  # This is not a typo, we've just filtered this list
                # to only contain settings which actually changed.
                self._settings[name] = values[name]
            self._emit(events.AfterSettingsChanged, params, None)

    def location(self) -> str:
        return "N/A"

    def clear(self) -> None:
        self._settings = {}
