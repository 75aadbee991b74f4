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

from mr.core.abstract_notifier import AbstractNotifier
from mr.core.shell import run_detached, is_mac, is_linux, applescript_string

logger = logging.getLogger(__name__)


class CommandNotifier(AbstractNotifier):
    """Shows a native notification by shelling out to osascript (macOS) or notify-send (Linux)."""

    _sound: str | None
    _wait: bool

    def __init__(self, sound: str | None = None, wait: bool = False):
        self._sound = sound
        self._wait = wait

    def build_command(self, title: str, body: str) -> list[str] | None:
        if is_mac():
            script = f'display notification {applescript_string(body)} with title {applescript_string(title)}'
            if self._sound:
                script += f' sound name {applescript_string(self._sound)}'
            return ['osascript', '-e', script]
        elif is_linux():
            return ['notify-send', '--app-name=Move Reminder', '--urgency=critical', title, body]
        return None

    def notify(self, title: str, body: str) -> None:
        cmd = self.build_command(title, body)
        if cmd is None:
            logger.info(f'Native notifications are not supported on this platform, skipping "{title}"')
            return
        logger.debug(f'Showing notification "{title}"')
        run_detached('Notification', cmd, self._wait)
