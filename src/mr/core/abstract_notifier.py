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
class AbstractNotifier:
    # Best-effort and fire-and-forget. Implementations log their failures instead of raising.
    # Not an ABC, so that Qt classes like QSystemTrayIcon can implement it, too.
    def notify(self, title: str, body: str) -> None:
        raise NotImplementedError()


class NoNotifier(AbstractNotifier):
    def notify(self, title: str, body: str) -> None:
        pass
