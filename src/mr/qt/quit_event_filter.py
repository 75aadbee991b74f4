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
from typing import Callable

from PySide6.QtCore import QObject, QEvent

logger = logging.getLogger(__name__)


class QuitEventFilter(QObject):
    """Routes platform quit requests (Dock "Quit", Cmd+Q, logout) to the given callback
    before Qt starts closing windows. Install it on the application object."""

    _on_quit: Callable[[], None]

    def __init__(self, on_quit: Callable[[], None]):
        super().__init__()
        self._on_quit = on_quit

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if event.type() == QEvent.Type.Quit:
            logger.debug(f'Quit requested via {watched.__class__.__name__}')
            self._on_quit()
        return False
