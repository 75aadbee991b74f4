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
import datetime
import logging
import threading
from typing import Callable

from PySide6.QtCore import Qt, QTimer

from mr.core.abstract_timer import AbstractTimer

logger = logging.getLogger(__name__)


class QtTimer(AbstractTimer):
    _timer: QTimer
    _callback: Callable[[dict | None, datetime.datetime], None] | None
    _params: dict | None
    _once: bool
    _name: str

    def __init__(self, name: str):
        self._name = name
        logger.debug(f'Creating timer {name}')
        self._callback = None
        self._params = None
        self._once = False
        self._timer = QTimer()
        self._timer.setObjectName(name)
        # Coarse timers may fire up to 5% early, which is a lot for a 25-minute work interval
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._call)

    def _call(self) -> None:
        if self._once:
            self._timer.stop()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f'QtTimer - callback, {threading.get_ident()}, {self._name}')
        if self._callback is not None:
            self._callback(self._params, datetime.datetime.now(datetime.timezone.utc))

    def schedule(self,
                 ms: float,
                 callback: Callable[[dict | None, datetime.datetime], None],
                 params: dict | None,
                 once: bool = False) -> None:
        # Must be called from the GUI thread, as QTimer can't be started from another one
        self._callback = callback
        self._params = params
        self._once = once
        self._timer.start(max(0, int(ms)))

    def cancel(self) -> None:
        self._timer.stop()

    def is_active(self) -> bool:
        return self._timer.isActive()

    def get_name(self) -> str:
        return self._name
