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
import threading
from typing import Callable

from PySide6.QtCore import QObject, QEvent, QCoreApplication

logger = logging.getLogger(__name__)

_INVOKE_EVENT_TYPE = QEvent.Type(QEvent.registerEventType())


class _InvokeEvent(QEvent):
    fn: Callable
    kwargs: dict

    def __init__(self, fn: Callable, kwargs: dict):
        super().__init__(_INVOKE_EVENT_TYPE)
        self.fn = fn
        self.kwargs = kwargs


class _Invoker(QObject):
    def event(self, e: QEvent) -> bool:
        if e.type() == _INVOKE_EVENT_TYPE:
            e.fn(**e.kwargs)
            return True
        return super().event(e)


_invoker: _Invoker | None = None


def invoke_in_main_thread(fn: Callable, **kwargs) -> None:
    # Qt widgets and timers may only be touched from the GUI thread. Calls made from other threads
    # are posted to the event loop and executed there, in order.
    global _invoker
    if threading.current_thread() is threading.main_thread():
        fn(**kwargs)
        return
    if _invoker is None:
        app = QCoreApplication.instance()
        if app is None:
            raise RuntimeError('Cannot invoke in the main thread before QApplication is created')
        _invoker = _Invoker()
        _invoker.moveToThread(app.thread())
    logger.debug(f'Posting {fn} to the main thread from {threading.get_ident()}')
    QCoreApplication.postEvent(_invoker, _InvokeEvent(fn, kwargs))
