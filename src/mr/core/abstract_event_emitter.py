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
import inspect
import logging
import re
from typing import Callable

from mr.core.events import register_event

logger = logging.getLogger(__name__)


def invoke_direct(fn: Callable, **kwargs) -> None:
    fn(**kwargs)


def _callback_display(callback) -> str:
    if inspect.ismethod(callback):
        return f'{callback.__self__.__class__.__name__}.{callback.__name__}'
    else:
        return f'Function {getattr(callback, "__name__", repr(callback))}'


class AbstractEventEmitter:
    """Emits named events to subscribers. Regular subscribers are notified in the order of
    subscription, followed by the ones who asked to be notified last."""

    _muted: bool
    _first: dict[str, list[Callable]]
    _last: dict[str, list[Callable]]
    _callback_invoker: Callable

    def __init__(self, allowed_events: list[str], callback_invoker: Callable = invoke_direct):
        self._muted = False
        self._callback_invoker = callback_invoker
        self._first = dict()
        self._last = dict()
        for event in allowed_events:
            self._first[event] = list()
            self._last[event] = list()
            register_event(event, self)

    def _matching(self, event_pattern: str) -> list[str]:
        regex = re.compile(event_pattern.replace('*', '.*'))
        return [e for e in self._first if regex.fullmatch(e)]

    # Here event_pattern can contain * characters and other regex syntax
    def on(self, event_pattern: str, callback: Callable, last: bool = False) -> None:
        for event in self._matching(event_pattern):
            target = self._last[event] if last else self._first[event]
            if callback not in target:
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug(f' # {_callback_display(callback)} subscribed to '
                                 f'{self.__class__.__name__}.{event}{" as the LAST handler" if last else ""}')
                target.append(callback)

    def cancel(self, event_pattern: str) -> None:
        for event in self._matching(event_pattern):
            self._first[event].clear()
            self._last[event].clear()

    def unsubscribe(self, callback: Callable) -> None:
        for callables in list(self._first.values()) + list(self._last.values()):
            if callback in callables:
                callables.remove(callback)

    def unsubscribe_one(self, callback: Callable, event_pattern: str) -> None:
        for event in self._matching(event_pattern):
            if callback in self._first[event]:
                self._first[event].remove(callback)
            if callback in self._last[event]:
                self._last[event].remove(callback)

    def _emit(self, event: str, params: dict[str, any], carry: any = None, force: bool = False) -> None:
        if event not in self._first:
            raise KeyError(f'{self.__class__.__name__} does not emit {event}')
        if self._muted and not force:
            return
        params['event'] = event
        if carry is not None:
            params['carry'] = carry
        # Copy, so that the subscribers can unsubscribe themselves while being notified
        for callback in list(self._first[event]) + list(self._last[event]):
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(f' ! {_callback_display(callback)}({params})')
            self._callback_invoker(callback, **params)

    def is_muted(self) -> bool:
        return self._muted

    def unmute(self) -> None:
        logger.debug('Unmuting events')
        self._muted = False

    def mute(self) -> None:
        logger.debug('Muting events')
        self._muted = True
