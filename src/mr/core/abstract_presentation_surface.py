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

logger = logging.getLogger(__name__)


class AbstractPresentationSurface:
    """Whatever renders the break and raises user events back into the controller. The controller
    never touches GUI objects directly, only this interface. It is a plain class rather than an ABC,
    because Qt widgets can't be combined with ABCMeta."""

    _skip_callback: Callable[[], None] | None
    _acknowledge_callback: Callable[[], None] | None
    _close_callback: Callable[[], None] | None
    _quit_callback: Callable[[], None] | None

    def __init__(self):
        self._skip_callback = None
        self._acknowledge_callback = None
        self._close_callback = None
        self._quit_callback = None

    def on_skip_requested(self, callback: Callable[[], None]) -> None:
        self._skip_callback = callback

    def on_acknowledge_requested(self, callback: Callable[[], None]) -> None:
        self._acknowledge_callback = callback

    def on_close_attempt(self, callback: Callable[[], None]) -> None:
        self._close_callback = callback

    def on_quit_requested(self, callback: Callable[[], None]) -> None:
        self._quit_callback = callback

    def _fire(self, name: str, callback: Callable[[], None] | None) -> None:
        if callback is None:
            logger.warning(f'{self.__class__.__name__}: Nobody listens to {name}')
        else:
            logger.debug(f'{self.__class__.__name__}: {name}')
            callback()

    def request_skip(self) -> None:
        self._fire('skip', self._skip_callback)

    def request_acknowledge(self) -> None:
        self._fire('acknowledge', self._acknowledge_callback)

    def attempt_close(self) -> None:
        self._fire('close attempt', self._close_callback)

    def request_quit(self) -> None:
        self._fire('quit', self._quit_callback)

    # Override those in the implementations

    def open_break_view(self) -> None:
        raise NotImplementedError()

    def close_break_view(self) -> None:
        raise NotImplementedError()

    def set_countdown_text(self, text: str) -> None:
        raise NotImplementedError()

    def set_acknowledge_enabled(self, enabled: bool) -> None:
        raise NotImplementedError()

    def set_acknowledge_label(self, text: str) -> None:
        raise NotImplementedError()

    def show_hint(self, text: str) -> None:
        pass

    def request_focus(self) -> None:
        pass
