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
from __future__ import annotations

import datetime
from typing import Callable

from mr.core.abstract_notifier import AbstractNotifier
from mr.core.abstract_presentation_surface import AbstractPresentationSurface
from mr.core.abstract_timer import AbstractTimer

START_TIME = datetime.datetime(2024, 3, 1, 9, 0, 0, tzinfo=datetime.timezone.utc)


class FakeClock:
    """Time only moves when the test says so."""
    _now: datetime.datetime

    def __init__(self, now: datetime.datetime = START_TIME):
        self._now = now

    def __call__(self) -> datetime.datetime:
        return self._now

    def advance(self, seconds: float) -> datetime.datetime:
        self._now += datetime.timedelta(seconds=seconds)
        return self._now


class ManualTimer(AbstractTimer):
    """Records what was scheduled and fires only when asked to."""
    _callback: Callable[[dict | None, datetime.datetime | None], None] | None
    _params: dict | None
    _once: bool
    _active: bool
    schedules: list[float]

    def __init__(self):
        self._callback = None
        self._params = None
        self._once = False
        self._active = False
        self.schedules = list()

    def schedule(self,
                 ms: float,
                 callback: Callable[[dict | None, datetime.datetime | None], None],
                 params: dict | None,
                 once: bool = False) -> None:
        self._callback = callback
        self._params = params
        self._once = once
        self._active = True
        self.schedules.append(ms)

    def cancel(self) -> None:
        self._active = False

    def is_active(self) -> bool:
        return self._active

    def get_params(self) -> dict | None:
        return self._params

    def fire(self) -> None:
        if not self._active:
            raise RuntimeError('Firing an inactive timer')
        callback, params = self._callback, self._params
        if self._once:
            self._active = False
        callback(params, None)

    def fire_stale(self, params: dict | None) -> None:
        """Simulates a tick that was already queued when the timer got rescheduled or cancelled."""
        self._callback(params, None)


class RecordingSurface(AbstractPresentationSurface):
    calls: list[tuple]
    countdown: str | None
    acknowledge_enabled: bool | None
    acknowledge_label: str | None
    hint: str | None
    is_open: bool

    def __init__(self):
        super().__init__()
        self.calls = list()
        self.countdown = None
        self.acknowledge_enabled = None
        self.acknowledge_label = None
        self.hint = None
        self.is_open = False

    def open_break_view(self) -> None:
        self.calls.append(('open',))
        self.is_open = True

    def close_break_view(self) -> None:
        self.calls.append(('close',))
        self.is_open = False

    def set_countdown_text(self, text: str) -> None:
        self.calls.append(('countdown', text))
        self.countdown = text

    def set_acknowledge_enabled(self, enabled: bool) -> None:
        self.calls.append(('acknowledge_enabled', enabled))
        self.acknowledge_enabled = enabled

    def set_acknowledge_label(self, text: str) -> None:
        self.calls.append(('acknowledge_label', text))
        self.acknowledge_label = text

    def show_hint(self, text: str) -> None:
        self.calls.append(('hint', text))
        self.hint = text

    def request_focus(self) -> None:
        self.calls.append(('focus',))

    def count(self, name: str) -> int:
        return len([c for c in self.calls if c[0] == name])

    def countdown_texts(self) -> list[str]:
        return [c[1] for c in self.calls if c[0] == 'countdown']


class FailingSurface(RecordingSurface):
    def open_break_view(self) -> None:
        super().open_break_view()
        raise RuntimeError('No display')

    def request_focus(self) -> None:
        super().request_focus()
        raise RuntimeError('Focus stolen')


class RecordingNotifier(AbstractNotifier):
    notifications: list[tuple[str, str]]

    def __init__(self):
        self.notifications = list()

    def notify(self, title: str, body: str) -> None:
        self.notifications.append((title, body))


class FailingNotifier(RecordingNotifier):
    def notify(self, title: str, body: str) -> None:
        super().notify(title, body)
        raise OSError('Notification daemon is not running')
