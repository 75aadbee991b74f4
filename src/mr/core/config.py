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
import math
import re
from dataclasses import dataclass, field

CLOSE_POLICY_QUIT = 'quit'
CLOSE_POLICY_BLOCK = 'block'
CLOSE_POLICY_BLOCK_UNTIL_COMPLETE = 'block-until-complete'
CLOSE_POLICIES = (CLOSE_POLICY_QUIT, CLOSE_POLICY_BLOCK, CLOSE_POLICY_BLOCK_UNTIL_COMPLETE)

BREAK_END_ACKNOWLEDGE = 'acknowledge'
BREAK_END_AUTO = 'auto'
BREAK_ENDS = (BREAK_END_ACKNOWLEDGE, BREAK_END_AUTO)

DEFAULT_WORK_INTERVAL = datetime.timedelta(minutes=25)
DEFAULT_BREAK_DURATION = datetime.timedelta(minutes=5)

_DURATION_PART = re.compile(r'(\d+(?:\.\d*)?|\.\d+)(ms|h|m|s)')
_DURATION_UNITS = {
    'h': 3600.0,
    'm': 60.0,
    's': 1.0,
    'ms': 0.001,
}


def parse_duration(text: str) -> datetime.timedelta:
    """Parses Go-style durations like "25m", "10s", "1h30m" or "500ms". A bare number means seconds."""
    s = text.strip() if text is not None else ''
    if s == '':
        raise ValueError('Empty duration')
    try:
        seconds = float(s)
    except ValueError:
        seconds = 0.0
        pos = 0
        for m in _DURATION_PART.finditer(s):
            if m.start() != pos:
                break
            seconds += float(m.group(1)) * _DURATION_UNITS[m.group(2)]
            pos = m.end()
        if pos != len(s):
            raise ValueError(f'Invalid duration "{text}"')
    if not math.isfinite(seconds) or seconds <= 0:
        raise ValueError(f'Duration must be positive, got "{text}"')
    return datetime.timedelta(seconds=seconds)


def format_duration(td: datetime.timedelta) -> str:
    """Compact human-readable form for logs, e.g. 1h30m, 25m, 2s, 500ms."""
    ms = round(td.total_seconds() * 1000)
    if ms < 1000:
        return f'{ms}ms'
    total = ms // 1000
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    res = ''
    if h:
        res += f'{h}h'
    if m:
        res += f'{m}m'
    if s or res == '':
        res += f'{s}s'
    return res


@dataclass(frozen=True)
class ReminderConfig:
    work_interval: datetime.timedelta = DEFAULT_WORK_INTERVAL
    break_duration: datetime.timedelta = DEFAULT_BREAK_DURATION
    verbose: bool = False
    report_interval: datetime.timedelta = datetime.timedelta(seconds=10)
    verbose_report_interval: datetime.timedelta = datetime.timedelta(seconds=1)
    countdown_interval: datetime.timedelta = datetime.timedelta(seconds=1)
    # Zero disables focus retention
    focus_interval: datetime.timedelta = datetime.timedelta(milliseconds=500)
    close_policy: str = CLOSE_POLICY_BLOCK_UNTIL_COMPLETE
    break_end: str = BREAK_END_ACKNOWLEDGE
    notification_title: str = 'Move Break Time!'
    notification_message: str = 'Stand up, stretch, and move around. Take a break from your computer!'
    notification_sound: str = 'Glass'
    break_title: str = '🚶 Time to Move! 🚶'
    break_message: str = 'Stand up, stretch, and move around.\nTake a break from your computer!'
    skip_shortcut: str = 'S'
    quit_shortcut: str = 'Ctrl+Q'
    fullscreen: bool = field(default=True)

    def __post_init__(self):
        zero = datetime.timedelta(0)
        for name in ('work_interval', 'break_duration', 'report_interval',
                     'verbose_report_interval', 'countdown_interval'):
            if getattr(self, name) <= zero:
                raise ValueError(f'{name} must be positive')
        if self.focus_interval < zero:
            raise ValueError('focus_interval must not be negative')
        if self.close_policy not in CLOSE_POLICIES:
            raise ValueError(f'Unknown close policy "{self.close_policy}", expected one of {CLOSE_POLICIES}')
        if self.break_end not in BREAK_ENDS:
            raise ValueError(f'Unknown break end mode "{self.break_end}", expected one of {BREAK_ENDS}')

    def report_cadence(self) -> datetime.timedelta:
        return self.verbose_report_interval if self.verbose else self.report_interval

    def is_focus_retention_enabled(self) -> bool:
        return self.focus_interval > datetime.timedelta(0)

    def skip_hint(self) -> str:
        return f"Press '{self.skip_shortcut}' to skip • {self.quit_shortcut} to quit app"
