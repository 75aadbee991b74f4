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
import math

logger = logging.getLogger(__name__)

PHASE_WORK = 'work'
PHASE_BREAK = 'break'


def format_remaining(remaining: datetime.timedelta) -> str:
    """MM:SS, with seconds rounded up, so that a break of 2s starts at 00:02 and never shows 00:00."""
    seconds = max(0, math.ceil(remaining.total_seconds()))
    minutes, seconds = divmod(seconds, 60)
    return f'{minutes:02d}:{seconds:02d}'


class Cycle:
    """The work / break cycle. It lives in memory only and is recreated on every run."""

    _phase: str
    _work_interval: datetime.timedelta
    _break_duration: datetime.timedelta
    _phase_started_at: datetime.datetime
    _phase_ends_at: datetime.datetime
    _break_dismissed: bool
    _break_completed: bool
    _generation: int

    def __init__(self,
                 work_interval: datetime.timedelta,
                 break_duration: datetime.timedelta,
                 now: datetime.datetime):
        self._work_interval = work_interval
        self._break_duration = break_duration
        self._generation = 0
        self._break_dismissed = True
        self._break_completed = False
        self._enter(PHASE_WORK, now, work_interval)

    def _enter(self, phase: str, now: datetime.datetime, duration: datetime.timedelta) -> None:
        self._phase = phase
        self._phase_started_at = now
        self._phase_ends_at = now + duration
        self._generation += 1
        logger.debug(f'Cycle: entered {phase} until {self._phase_ends_at} (generation {self._generation})')

    def work(self, now: datetime.datetime) -> None:
        self._enter(PHASE_WORK, now, self._work_interval)

    def rest(self, now: datetime.datetime) -> None:
        self._break_dismissed = False
        self._break_completed = False
        self._enter(PHASE_BREAK, now, self._break_duration)

    def dismiss(self) -> bool:
        """Marks the current break as dismissed. Returns False if it was dismissed already,
        which means the caller lost the race and must not end the break again."""
        if self._phase != PHASE_BREAK or self._break_dismissed:
            return False
        self._break_dismissed = True
        return True

    def complete(self) -> bool:
        if self._phase != PHASE_BREAK or self._break_completed:
            return False
        self._break_completed = True
        return True

    def invalidate(self) -> None:
        # Any tick scheduled before this call becomes stale
        self._generation += 1

    def get_phase(self) -> str:
        return self._phase

    def is_working(self) -> bool:
        return self._phase == PHASE_WORK

    def is_resting(self) -> bool:
        return self._phase == PHASE_BREAK

    def get_work_interval(self) -> datetime.timedelta:
        return self._work_interval

    def get_break_duration(self) -> datetime.timedelta:
        return self._break_duration

    def get_phase_started_at(self) -> datetime.datetime:
        return self._phase_started_at

    def get_phase_ends_at(self) -> datetime.datetime:
        return self._phase_ends_at

    def get_remaining(self, now: datetime.datetime) -> datetime.timedelta:
        return self._phase_ends_at - now

    def is_break_dismissed(self) -> bool:
        return self._break_dismissed

    def is_break_completed(self) -> bool:
        return self._break_completed

    def get_generation(self) -> int:
        return self._generation

    def __str__(self):
        return f'Cycle({self._phase}, ends at {self._phase_ends_at}, generation {self._generation})'
