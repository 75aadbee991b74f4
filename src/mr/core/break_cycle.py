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

from mr.core.abstract_event_emitter import AbstractEventEmitter, invoke_direct
from mr.core.abstract_notifier import AbstractNotifier
from mr.core.abstract_presentation_surface import AbstractPresentationSurface
from mr.core.abstract_timer import AbstractTimer
from mr.core.config import ReminderConfig, CLOSE_POLICY_QUIT, CLOSE_POLICY_BLOCK_UNTIL_COMPLETE, \
    BREAK_END_AUTO, format_duration
from mr.core.cycle import Cycle, PHASE_WORK, PHASE_BREAK, format_remaining
from mr.core.events import WorkStarted, WorkTick, BreakStarted, BreakTick, BreakCompleted, BreakEnded, \
    CloseBlocked, Quitting

logger = logging.getLogger(__name__)

REASON_ACKNOWLEDGE = 'acknowledge'
REASON_SKIP = 'skip'
REASON_CLOSE = 'close'
REASON_AUTO = 'auto'

BREAK_COMPLETE_TEXT = 'Break Complete!'
RETURN_TO_WORK_LABEL = 'Return to Work'


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _ms(td: datetime.timedelta) -> float:
    return td.total_seconds() * 1000


class BreakCycleController(AbstractEventEmitter):
    """Alternates between work and break. During the break the presentation surface shows a countdown,
    and the only ways out are Skip (any time), Return to Work (once the break is over), a window close
    attempt (depending on the close policy) and Quit.

    All state changes happen under one lock. Timer ticks carry the cycle generation they were scheduled
    for, and are ignored once the phase has changed."""

    _config: ReminderConfig
    _surface: AbstractPresentationSurface
    _notifier: AbstractNotifier
    _report_timer: AbstractTimer
    _transition_timer: AbstractTimer
    _countdown_timer: AbstractTimer
    _focus_timer: AbstractTimer
    _clock: Callable[[], datetime.datetime]
    _on_quit: Callable[[], None] | None
    _cycle: Cycle | None
    _lock: threading.RLock
    _quitting: bool

    def __init__(self,
                 config: ReminderConfig,
                 surface: AbstractPresentationSurface,
                 notifier: AbstractNotifier,
                 report_timer: AbstractTimer,
                 transition_timer: AbstractTimer,
                 countdown_timer: AbstractTimer,
                 focus_timer: AbstractTimer,
                 clock: Callable[[], datetime.datetime] = utc_now,
                 on_quit: Callable[[], None] | None = None,
                 callback_invoker: Callable = invoke_direct):
        super().__init__([
            WorkStarted,
            WorkTick,
            BreakStarted,
            BreakTick,
            BreakCompleted,
            BreakEnded,
            CloseBlocked,
            Quitting,
        ], callback_invoker)
        self._config = config
        self._surface = surface
        self._notifier = notifier
        self._report_timer = report_timer
        self._transition_timer = transition_timer
        self._countdown_timer = countdown_timer
        self._focus_timer = focus_timer
        self._clock = clock
        self._on_quit = on_quit
        self._cycle = None
        self._lock = threading.RLock()
        self._quitting = False

        surface.on_skip_requested(self.skip)
        surface.on_acknowledge_requested(self.acknowledge)
        surface.on_close_attempt(self.handle_close_attempt)
        surface.on_quit_requested(self.quit)

    def get_config(self) -> ReminderConfig:
        return self._config

    def get_cycle(self) -> Cycle | None:
        return self._cycle

    def get_phase(self) -> str | None:
        return self._cycle.get_phase() if self._cycle is not None else None

    def get_remaining(self) -> datetime.timedelta | None:
        with self._lock:
            return self._cycle.get_remaining(self._clock()) if self._cycle is not None else None

    def is_running(self) -> bool:
        return self._cycle is not None and not self._quitting

    def is_on_break(self) -> bool:
        with self._lock:
            return self._is_break_active()

    # Lifecycle

    def start(self) -> bool:
        with self._lock:
            if self._quitting or self._cycle is not None:
                logger.warning('BreakCycleController: Already started or quitting, ignoring start()')
                return False
            logger.info(f'Move reminder started: work_interval={format_duration(self._config.work_interval)}, '
                        f'break_duration={format_duration(self._config.break_duration)}')
            self._cycle = Cycle(self._config.work_interval, self._config.break_duration, self._clock())
            self._start_work_tasks()
            return True

    def quit(self) -> None:
        with self._lock:
            if self._quitting:
                return
            self._quitting = True
            logger.info('Quitting application')
            self._cancel_all_timers()
            if self._cycle is not None:
                self._cycle.invalidate()
                if self._cycle.dismiss():
                    self._safely('close the break view', self._surface.close_break_view)
            self._emit(Quitting, {}, force=True)
        if self._on_quit is not None:
            self._on_quit()

    # User actions

    def skip(self) -> bool:
        with self._lock:
            if not self._is_break_active():
                logger.debug('Skip requested outside of a break, ignoring')
                return False
            logger.info('Break skipped by user')
            return self._end_break(REASON_SKIP)

    def acknowledge(self) -> bool:
        with self._lock:
            if not self._is_break_active():
                logger.debug('Return to work requested outside of a break, ignoring')
                return False
            if not self._is_break_over():
                remaining = self._cycle.get_remaining(self._clock())
                logger.info(f'Return to work is not available yet, {format_remaining(remaining)} left')
                return False
            logger.info('User returned to work')
            return self._end_break(REASON_ACKNOWLEDGE)

    def handle_close_attempt(self) -> bool:
        policy = self._config.close_policy
        with self._lock:
            if not self._is_break_active():
                logger.debug('Close attempt outside of a break, ignoring')
                return False
            if policy == CLOSE_POLICY_BLOCK_UNTIL_COMPLETE and self._is_break_over():
                logger.info('Break window closed after the break is over')
                return self._end_break(REASON_CLOSE)
            if policy != CLOSE_POLICY_QUIT:
                remaining = self._cycle.get_remaining(self._clock())
                logger.info(f'Blocked an attempt to close the break window ({policy})')
                self._safely('show hint', self._surface.show_hint, self._config.skip_hint())
                self._emit(CloseBlocked, {
                    'remaining': remaining,
                    'hint': self._config.skip_hint(),
                })
                return False
        logger.info('Break window closed - quitting')
        self.quit()
        return True

    # Work phase

    def _start_work_tasks(self) -> None:
        cycle = self._cycle
        params = {'generation': cycle.get_generation()}
        logger.info(f'Starting work interval: {format_duration(self._config.work_interval)}')
        self._transition_timer.schedule(_ms(cycle.get_remaining(self._clock())),
                                        self._on_work_elapsed,
                                        params,
                                        True)
        self._report_timer.schedule(_ms(self._config.report_cadence()),
                                    self._on_report_tick,
                                    params)
        self._emit(WorkStarted, {
            'ends_at': cycle.get_phase_ends_at(),
            'duration': self._config.work_interval,
        })

    def _on_report_tick(self, params: dict | None, when: datetime.datetime | None = None) -> None:
        with self._lock:
            if not self._is_current(params, PHASE_WORK):
                logger.debug('Ignoring stale work tick')
                return
            remaining = self._cycle.get_remaining(self._clock())
            if remaining <= datetime.timedelta(0):
                logger.info('Work interval completed - break time!')
                self._begin_break()
                return
            text = format_remaining(remaining)
            logger.info(f'Work time remaining: {text}')
            self._emit(WorkTick, {
                'remaining': remaining,
                'text': text,
            })

    def _on_work_elapsed(self, params: dict | None, when: datetime.datetime | None = None) -> None:
        with self._lock:
            if not self._is_current(params, PHASE_WORK):
                logger.debug('Ignoring stale work transition')
                return
            remaining = self._cycle.get_remaining(self._clock())
            if remaining > datetime.timedelta(0):
                # Timers may fire a little early
                logger.debug(f'Work transition fired {remaining} too early, rescheduling')
                self._transition_timer.schedule(_ms(remaining), self._on_work_elapsed, params, True)
                return
            logger.info('Work interval completed - break time!')
            self._begin_break()

    # Break phase

    def _begin_break(self) -> None:
        self._transition_timer.cancel()
        self._report_timer.cancel()

        cycle = self._cycle
        cycle.rest(self._clock())
        logger.info(f'Break started for {format_duration(self._config.break_duration)}')

        self._safely('show notification',
                     self._notifier.notify,
                     self._config.notification_title,
                     self._config.notification_message)
        self._safely('open the break view', self._surface.open_break_view)
        self._safely('set acknowledge label', self._surface.set_acknowledge_label, RETURN_TO_WORK_LABEL)
        self._safely('disable acknowledge', self._surface.set_acknowledge_enabled, False)
        self._safely('set countdown', self._surface.set_countdown_text,
                     format_remaining(cycle.get_remaining(self._clock())))
        self._safely('show hint', self._surface.show_hint, self._config.skip_hint())

        params = {'generation': cycle.get_generation()}
        self._countdown_timer.schedule(_ms(self._config.countdown_interval), self._on_countdown_tick, params)
        if self._config.is_focus_retention_enabled():
            self._safely('request focus', self._surface.request_focus)
            self._focus_timer.schedule(_ms(self._config.focus_interval), self._on_focus_tick, params)

        self._emit(BreakStarted, {
            'ends_at': cycle.get_phase_ends_at(),
            'duration': self._config.break_duration,
        })

    def _on_countdown_tick(self, params: dict | None, when: datetime.datetime | None = None) -> None:
        with self._lock:
            if not self._is_current(params, PHASE_BREAK) or self._cycle.is_break_dismissed():
                logger.debug('Ignoring stale countdown tick')
                return
            remaining = self._cycle.get_remaining(self._clock())
            if remaining <= datetime.timedelta(0):
                self._complete_break()
                return
            text = format_remaining(remaining)
            self._safely('set countdown', self._surface.set_countdown_text, text)
            self._emit(BreakTick, {
                'remaining': remaining,
                'text': text,
            })

    def _complete_break(self) -> None:
        if not self._cycle.complete():
            return
        self._countdown_timer.cancel()
        logger.info('Break time is over')
        self._safely('set countdown', self._surface.set_countdown_text, BREAK_COMPLETE_TEXT)
        self._safely('set acknowledge label', self._surface.set_acknowledge_label, RETURN_TO_WORK_LABEL)
        self._safely('enable acknowledge', self._surface.set_acknowledge_enabled, True)
        self._emit(BreakCompleted, {})
        if self._config.break_end == BREAK_END_AUTO:
            logger.info('Returning to work automatically')
            self._end_break(REASON_AUTO)

    def _on_focus_tick(self, params: dict | None, when: datetime.datetime | None = None) -> None:
        with self._lock:
            if not self._is_current(params, PHASE_BREAK) or self._cycle.is_break_dismissed():
                return
            self._safely('request focus', self._surface.request_focus)

    def _end_break(self, reason: str) -> bool:
        # The check-and-set on the cycle makes sure that only the first of several
        # simultaneous exit triggers gets through
        if not self._cycle.dismiss():
            logger.debug(f'Break is already over, ignoring {reason}')
            return False
        self._countdown_timer.cancel()
        self._focus_timer.cancel()
        self._safely('close the break view', self._surface.close_break_view)
        self._emit(BreakEnded, {
            'reason': reason,
        })
        logger.info('Break completed, resuming work')
        self._cycle.work(self._clock())
        self._start_work_tasks()
        return True

    # Helpers

    def _is_break_active(self) -> bool:
        return not self._quitting \
            and self._cycle is not None \
            and self._cycle.is_resting() \
            and not self._cycle.is_break_dismissed()

    def _is_break_over(self) -> bool:
        return self._cycle.is_break_completed() or \
            self._cycle.get_remaining(self._clock()) <= datetime.timedelta(0)

    def _is_current(self, params: dict | None, phase: str) -> bool:
        return not self._quitting \
            and self._cycle is not None \
            and params is not None \
            and params.get('generation') == self._cycle.get_generation() \
            and self._cycle.get_phase() == phase

    def _cancel_all_timers(self) -> None:
        self._transition_timer.cancel()
        self._report_timer.cancel()
        self._countdown_timer.cancel()
        self._focus_timer.cancel()

    @staticmethod
    def _safely(what: str, fn: Callable, *args) -> None:
        try:
            fn(*args)
        except Exception as e:
            logger.warning(f'Failed to {what}', exc_info=e)
