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

from mr.core.break_cycle import BreakCycleController, BREAK_COMPLETE_TEXT, RETURN_TO_WORK_LABEL, \
    REASON_ACKNOWLEDGE, REASON_SKIP, REASON_CLOSE, REASON_AUTO
from mr.core.config import ReminderConfig, CLOSE_POLICY_QUIT, CLOSE_POLICY_BLOCK, BREAK_END_AUTO
from mr.core.cycle import PHASE_WORK, PHASE_BREAK
from mr.core.events import WorkStarted, WorkTick, BreakStarted, BreakTick, BreakCompleted, BreakEnded, \
    CloseBlocked, Quitting
from mr.tests.abstract_test_case import AbstractTestCase
from mr.tests.test_utils import FakeClock, ManualTimer, RecordingSurface, RecordingNotifier, \
    FailingSurface, FailingNotifier

TWO_SECONDS = datetime.timedelta(seconds=2)


class TestBreakCycle(AbstractTestCase):
    clock: FakeClock
    surface: RecordingSurface
    notifier: RecordingNotifier
    report: ManualTimer
    transition: ManualTimer
    countdown: ManualTimer
    focus: ManualTimer
    controller: BreakCycleController
    quit_calls: int
    events: list[str]
    params: list[dict[str, any]]

    def setUp(self) -> None:
        logging.getLogger().setLevel(logging.DEBUG)
        self.clock = FakeClock()
        self.quit_calls = 0
        self.events = list()
        self.params = list()

    def _create(self, surface: RecordingSurface | None = None, notifier: RecordingNotifier | None = None,
                **config) -> BreakCycleController:
        self.surface = RecordingSurface() if surface is None else surface
        self.notifier = RecordingNotifier() if notifier is None else notifier
        self.report = ManualTimer()
        self.transition = ManualTimer()
        self.countdown = ManualTimer()
        self.focus = ManualTimer()
        self.controller = BreakCycleController(ReminderConfig(work_interval=TWO_SECONDS,
                                                              break_duration=TWO_SECONDS,
                                                              **config),
                                               self.surface,
                                               self.notifier,
                                               self.report,
                                               self.transition,
                                               self.countdown,
                                               self.focus,
                                               clock=self.clock,
                                               on_quit=self._on_quit)
        self.controller.on('*', self._on_event)
        return self.controller

    def _on_quit(self) -> None:
        self.quit_calls += 1

    def _on_event(self, event: str, **kwargs) -> None:
        self.events.append(event)
        self.params.append(kwargs)

    def _params_of(self, event: str) -> list[dict[str, any]]:
        return [p for e, p in zip(self.events, self.params) if e == event]

    def _start_break(self) -> None:
        self.controller.start()
        self.clock.advance(2)
        self.transition.fire()

    def _complete_break(self) -> None:
        self.clock.advance(2)
        self.countdown.fire()

    def test_start(self):
        self._create()
        self.assertFalse(self.controller.is_running())
        self.assertTrue(self.controller.start())
        self.assertTrue(self.controller.is_running())
        self.assertEqual(self.controller.get_phase(), PHASE_WORK)
        self.assertFalse(self.controller.is_on_break())
        self.assertEqual(self.transition.schedules, [2000])
        self.assertEqual(self.report.schedules, [10000])
        self.assertFalse(self.countdown.is_active())
        self.assertEqual(self.events, [WorkStarted])
        self.assertEqual(self._params_of(WorkStarted)[0]['duration'], TWO_SECONDS)
        self.assertEqual(self.surface.calls, [])

    def test_start_twice(self):
        self._create()
        self.assertTrue(self.controller.start())
        self.assertFalse(self.controller.start())
        self.assertEqual(self.events, [WorkStarted])

    def test_verbose_reports_every_second(self):
        self._create(verbose=True)
        self.controller.start()
        self.assertEqual(self.report.schedules, [1000])

    def test_work_tick(self):
        self._create()
        self.controller.start()
        self.clock.advance(1)
        with self.assertLogs('mr.core.break_cycle', level='INFO') as logs:
            self.report.fire()
        self.assertIn('Work time remaining: 00:01', '\n'.join(logs.output))
        self.assertEqual(self.events, [WorkStarted, WorkTick])
        self.assertEqual(self._params_of(WorkTick)[0]['text'], '00:01')
        self.assertEqual(self.controller.get_phase(), PHASE_WORK)

    def test_report_tick_starts_overdue_break(self):
        self._create()
        self.controller.start()
        self.clock.advance(2.5)
        self.report.fire()
        self.assertTrue(self.controller.is_on_break())
        self.assertFalse(self.transition.is_active())
        self.assertFalse(self.report.is_active())

    def test_early_transition_is_rescheduled(self):
        self._create()
        self.controller.start()
        self.clock.advance(1.5)
        self.transition.fire()
        self.assertEqual(self.controller.get_phase(), PHASE_WORK)
        self.assertEqual(self.transition.schedules, [2000, 500])
        self.assertTrue(self.transition.is_active())
        self.clock.advance(0.5)
        self.transition.fire()
        self.assertEqual(self.controller.get_phase(), PHASE_BREAK)

    def test_full_cycle(self):
        self._create()
        self.controller.start()
        self.clock.advance(1)
        self.report.fire()
        self.clock.advance(1)
        self.transition.fire()

        # Break has started
        self.assertTrue(self.controller.is_on_break())
        self.assertEqual(self.notifier.notifications,
                         [('Move Break Time!',
                           'Stand up, stretch, and move around. Take a break from your computer!')])
        self.assertTrue(self.surface.is_open)
        self.assertEqual(self.surface.countdown, '00:02')
        self.assertFalse(self.surface.acknowledge_enabled)
        self.assertEqual(self.surface.acknowledge_label, RETURN_TO_WORK_LABEL)
        self.assertEqual(self.surface.hint, "Press 'S' to skip • Ctrl+Q to quit app")
        self.assertEqual(self.surface.count('focus'), 1)
        self.assertEqual(self.countdown.schedules, [1000])
        self.assertEqual(self.focus.schedules, [500])

        self.clock.advance(1)
        self.countdown.fire()
        self.assertEqual(self.surface.countdown, '00:01')
        self.focus.fire()
        self.assertEqual(self.surface.count('focus'), 2)

        self.clock.advance(1)
        self.countdown.fire()
        self.assertEqual(self.surface.countdown, BREAK_COMPLETE_TEXT)
        self.assertTrue(self.surface.acknowledge_enabled)
        self.assertFalse(self.countdown.is_active())
        # The break is over, but it waits for the user
        self.assertTrue(self.controller.is_on_break())
        self.assertTrue(self.surface.is_open)

        self.surface.request_acknowledge()
        self.assertFalse(self.controller.is_on_break())
        self.assertFalse(self.surface.is_open)
        self.assertFalse(self.focus.is_active())
        self.assertTrue(self.transition.is_active())
        self.assertEqual(self.controller.get_phase(), PHASE_WORK)
        self.assertEqual(self.surface.countdown_texts(), ['00:02', '00:01', BREAK_COMPLETE_TEXT])
        self.assertEqual(self.events, [WorkStarted,
                                       WorkTick,
                                       BreakStarted,
                                       BreakTick,
                                       BreakCompleted,
                                       BreakEnded,
                                       WorkStarted])
        self.assertEqual(self._params_of(BreakEnded)[0]['reason'], REASON_ACKNOWLEDGE)

    def test_second_cycle(self):
        self._create()
        self._start_break()
        self.controller.skip()
        self.clock.advance(2)
        self.transition.fire()
        self.assertTrue(self.controller.is_on_break())
        self.assertEqual(len(self.notifier.notifications), 2)
        self.assertEqual(self.surface.count('open'), 2)
        self.assertEqual(self.surface.countdown, '00:02')

    def test_acknowledge_before_break_is_over(self):
        self._create()
        self._start_break()
        self.clock.advance(1)
        self.countdown.fire()
        self.assertFalse(self.controller.acknowledge())
        self.assertTrue(self.controller.is_on_break())
        self.assertTrue(self.surface.is_open)
        self.assertFalse(self.surface.acknowledge_enabled)
        self.assertNotIn(BreakEnded, self.events)

    def test_acknowledge_during_work(self):
        self._create()
        self.controller.start()
        self.assertFalse(self.controller.acknowledge())
        self.assertFalse(self.controller.skip())
        self.assertEqual(self.events, [WorkStarted])

    def test_skip(self):
        self._create()
        self._start_break()
        self.clock.advance(0.5)
        self.assert_events(self.controller,
                           lambda: self.surface.request_skip(),
                           [BreakEnded, WorkStarted],
                           {BreakEnded: {'reason': REASON_SKIP}})
        self.assertFalse(self.surface.is_open)
        self.assertFalse(self.countdown.is_active())
        self.assertFalse(self.focus.is_active())
        self.assertEqual(self.controller.get_phase(), PHASE_WORK)
        self.assertEqual(self.transition.schedules, [2000, 2000])
        self.assertNotIn(BreakCompleted, self.events)

    def test_break_ends_only_once(self):
        self._create()
        self._start_break()
        self._complete_break()
        self.assertTrue(self.controller.acknowledge())
        self.assertFalse(self.controller.acknowledge())
        self.assertFalse(self.controller.skip())
        self.assertFalse(self.controller.handle_close_attempt())
        self.assertEqual(len(self._params_of(BreakEnded)), 1)
        self.assertEqual(self.surface.count('close'), 1)
        self.assertEqual(self.events.count(WorkStarted), 2)

    def test_stale_countdown_tick(self):
        self._create()
        self._start_break()
        stale = self.countdown.get_params()
        self.controller.skip()
        self.clock.advance(2)
        self.countdown.fire_stale(stale)
        self.assertEqual(self.surface.countdown_texts(), ['00:02'])
        self.assertNotIn(BreakTick, self.events)
        self.assertNotIn(BreakCompleted, self.events)
        self.assertEqual(self.controller.get_phase(), PHASE_WORK)

    def test_stale_work_tick(self):
        self._create()
        self.controller.start()
        stale = self.report.get_params()
        self.clock.advance(2)
        self.transition.fire()
        self.report.fire_stale(stale)
        self.transition.fire_stale(stale)
        self.assertEqual(self.events, [WorkStarted, BreakStarted])
        self.assertEqual(self.surface.count('open'), 1)

    def test_stale_focus_tick(self):
        self._create()
        self._start_break()
        stale = self.focus.get_params()
        self.controller.skip()
        self.focus.fire_stale(stale)
        self.assertEqual(self.surface.count('focus'), 1)

    def test_focus_retention_disabled(self):
        self._create(focus_interval=datetime.timedelta(0))
        self._start_break()
        self.assertEqual(self.focus.schedules, [])
        self.assertEqual(self.surface.count('focus'), 0)

    def test_close_blocked_until_complete(self):
        self._create()
        self._start_break()
        self.clock.advance(1)
        self.assert_events(self.controller,
                           lambda: self.surface.attempt_close(),
                           [CloseBlocked],
                           {CloseBlocked: {'remaining': datetime.timedelta(seconds=1)}})
        self.assertTrue(self.controller.is_on_break())
        self.assertTrue(self.surface.is_open)
        self.assertEqual(self.quit_calls, 0)

        self.clock.advance(1)
        self.countdown.fire()
        self.assertTrue(self.controller.handle_close_attempt())
        self.assertFalse(self.surface.is_open)
        self.assertEqual(self._params_of(BreakEnded)[0]['reason'], REASON_CLOSE)
        self.assertEqual(self.quit_calls, 0)

    def test_close_blocked(self):
        self._create(close_policy=CLOSE_POLICY_BLOCK)
        self._start_break()
        self._complete_break()
        self.assertFalse(self.controller.handle_close_attempt())
        self.assertTrue(self.controller.is_on_break())
        self.assertEqual(self.surface.hint, "Press 'S' to skip • Ctrl+Q to quit app")
        self.assertEqual(self.events.count(CloseBlocked), 1)
        self.assertTrue(self.controller.acknowledge())

    def test_close_quits(self):
        self._create(close_policy=CLOSE_POLICY_QUIT)
        self._start_break()
        self.assertTrue(self.controller.handle_close_attempt())
        self.assertEqual(self.quit_calls, 1)
        self.assertFalse(self.controller.is_running())
        self.assertFalse(self.surface.is_open)
        self.assertEqual(self.events[-1], Quitting)
        self.assertNotIn(BreakEnded, self.events)

    def test_auto_return(self):
        self._create(break_end=BREAK_END_AUTO)
        self._start_break()
        self._complete_break()
        self.assertFalse(self.controller.is_on_break())
        self.assertFalse(self.surface.is_open)
        self.assertEqual(self.events, [WorkStarted,
                                       BreakStarted,
                                       BreakCompleted,
                                       BreakEnded,
                                       WorkStarted])
        self.assertEqual(self._params_of(BreakEnded)[0]['reason'], REASON_AUTO)
        self.assertFalse(self.controller.acknowledge())

    def test_quit_during_work(self):
        self._create()
        self.controller.start()
        self.controller.quit()
        self.assertEqual(self.quit_calls, 1)
        self.assertFalse(self.transition.is_active())
        self.assertFalse(self.report.is_active())
        self.assertEqual(self.surface.count('close'), 0)
        self.assertEqual(self.events, [WorkStarted, Quitting])

    def test_quit_during_break(self):
        self._create()
        self._start_break()
        stale = self.countdown.get_params()
        self.surface.request_quit()
        self.assertEqual(self.quit_calls, 1)
        self.assertFalse(self.countdown.is_active())
        self.assertFalse(self.focus.is_active())
        self.assertFalse(self.surface.is_open)

        # Whatever happens afterwards is ignored
        self.controller.quit()
        self.assertEqual(self.quit_calls, 1)
        self.clock.advance(2)
        self.countdown.fire_stale(stale)
        self.assertFalse(self.controller.skip())
        self.assertFalse(self.controller.start())
        self.assertEqual(self.surface.countdown_texts(), ['00:02'])
        self.assertEqual(self.surface.count('close'), 1)
        self.assertEqual(self.events, [WorkStarted, BreakStarted, Quitting])

    def test_failing_collaborators(self):
        self._create(surface=FailingSurface(), notifier=FailingNotifier())
        self.controller.start()
        self.clock.advance(2)
        with self.assertLogs('mr.core.break_cycle', level='WARNING') as logs:
            self.transition.fire()
        output = '\n'.join(logs.output)
        self.assertIn('Failed to show notification', output)
        self.assertIn('Failed to open the break view', output)
        self.assertIn('Failed to request focus', output)

        # The break goes on regardless
        self.assertTrue(self.controller.is_on_break())
        self.assertTrue(self.countdown.is_active())
        self.assertEqual(self.surface.countdown, '00:02')
        self._complete_break()
        self.assertTrue(self.controller.acknowledge())
        self.assertEqual(self.controller.get_phase(), PHASE_WORK)
