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
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Callable

from mr.core import events
from mr.core.abstract_event_emitter import AbstractEventEmitter
from mr.core.config import ReminderConfig, parse_duration, CLOSE_POLICY_QUIT, CLOSE_POLICY_BLOCK, \
    CLOSE_POLICY_BLOCK_UNTIL_COMPLETE, BREAK_END_ACKNOWLEDGE, BREAK_END_AUTO

logger = logging.getLogger(__name__)

NOTIFICATION_SYSTEM = 'system'
NOTIFICATION_TRAY = 'tray'
NOTIFICATION_NONE = 'none'


def prepare_file_for_writing(filename: str | Path) -> None:
    Path(filename).parent.mkdir(parents=True, exist_ok=True)


class AbstractSettings(AbstractEventEmitter, ABC):
    # Category -> [(id, type, display, default, options)]
    _definitions: dict[str, list[tuple[str, str, str, str, list[any]]]]
    _defaults: dict[str, str]

    def __init__(self, callback_invoker: Callable):
        AbstractEventEmitter.__init__(self, [
            events.BeforeSettingsChanged,
            events.AfterSettingsChanged,
        ], callback_invoker)

        self._defaults = dict()
        self._definitions = {
            'General': [
                ('Reminder.work_interval', 'duration', 'Work interval', '25m', []),
                ('Reminder.break_duration', 'duration', 'Break duration', '5m', []),
                ('Reminder.break_end', 'choice', 'When the break is over', BREAK_END_ACKNOWLEDGE, [
                    f'{BREAK_END_ACKNOWLEDGE}:Wait for "Return to Work"',
                    f'{BREAK_END_AUTO}:Return to work automatically',
                ]),
                ('Reminder.close_policy', 'choice', 'Closing the break window', CLOSE_POLICY_BLOCK_UNTIL_COMPLETE, [
                    f'{CLOSE_POLICY_QUIT}:Quits the application',
                    f'{CLOSE_POLICY_BLOCK}:Is not allowed',
                    f'{CLOSE_POLICY_BLOCK_UNTIL_COMPLETE}:Is allowed once the break is over',
                ]),
                ('Reminder.verbose', 'bool', 'Report remaining work time every second', 'False', []),
                ('Reminder.report_interval', 'int', 'Report remaining work time every (s)', '10', [1, 3600]),
                ('Reminder.verbose_report_interval', 'int', 'Verbose report interval (s)', '1', [1, 3600]),
                ('Reminder.focus_interval', 'int', 'Bring break window to front every (ms), 0 to disable', '500', [0, 60000]),
                ('Reminder.skip_shortcut', 'shortcut', 'Skip break', 'S', []),
                ('Reminder.quit_shortcut', 'shortcut', 'Quit', 'Ctrl+Q', []),
            ],
            'Notification': [
                ('Notification.type', 'choice', 'Notify about breaks', NOTIFICATION_SYSTEM, [
                    f'{NOTIFICATION_SYSTEM}:Native notification',
                    f'{NOTIFICATION_TRAY}:Tray icon message',
                    f'{NOTIFICATION_NONE}:Do not notify',
                ]),
                ('Notification.title', 'str', 'Title', 'Move Break Time!', []),
                ('Notification.message', 'str', 'Message',
                 'Stand up, stretch, and move around. Take a break from your computer!', []),
                ('Notification.sound', 'str', 'Sound name (macOS)', 'Glass', []),
            ],
            'Appearance': [
                ('BreakWindow.title', 'str', 'Break title', '🚶 Time to Move! 🚶', []),
                ('BreakWindow.message', 'str', 'Break message',
                 'Stand up, stretch, and move around.\nTake a break from your computer!', []),
                ('BreakWindow.fullscreen', 'bool', 'Fullscreen break window', 'True', []),
                ('Application.show_tray_icon', 'bool', 'Show tray icon', 'True', []),
            ],
            'Logging': [
                ('Logger.level', 'choice', 'Log level', 'INFO', [
                    "ERROR:Errors only",
                    "WARNING:Errors and warnings",
                    "INFO:Work and break progress",
                    "DEBUG:Verbose (use it for troubleshooting)",
                ]),
                ('Logger.filename', 'file', 'Log filename', str(Path.home() / 'move-reminder.log'), []),
            ],
        }
        for lst in self._definitions.values():
            for s in lst:
                self._defaults[s[0]] = s[3]
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f'Filled defaults: {self._defaults}')

    @abstractmethod
    def set(self, values: dict[str, str]) -> None:
        pass

    @abstractmethod
    def get(self, name: str) -> str:
        # Note that there's no default value -- we can get it from self._defaults
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    @abstractmethod
    def location(self) -> str:
        pass

    def get_categories(self) -> Iterable[str]:
        return self._definitions.keys()

    def get_settings(self, category) -> Iterable[tuple[str, str, str, str, list[any]]]:
        return [
            (option_id, option_type, option_display, self.get(option_id), option_options)
            for option_id, option_type, option_display, option_default, option_options
            in self._definitions[category]
        ]

    def _get_property(self, option_id, n) -> any:
        for cat in self._definitions.values():
            for opt in cat:
                if opt[0] == option_id:
                    return opt[n]
        raise KeyError(f'Invalid option {option_id}')

    def get_type(self, option_id) -> str:
        return self._get_property(option_id, 1)

    def get_display_name(self, option_id) -> str:
        return self._get_property(option_id, 2)

    def get_configuration(self, option_id) -> list[any]:
        return self._get_property(option_id, 4)

    def validate(self, option_id: str, value: str) -> None:
        option_type = self.get_type(option_id)
        options = self.get_configuration(option_id)
        if option_type == 'choice':
            allowed = [o.split(':')[0] for o in options]
            if value not in allowed:
                raise ValueError(f'{option_id} must be one of {allowed}, got "{value}"')
        elif option_type == 'bool':
            if value not in ('True', 'False'):
                raise ValueError(f'{option_id} must be True or False, got "{value}"')
        elif option_type == 'int':
            try:
                n = int(value)
            except ValueError:
                raise ValueError(f'{option_id} must be an integer, got "{value}"')
            if len(options) == 2 and not options[0] <= n <= options[1]:
                raise ValueError(f'{option_id} must be between {options[0]} and {options[1]}, got {n}')
        elif option_type == 'duration':
            parse_duration(value)

    def reset_to_defaults(self) -> None:
        to_set = dict[str, str]()
        for lst in self._definitions.values():
            for option_id, option_type, option_display, option_default, option_options in lst:
                to_set[option_id] = option_default
        self.clear()
        self.set(to_set)

    def _get_validated(self, name: str) -> str:
        value = self.get(name)
        self.validate(name, value)
        return value

    def _get_bool(self, name: str) -> bool:
        return self._get_validated(name) == 'True'

    def _get_seconds(self, name: str) -> datetime.timedelta:
        return datetime.timedelta(seconds=int(self._get_validated(name)))

    def get_work_interval(self) -> datetime.timedelta:
        return parse_duration(self._get_validated('Reminder.work_interval'))

    def get_break_duration(self) -> datetime.timedelta:
        return parse_duration(self._get_validated('Reminder.break_duration'))

    def get_notification_type(self) -> str:
        return self._get_validated('Notification.type')

    def is_tray_icon_enabled(self) -> bool:
        return self._get_bool('Application.show_tray_icon')

    def get_config(self, **overrides) -> ReminderConfig:
        """Builds the immutable configuration for this run. The overrides (usually coming from
        the command line) take precedence and are never stored."""
        values = {
            'work_interval': self.get_work_interval(),
            'break_duration': self.get_break_duration(),
            'verbose': self._get_bool('Reminder.verbose'),
            'report_interval': self._get_seconds('Reminder.report_interval'),
            'verbose_report_interval': self._get_seconds('Reminder.verbose_report_interval'),
            'focus_interval': datetime.timedelta(milliseconds=int(self._get_validated('Reminder.focus_interval'))),
            'close_policy': self._get_validated('Reminder.close_policy'),
            'break_end': self._get_validated('Reminder.break_end'),
            'notification_title': self.get('Notification.title'),
            'notification_message': self.get('Notification.message'),
            'notification_sound': self.get('Notification.sound'),
            'break_title': self.get('BreakWindow.title'),
            'break_message': self.get('BreakWindow.message'),
            'skip_shortcut': self.get('Reminder.skip_shortcut'),
            'quit_shortcut': self.get('Reminder.quit_shortcut'),
            'fullscreen': self._get_bool('BreakWindow.fullscreen'),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ReminderConfig(**values)
