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
import sys
import traceback
from argparse import ArgumentParser, Namespace
from pathlib import Path

from PySide6 import QtCore
from PySide6.QtWidgets import QApplication, QMessageBox

from mr.core.abstract_settings import AbstractSettings, prepare_file_for_writing
from mr.core.app_version import get_current_version, get_versions
from mr.core.config import ReminderConfig, parse_duration, format_duration, CLOSE_POLICIES, BREAK_END_AUTO
from mr.core.events import get_all_events
from mr.qt.qt_settings import QtSettings

logger = logging.getLogger(__name__)


def build_argument_parser() -> ArgumentParser:
    parser = ArgumentParser(prog='move-reminder',
                            description="Reminds you to stand up and move around, and makes it hard to ignore")
    parser.add_argument('--work', dest='work_interval', type=parse_duration, metavar='DURATION',
                        help='Work interval duration (e.g., 25m, 10s)')
    parser.add_argument('--break', dest='break_duration', type=parse_duration, metavar='DURATION',
                        help='Break duration (e.g., 5m, 10s)')
    parser.add_argument('--verbose', action='store_true',
                        help='Log the remaining work time every second')
    parser.add_argument('--close-policy', choices=CLOSE_POLICIES,
                        help='What happens when the break window is closed via the window manager')
    parser.add_argument('--auto-return', action='store_true',
                        help="Return to work as soon as the break is over, without waiting for 'Return to Work'")
    parser.add_argument('--no-focus', action='store_true',
                        help='Do not keep bringing the break window to the front')
    parser.add_argument('--reset', action='store_true', help='Reset stored settings to their defaults')
    parser.add_argument('--debug', action='store_true', help='Debug output for troubleshooting')
    parser.add_argument('--version', action='store_true', help='Print version and exit')
    return parser


def config_overrides(args: Namespace) -> dict[str, any]:
    # None means "use the stored setting"
    return {
        'work_interval': args.work_interval,
        'break_duration': args.break_duration,
        'verbose': True if args.verbose else None,
        'close_policy': args.close_policy,
        'break_end': BREAK_END_AUTO if args.auto_return else None,
        'focus_interval': datetime.timedelta(0) if args.no_focus else None,
    }


class Application(QApplication):
    _settings: AbstractSettings
    _args: Namespace
    _config: ReminderConfig

    def __init__(self, args: list[str]):
        super().__init__(args)
        self.setApplicationName('move-reminder')
        self.setApplicationDisplayName('Move Reminder')
        self.setApplicationVersion(str(get_current_version()))

        # Breaks come and go, but the application keeps running in the background
        self.setQuitOnLastWindowClosed(False)

        parser = build_argument_parser()
        # Qt may leave its own arguments like -platform in the list, those are not ours to validate
        self._args, unknown = parser.parse_known_args(self.arguments()[1:])

        if self._args.version:
            print(f'Move Reminder v{get_current_version()}')
            sys.exit(0)

        sys.excepthook = self.on_exception

        # It's important to initialize settings after the QApplication has been constructed
        self._settings = QtSettings()
        if self._args.reset:
            self._settings.reset_to_defaults()
        self._initialize_logger()
        if len(unknown) > 0:
            logger.debug(f'Ignoring unknown arguments: {unknown}')

        try:
            self._config = self._settings.get_config(**config_overrides(self._args))
        except ValueError as e:
            logger.critical(f'Invalid configuration in {self._settings.location()}: {e}')
            sys.exit(2)

        logger.info(f'Move reminder configured: work_interval={format_duration(self._config.work_interval)}, '
                    f'break_duration={format_duration(self._config.break_duration)}, '
                    f'close_policy={self._config.close_policy}, break_end={self._config.break_end}')
        if self._config.verbose:
            logger.info(f'Verbose logging enabled - will log every '
                        f'{format_duration(self._config.verbose_report_interval)}')

    def _initialize_logger(self) -> None:
        debug = self._args.debug
        level = logging.DEBUG if debug else self._settings.get('Logger.level')

        log_format = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        root = logging.getLogger()

        # 0. Set the overall log level that would apply to ALL handlers
        root.setLevel(level)

        # 1. Remove existing handlers, if any
        for existing_handle in root.handlers:
            existing_handle.close()
        root.handlers.clear()

        # 2. Add FILE handler for whatever the user configured
        filename = Path(self._settings.get('Logger.filename'))
        if filename.is_dir():
            filename /= 'move-reminder.log'
        try:
            prepare_file_for_writing(filename)
            file_handler = logging.FileHandler(filename=filename)
            file_handler.setFormatter(log_format)
            file_handler.setLevel(level)
            root.handlers.append(file_handler)
        except OSError as e:
            print(f'Cannot write log file {filename}: {e}', file=sys.stderr)

        # 3. Add STDIO handler, this is where the remaining work time goes
        stdio_handler = logging.StreamHandler(sys.stdout)
        stdio_handler.setFormatter(log_format)
        stdio_handler.setLevel(level)
        root.handlers.append(stdio_handler)

        logger.debug(f'Versions: \n{get_versions(QtCore.__version__, self.platformName())}')
        logger.debug(f'Settings are stored in {self._settings.location()}')

    def on_exception(self, exc_type, exc_value, exc_trace) -> None:
        to_log = "".join(traceback.format_exception(exc_type, exc_value, exc_trace))
        logger.error(f"Global exception handler. Full log: {to_log}")
        QMessageBox().critical(self.activeWindow(),
                               "Unexpected error",
                               f"{exc_type.__name__}: {exc_value}",
                               QMessageBox.StandardButton.Ok)

    def log_events(self) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f'Registered events: {sorted(get_all_events())}')

    def get_settings(self) -> AbstractSettings:
        return self._settings

    def get_config(self) -> ReminderConfig:
        return self._config
