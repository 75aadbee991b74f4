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
import signal
import sys

from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QSystemTrayIcon

from mr.core.abstract_notifier import AbstractNotifier, NoNotifier
from mr.core.abstract_settings import NOTIFICATION_SYSTEM, NOTIFICATION_TRAY
from mr.core.break_cycle import BreakCycleController
from mr.core.command_notifier import CommandNotifier
from mr.core.config import ReminderConfig
from mr.desktop.application import Application
from mr.qt.break_window import BreakWindow
from mr.qt.qt_invoker import invoke_in_main_thread
from mr.qt.qt_timer import QtTimer
from mr.qt.quit_event_filter import QuitEventFilter
from mr.qt.tray_icon import TrayIcon

logger = logging.getLogger(__name__)

# Python signal handlers only run when the interpreter gets control back from Qt
SIGNAL_POLL_MS = 500


def create_notifier(notification_type: str, config: ReminderConfig, tray: TrayIcon | None) -> AbstractNotifier:
    if notification_type == NOTIFICATION_SYSTEM:
        return CommandNotifier(config.notification_sound)
    elif notification_type == NOTIFICATION_TRAY:
        if tray is not None:
            return tray
        logger.warning('Tray notifications are selected, but the tray icon is disabled or unavailable')
    return NoNotifier()


def install_signal_handlers(controller: BreakCycleController) -> QtTimer:
    def on_signal(signum, frame):
        logger.info(f'Received quit signal ({signal.Signals(signum).name}) - exiting')
        # The handler may interrupt the main thread anywhere, even inside the controller
        QTimer.singleShot(0, controller.quit)

    signal.signal(signal.SIGINT, on_signal)
    signal.signal(signal.SIGTERM, on_signal)

    poll = QtTimer('Signal poll')
    poll.schedule(SIGNAL_POLL_MS, lambda params, when: None, None)
    return poll


def main() -> None:
    app: Application | None = None
    try:
        app = Application(sys.argv)
        settings = app.get_settings()
        config = app.get_config()

        window = BreakWindow(config)

        tray: TrayIcon | None = None
        if settings.is_tray_icon_enabled():
            if QSystemTrayIcon.isSystemTrayAvailable():
                tray = TrayIcon(None)
                tray.setVisible(True)
            else:
                logger.info('System tray is not available, running without a tray icon')

        controller = BreakCycleController(config,
                                          window,
                                          create_notifier(settings.get_notification_type(), config, tray),
                                          QtTimer('Work reporter'),
                                          QtTimer('Work transition'),
                                          QtTimer('Break countdown'),
                                          QtTimer('Focus retention'),
                                          on_quit=app.quit,
                                          callback_invoker=invoke_in_main_thread)
        if tray is not None:
            tray.bind(controller)

        quit_filter = QuitEventFilter(controller.quit)
        app.installEventFilter(quit_filter)
        signal_poll = install_signal_handlers(controller)
        app.log_events()

        controller.start()
        code = app.exec()

        signal_poll.cancel()
        if tray is not None:
            # To avoid tray icon getting stuck on Windows
            tray.kill()
        logger.debug(f'Exiting with code {code}')
        sys.exit(code)
    except Exception as exc:
        logger.error("FATAL: Exception on startup", exc_info=exc)
        if app is not None:
            app.on_exception(type(exc), exc, exc.__traceback__)
        sys.exit(2)


if __name__ == '__main__':
    main()
