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

from PySide6.QtCore import QRectF, Qt
from PySide6.QtGui import QAction, QColor, QIcon, QPainter, QPixmap
from PySide6.QtWidgets import QMenu, QSystemTrayIcon, QWidget

from mr.core.abstract_notifier import AbstractNotifier
from mr.core.break_cycle import BreakCycleController
from mr.core.events import WorkStarted, WorkTick, BreakStarted, BreakTick, BreakCompleted, BreakEnded

logger = logging.getLogger(__name__)

WORK_COLOR = QColor('#4caf50')
BREAK_COLOR = QColor('#ff9800')


class TrayIcon(QSystemTrayIcon, AbstractNotifier):
    """Shows the progress of the current phase, doubles as a notifier via balloon messages,
    and gives access to Skip and Quit when the break window is not the active one."""

    _controller: BreakCycleController | None
    _menu: QMenu
    _skip_action: QAction
    _quit_action: QAction
    _size: int
    _color: QColor
    _total: datetime.timedelta

    def __init__(self, parent: QWidget | None, size: int = 48):
        QSystemTrayIcon.__init__(self, parent)
        self._controller = None
        self._size = size
        self._color = WORK_COLOR
        self._total = datetime.timedelta(0)
        self.setObjectName('tray')

        self._menu = QMenu()
        self._skip_action = QAction('Skip break', self._menu)
        self._skip_action.setEnabled(False)
        self._skip_action.triggered.connect(self._skip)
        self._menu.addAction(self._skip_action)
        self._menu.addSeparator()
        self._quit_action = QAction('Quit', self._menu)
        self._quit_action.triggered.connect(self._quit)
        self._menu.addAction(self._quit_action)
        self.setContextMenu(self._menu)

        self.setToolTip('Move Reminder')
        self.paint(0, 1)

    def bind(self, controller: BreakCycleController) -> None:
        self._controller = controller
        controller.on(WorkStarted, self._on_work_started)
        controller.on(WorkTick, self._on_tick)
        controller.on(BreakStarted, self._on_break_started)
        controller.on(BreakTick, self._on_tick)
        controller.on(BreakCompleted, self._on_break_completed)
        controller.on(BreakEnded, self._on_break_ended)

    def kill(self) -> None:
        if self._controller is not None:
            self._controller.unsubscribe(self._on_work_started)
            self._controller.unsubscribe(self._on_tick)
            self._controller.unsubscribe(self._on_break_started)
            self._controller.unsubscribe(self._on_break_completed)
            self._controller.unsubscribe(self._on_break_ended)
            self._controller = None
        self.hide()

    def _skip(self) -> None:
        if self._controller is not None:
            self._controller.skip()

    def _quit(self) -> None:
        if self._controller is not None:
            self._controller.quit()

    def notify(self, title: str, body: str) -> None:
        if not QSystemTrayIcon.supportsMessages() or not self.isVisible():
            logger.info(f'Tray messages are not available, skipping "{title}"')
            return
        self.showMessage(title, body, QSystemTrayIcon.MessageIcon.Information)

    def paint(self, elapsed: float, total: float) -> None:
        pixmap = QPixmap(self._size, self._size)
        pixmap.fill(Qt.GlobalColor.transparent)
        painter = QPainter(pixmap)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        rect = QRectF(2, 2, self._size - 4, self._size - 4)
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(self._color.darker(250))
        painter.drawEllipse(rect)
        painter.setBrush(self._color)
        ratio = 1.0 if total <= 0 else max(0.0, min(1.0, elapsed / total))
        # Qt angles are in 1/16 of a degree, starting at 3 o'clock and going counter-clockwise
        painter.drawPie(rect, 90 * 16, -int(360 * 16 * (1 - ratio)))
        painter.end()
        self.setIcon(QIcon(pixmap))

    def _on_work_started(self, event: str, ends_at: datetime.datetime, duration: datetime.timedelta, **kwargs) -> None:
        self._color = WORK_COLOR
        self._total = duration
        self._skip_action.setEnabled(False)
        self.setToolTip(f'Working until {ends_at.astimezone().strftime("%H:%M")}')
        self.paint(0, 1)

    def _on_break_started(self, event: str, ends_at: datetime.datetime, duration: datetime.timedelta, **kwargs) -> None:
        self._color = BREAK_COLOR
        self._total = duration
        self._skip_action.setEnabled(True)
        self.setToolTip('Break time!')
        self.paint(0, 1)

    def _on_tick(self, event: str, remaining: datetime.timedelta, text: str, **kwargs) -> None:
        state = 'Work' if event == WorkTick else 'Break'
        self.setToolTip(f'{state}: {text} left')
        total = self._total.total_seconds()
        self.paint(total - remaining.total_seconds(), total)

    def _on_break_completed(self, event: str, **kwargs) -> None:
        self.setToolTip('Break is over, time to return to work')
        self.paint(1, 1)

    def _on_break_ended(self, event: str, reason: str, **kwargs) -> None:
        self._skip_action.setEnabled(False)
