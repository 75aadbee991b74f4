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
import os

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QCloseEvent, QCursor, QFont, QGuiApplication, QKeySequence, QPainter, QShortcut
from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QMainWindow, QPushButton, QFrame

from mr.core.abstract_presentation_surface import AbstractPresentationSurface
from mr.core.config import ReminderConfig
from mr.core.shell import bring_process_to_front

logger = logging.getLogger(__name__)


def _separator(parent: QWidget) -> QFrame:
    line = QFrame(parent)
    line.setFrameShape(QFrame.Shape.HLine)
    line.setFrameShadow(QFrame.Shadow.Sunken)
    return line


class BreakContent(QWidget):
    """The centered content of the break window, painted on a dark background."""

    _bg_color: QColor
    _text_color: QColor

    def __init__(self, parent: QWidget):
        super().__init__(parent)
        self._bg_color = QColor('#2b2b2b')
        self._text_color = QColor('#ffffff')
        self.setStyleSheet(f"""
            QWidget {{
                background-color: {self._bg_color.name()};
                color: {self._text_color.name()};
            }}
            QPushButton {{
                padding: 8px 24px;
            }}
            QPushButton:disabled {{
                color: #808080;
            }}
        """)

    def paintEvent(self, event):
        super().paintEvent(event)
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._bg_color)


class BreakWindow(QMainWindow, AbstractPresentationSurface):
    """A fullscreen, always-on-top window which appears during breaks. Window manager close
    attempts are always intercepted and reported to the controller, which decides what to do."""

    _config: ReminderConfig
    _content: BreakContent
    _title: QLabel
    _message: QLabel
    _countdown: QLabel
    _skip_button: QPushButton
    _return_button: QPushButton
    _hint: QLabel

    def __init__(self, config: ReminderConfig, parent: QWidget | None = None):
        QMainWindow.__init__(self, parent)
        AbstractPresentationSurface.__init__(self)
        self._config = config

        self.setWindowTitle("Move Break")
        self.setObjectName('breakWindow')
        self.setWindowFlags(Qt.WindowType.Window | Qt.WindowType.WindowStaysOnTopHint)

        self._content = BreakContent(self)
        self.setCentralWidget(self._content)

        layout = QVBoxLayout(self._content)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.setSpacing(20)

        header_font = QFont(self.font())
        header_font.setPointSize(int(header_font.pointSize() * 24.0 / 9))
        header_font.setBold(True)

        self._title = QLabel(config.break_title, self._content)
        self._title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._title.setFont(header_font)

        self._message = QLabel(config.break_message, self._content)
        self._message.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._message.setWordWrap(True)

        countdown_font = QFont(header_font)
        countdown_font.setPointSize(header_font.pointSize() * 2)
        self._countdown = QLabel('', self._content)
        self._countdown.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._countdown.setFont(countdown_font)
        self._countdown.setObjectName('countdown')

        self._skip_button = QPushButton(f'Skip Break ({config.skip_shortcut})', self._content)
        self._skip_button.setObjectName('skipButton')
        self._skip_button.clicked.connect(self.request_skip)

        self._return_button = QPushButton('Return to Work', self._content)
        self._return_button.setObjectName('returnButton')
        self._return_button.setDefault(True)
        self._return_button.setEnabled(False)
        self._return_button.clicked.connect(self.request_acknowledge)

        buttons = QHBoxLayout()
        buttons.setAlignment(Qt.AlignmentFlag.AlignCenter)
        buttons.addWidget(self._skip_button)
        buttons.addWidget(self._return_button)

        self._hint = QLabel(config.skip_hint(), self._content)
        self._hint.setAlignment(Qt.AlignmentFlag.AlignCenter)

        layout.addWidget(_separator(self._content))
        layout.addWidget(self._title)
        layout.addWidget(_separator(self._content))
        layout.addWidget(self._message)
        layout.addWidget(_separator(self._content))
        layout.addWidget(self._countdown)
        layout.addWidget(_separator(self._content))
        layout.addLayout(buttons)
        layout.addWidget(_separator(self._content))
        layout.addWidget(self._hint)

        skip = QShortcut(QKeySequence(config.skip_shortcut), self)
        skip.setContext(Qt.ShortcutContext.WindowShortcut)
        skip.activated.connect(self.request_skip)

        quit_shortcut = QShortcut(QKeySequence(config.quit_shortcut), self)
        quit_shortcut.setContext(Qt.ShortcutContext.WindowShortcut)
        quit_shortcut.activated.connect(self.request_quit)

    def closeEvent(self, event: QCloseEvent) -> None:
        # A hidden window has no break to protect, e.g. when Qt closes all windows on quit
        if not self.isVisible():
            event.accept()
            return
        event.ignore()
        self.attempt_close()

    def _target_screen(self):
        # The screen where the user is looking at, approximated by the mouse position
        screen = QGuiApplication.screenAt(QCursor.pos())
        return screen if screen is not None else QGuiApplication.primaryScreen()

    def open_break_view(self) -> None:
        logger.debug('Opening break window')
        self._hint.setText(self._config.skip_hint())
        screen = self._target_screen()
        if screen is not None:
            self.setGeometry(screen.availableGeometry())
        if self._config.fullscreen:
            self.showFullScreen()
        else:
            self.showMaximized()
        self.raise_()
        self.activateWindow()

    def close_break_view(self) -> None:
        logger.debug('Hiding break window')
        self.hide()

    def set_countdown_text(self, text: str) -> None:
        self._countdown.setText(text)

    def set_acknowledge_enabled(self, enabled: bool) -> None:
        self._return_button.setEnabled(enabled)
        if enabled:
            self._return_button.setFocus()

    def set_acknowledge_label(self, text: str) -> None:
        self._return_button.setText(text)

    def show_hint(self, text: str) -> None:
        self._hint.setText(text)

    def request_focus(self) -> None:
        if not self.isVisible():
            return
        self.raise_()
        self.activateWindow()
        bring_process_to_front(os.getpid())
