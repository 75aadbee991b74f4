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
import platform
import subprocess
import threading

logger = logging.getLogger(__name__)

COMMAND_TIMEOUT_SECONDS = 10


def _run(name: str, cmd: list[str]) -> None:
    try:
        subprocess.run(cmd,
                       check=True,
                       capture_output=True,
                       timeout=COMMAND_TIMEOUT_SECONDS)
        logger.debug(f'{name}: {cmd[0]} finished successfully')
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning(f'{name}: {cmd[0]} failed', exc_info=e)


def run_detached(name: str, cmd: list[str], wait: bool = False) -> threading.Thread:
    """Runs an OS command on a daemon thread, so that the GUI thread never blocks on it.
    Errors are logged, never raised."""
    thread = threading.Thread(target=_run, args=(name, cmd), name=name, daemon=True)
    thread.start()
    if wait:
        thread.join()
    return thread


def is_mac() -> bool:
    return platform.system() == 'Darwin'


def is_linux() -> bool:
    return platform.system() == 'Linux'


def applescript_string(s: str) -> str:
    return '"' + s.replace('\\', '\\\\').replace('"', '\\"') + '"'


def bring_process_to_front(pid: int) -> threading.Thread | None:
    # Qt's own activateWindow() is not enough on macOS when another application is active
    if not is_mac():
        return None
    script = f'tell application "System Events" to set frontmost of first process whose unix id is {pid} to true'
    return run_detached('Bring to front', ['osascript', '-e', script])
