"""
Desktop notices — platform-aware "Pomodoro completed!" pop-ups.

Processes are spawned without waiting so a slow notification daemon can
never stall the countdown.
"""

from __future__ import annotations

import logging
import subprocess
import sys

from ..timer.events import IntervalCompleted
from .base import Notifier

logger = logging.getLogger(__name__)

APP_NAME = "Pomofocus"


class DesktopNotifier(Notifier):

    def handle(self, event, policy) -> None:
        # Only the generic completion notice becomes a pop-up; chimes cover the rest.
        if isinstance(event, IntervalCompleted):
            self.show(event.message)

    def show(self, message: str) -> bool:
        if sys.platform == "win32":
            return self._spawn(self._windows_cmd(message))
        if sys.platform == "darwin":
            return self._spawn(self._macos_cmd(message))
        return self._spawn(self._linux_cmd(message))

    # ------------------------------------------------------------------
    # Platform implementations
    # ------------------------------------------------------------------

    def _windows_cmd(self, message: str) -> list:
        script = (
            "[reflection.assembly]::loadwithpartialname('System.Windows.Forms') | Out-Null;"
            "$n = New-Object System.Windows.Forms.NotifyIcon;"
            "$n.Icon = [System.Drawing.SystemIcons]::Information;"
            "$n.Visible = $true;"
            f"$n.ShowBalloonTip(5000, '{APP_NAME}', '{message}', 'Info')"
        )
        return ["powershell", "-Command", script]

    def _macos_cmd(self, message: str) -> list:
        return ["osascript", "-e", f'display notification "{message}" with title "{APP_NAME}"']

    def _linux_cmd(self, message: str) -> list:
        return ["notify-send", APP_NAME, message]

    def _spawn(self, cmd: list) -> bool:
        try:
            subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
            return True
        except Exception as exc:
            logger.warning("desktop notification unavailable (%s): %s", cmd[0], exc)
            return False
