"""User-visible messages: terminal output plus an optional desktop notification.

Every message goes to stderr and the log as it happens. The desktop only
hears about the run once, when the command finishes, so a hotkey-launched
upload still reports its result without a terminal in view:

- macOS: terminal-notifier (brew install terminal-notifier), osascript fallback
- Linux: notify-send (libnotify)
- Windows: PowerShell tray balloon
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys

import click

from .friendly_errors import explain_error, format_friendly_error

logger = logging.getLogger("pic-od-upload")

APP_NAME = "pic-od-upload"


class DesktopNotifier:
    """Fire-and-forget desktop notifications. Never raises."""

    def __init__(self):
        self._platform = sys.platform
        self._has_terminal_notifier = (
            self._platform == "darwin"
            and shutil.which("terminal-notifier") is not None
        )

    def notify(self, title: str, body: str, failed: bool = False) -> bool:
        """Show ``body`` under ``title``; ``failed`` makes it urgent.

        Returns True if dispatched, False if unsupported or the backend broke.
        """
        try:
            if self._platform == "darwin":
                self._notify_macos(title, body, failed)
            elif self._platform.startswith("linux"):
                self._notify_linux(title, body, failed)
            elif self._platform == "win32":
                self._notify_windows(title, body, failed)
            else:
                logger.debug(f"Desktop notifications unsupported on {self._platform}")
                return False
            return True
        except Exception as e:
            logger.warning(f"Desktop notification error: {e}")
            return False

    # ── Platform backends ──────────────────────────────────────

    def _notify_macos(self, title: str, body: str, failed: bool) -> None:
        if self._has_terminal_notifier:
            cmd = [
                "terminal-notifier",
                "-title", title,
                "-message", body,
                "-group", APP_NAME,
            ]
            if failed:
                cmd += ["-sound", "Basso"]
        else:
            script = (
                f'display notification "{_escape(body)}" '
                f'with title "{_escape(title)}"'
            )
            if failed:
                script += ' sound name "Basso"'
            cmd = ["osascript", "-e", script]
        _spawn(cmd)

    def _notify_linux(self, title: str, body: str, failed: bool) -> None:
        _spawn(
            [
                "notify-send",
                f"--app-name={APP_NAME}",
                f"--urgency={'critical' if failed else 'normal'}",
                f"--icon={'dialog-error' if failed else 'image-x-generic'}",
                title,
                body,
            ]
        )

    def _notify_windows(self, title: str, body: str, failed: bool) -> None:
        kind = "Error" if failed else "Info"
        icon = "Error" if failed else "Information"
        ps_script = (
            "Add-Type -AssemblyName System.Windows.Forms;"
            "Add-Type -AssemblyName System.Drawing;"
            "$n = New-Object System.Windows.Forms.NotifyIcon;"
            f"$n.Icon = [System.Drawing.SystemIcons]::{icon};"
            "$n.Visible = $true;"
            f"$n.ShowBalloonTip(5000, '{_escape_ps(title)}', '{_escape_ps(body)}', '{kind}');"
            "Start-Sleep -Seconds 6;"
            "$n.Dispose()"
        )
        _spawn(["powershell", "-NoProfile", "-Command", ps_script])


class Notifier:
    """Surfaces pipeline messages to the user.

    Messages go to stderr (stdout is reserved for inserted text) and to the
    ``pic-od-upload`` logger. With a DesktopNotifier attached, ``finish``
    sends one desktop notification summing up the run.
    """

    def __init__(
        self, desktop: DesktopNotifier | None = None, explain: bool = False
    ):
        self.desktop = desktop
        self.explain = explain
        self.messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))
        logger.info(message)
        click.echo(message, err=True)

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))
        logger.warning(message)
        click.secho(f"Warning: {message}", fg="yellow", err=True)

    def error(self, message: str, error: Exception | None = None) -> None:
        self.messages.append(("error", message))
        logger.error(message)
        click.secho(f"Error: {message}", fg="red", err=True)
        if self.explain and error is not None:
            friendly = explain_error(error)
            if friendly:
                click.echo(format_friendly_error(friendly), err=True)

    def finish(self, success: str | None = None) -> bool:
        """Send the run's desktop notification.

        The first error wins over ``success``, which wins over the last
        warning. Returns True if a notification was dispatched.
        """
        if self.desktop is None:
            return False

        errors = self._of_level("error")
        warnings = self._of_level("warning")
        if errors:
            return self.desktop.notify(f"{APP_NAME}: error", errors[0], failed=True)
        if success:
            if warnings:
                success += f" ({len(warnings)} warning(s))"
            return self.desktop.notify(APP_NAME, success)
        if warnings:
            return self.desktop.notify(APP_NAME, warnings[-1])
        return False

    @property
    def had_error(self) -> bool:
        return bool(self._of_level("error"))

    def _of_level(self, level: str) -> list[str]:
        return [message for lvl, message in self.messages if lvl == level]


def _spawn(cmd: list[str]) -> None:
    subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)


def _escape(text: str) -> str:
    """Escape quotes and backslashes for AppleScript string embedding."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _escape_ps(text: str) -> str:
    return text.replace("'", "''")
