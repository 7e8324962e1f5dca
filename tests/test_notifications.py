"""Tests for user-facing messages and desktop notifications."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock, patch

from pic_od_upload.exceptions import ClipboardError, UploadError
from pic_od_upload.notifications import DesktopNotifier, Notifier, _escape


class TestDesktopNotifier:
    def test_dispatches_every_call(self):
        notifier = DesktopNotifier()
        notifier._platform = "darwin"
        with patch.object(notifier, "_notify_macos") as mock:
            assert notifier.notify("Test", "Hello") is True
            assert notifier.notify("Test", "Again", failed=True) is True
        assert mock.call_args_list[1][0] == ("Test", "Again", True)

    def test_linux_uses_notify_send(self):
        notifier = DesktopNotifier()
        notifier._platform = "linux"
        with patch("pic_od_upload.notifications.subprocess.Popen") as mock_popen:
            assert notifier.notify("Upload failed", "403", failed=True) is True
        args = mock_popen.call_args[0][0]
        assert args[0] == "notify-send"
        assert "--urgency=critical" in args
        assert args[-2:] == ["Upload failed", "403"]

    def test_linux_success_is_normal_urgency(self):
        notifier = DesktopNotifier()
        notifier._platform = "linux"
        with patch("pic_od_upload.notifications.subprocess.Popen") as mock_popen:
            notifier.notify("pic-od-upload", "Uploaded 1 image(s)")
        assert "--urgency=normal" in mock_popen.call_args[0][0]

    def test_windows_balloon_escapes_quotes(self):
        notifier = DesktopNotifier()
        notifier._platform = "win32"
        with patch("pic_od_upload.notifications.subprocess.Popen") as mock_popen:
            assert notifier.notify("Alert", "it's gone", failed=True) is True
        args = mock_popen.call_args[0][0]
        assert args[0] == "powershell"
        assert "'it''s gone'" in args[-1]
        assert "'Error'" in args[-1]

    def test_unsupported_platform(self):
        notifier = DesktopNotifier()
        notifier._platform = "freebsd"
        assert notifier.notify("Test", "Hello") is False

    def test_backend_error_returns_false(self):
        notifier = DesktopNotifier()
        notifier._platform = "darwin"
        with patch.object(notifier, "_notify_macos", side_effect=OSError("gone")):
            assert notifier.notify("Test", "Hello") is False

    def test_macos_osascript_fallback(self):
        notifier = DesktopNotifier()
        notifier._platform = "darwin"
        notifier._has_terminal_notifier = False
        with patch("pic_od_upload.notifications.subprocess.Popen") as mock_popen:
            notifier._notify_macos("Title", 'say "hi"', True)
        args = mock_popen.call_args[0][0]
        assert args[0] == "osascript"
        assert 'say \\"hi\\"' in args[2]
        assert 'sound name "Basso"' in args[2]

    def test_macos_terminal_notifier(self):
        notifier = DesktopNotifier()
        notifier._platform = "darwin"
        notifier._has_terminal_notifier = True
        with patch("pic_od_upload.notifications.subprocess.Popen") as mock_popen:
            notifier._notify_macos("Title", "body", False)
        args = mock_popen.call_args[0][0]
        assert args[0] == "terminal-notifier"
        assert "-sound" not in args

    def test_escape(self):
        assert _escape('a "b" \\c') == 'a \\"b\\" \\\\c'


class TestNotifier:
    def test_levels_are_recorded_and_printed(self, capsys):
        notifier = Notifier()
        notifier.info("Uploading")
        notifier.warning("No URLs returned from upload")
        notifier.error("Upload failed: boom")

        assert [level for level, _ in notifier.messages] == ["info", "warning", "error"]
        err = capsys.readouterr().err
        assert "Warning: No URLs returned from upload" in err
        assert "Error: Upload failed: boom" in err
        assert notifier.had_error

    def test_every_level_is_logged(self, caplog):
        notifier = Notifier()
        with caplog.at_level(logging.INFO, logger="pic-od-upload"):
            notifier.info("a")
            notifier.warning("b")
            notifier.error("c")
        assert [r.levelname for r in caplog.records] == ["INFO", "WARNING", "ERROR"]

    def test_messages_never_touch_stdout(self, capsys):
        Notifier().warning("careful")
        assert capsys.readouterr().out == ""

    def test_explain_adds_fix(self, capsys):
        notifier = Notifier(explain=True)
        notifier.error("Upload failed: x", UploadError("Failed to execute pic-od: nope"))
        err = capsys.readouterr().err
        assert "How to fix:" in err
        assert "binary_path" in err

    def test_no_explanation_by_default(self, capsys):
        Notifier().error("No image in clipboard", ClipboardError("No image in clipboard"))
        assert "How to fix:" not in capsys.readouterr().err


class TestFinish:
    def test_nothing_without_desktop(self):
        notifier = Notifier()
        notifier.error("e")
        assert notifier.finish("done") is False

    def test_messages_wait_for_finish(self):
        desktop = MagicMock()
        notifier = Notifier(desktop=desktop)
        notifier.warning("w")
        notifier.error("e")
        desktop.notify.assert_not_called()

    def test_error_wins_over_earlier_warning(self):
        desktop = MagicMock()
        notifier = Notifier(desktop=desktop)
        notifier.warning("Skipping x.txt: not an image file")
        notifier.error("Upload failed: 403")
        notifier.finish()

        desktop.notify.assert_called_once_with(
            "pic-od-upload: error", "Upload failed: 403", failed=True
        )

    def test_success_counts_warnings(self):
        desktop = MagicMock()
        notifier = Notifier(desktop=desktop)
        notifier.warning("Skipping x.txt: not an image file")
        notifier.finish("Uploaded 1 image(s)")

        desktop.notify.assert_called_once_with(
            "pic-od-upload", "Uploaded 1 image(s) (1 warning(s))"
        )

    def test_last_warning_when_nothing_uploaded(self):
        desktop = MagicMock()
        notifier = Notifier(desktop=desktop)
        notifier.warning("Skipping a.txt: not an image file")
        notifier.warning("No URLs returned from upload")
        notifier.finish()

        desktop.notify.assert_called_once_with(
            "pic-od-upload", "No URLs returned from upload"
        )

    def test_quiet_run_sends_nothing(self):
        desktop = MagicMock()
        notifier = Notifier(desktop=desktop)
        notifier.info("fyi")
        assert notifier.finish() is False
        desktop.notify.assert_not_called()
