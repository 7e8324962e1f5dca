"""Cross-platform clipboard image acquisition.

Reads the clipboard image into a staged PNG file using OS-native tools,
trying them in order of preference:

    macOS:   pngpaste, then osascript (AppKit NSPasteboard)
    Linux:   xclip, then xsel
    Windows: PowerShell System.Windows.Forms.Clipboard

A staged file is never left behind by a failed acquisition. Successful
acquisitions hand ownership to the caller, who releases it with
``cleanup_temp_file`` (or uses ``staged_clipboard_image``).
"""

from __future__ import annotations

import logging
import random
import string
import subprocess
import sys
import tempfile
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .exceptions import ClipboardError
from .platform import get_platform

logger = logging.getLogger("pic-od-upload")

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


# ── Public API ────────────────────────────────────────────────


def generate_temp_path() -> Path:
    """Return a unique, not-yet-created ``.png`` path in the temp dir."""
    timestamp = int(time.time() * 1000)
    suffix = "".join(random.choices(_SUFFIX_ALPHABET, k=6))
    return Path(tempfile.gettempdir()) / f"clipboard-{timestamp}-{suffix}.png"


def save_clipboard_image() -> Path:
    """Save the clipboard image to a temporary PNG file.

    Returns the path of a non-empty file. Raises ClipboardError if the
    clipboard holds no image or no tool could read it; in that case the
    staged file has already been removed.
    """
    output_path = generate_temp_path()

    try:
        _save_for_platform(output_path)

        # Tools can exit 0 and still leave nothing behind
        if not _has_content(output_path):
            output_path.unlink(missing_ok=True)
            raise ClipboardError("No image in clipboard")

        logger.debug(
            f"Clipboard image staged at {output_path} "
            f"({output_path.stat().st_size} bytes)"
        )
        return output_path
    except Exception as e:
        cleanup_temp_file(output_path)
        if isinstance(e, ClipboardError):
            raise
        raise ClipboardError("Failed to save clipboard image", e) from e


def cleanup_temp_file(path: str | Path) -> None:
    """Remove a staged file. Missing files and OS errors are ignored."""
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as e:
        logger.debug(f"Could not remove {path}: {e}")


@contextmanager
def staged_clipboard_image() -> Iterator[Path]:
    """Stage the clipboard image for the duration of a ``with`` block."""
    path = save_clipboard_image()
    try:
        yield path
    finally:
        cleanup_temp_file(path)


def copy_text_to_clipboard(text: str) -> None:
    """Copy text to the system clipboard.

    macOS:   pbcopy
    Linux:   xclip (falls back to xsel)
    Windows: PowerShell Set-Clipboard
    """
    if sys.platform == "darwin":
        _copy_text_macos(text)
    elif sys.platform == "win32":
        _copy_text_windows(text)
    else:
        _copy_text_linux(text)


def simulate_paste() -> None:
    """Simulate Cmd+V / Ctrl+V to paste into the focused application.

    macOS:   AppleScript System Events (needs Accessibility permission)
    Linux:   xdotool
    Windows: PowerShell SendKeys
    """
    if sys.platform == "darwin":
        _paste_macos()
    elif sys.platform == "win32":
        _paste_windows()
    else:
        _paste_linux()


# ── Helpers ───────────────────────────────────────────────────


def _save_for_platform(output_path: Path) -> None:
    plat = get_platform()
    if plat == "macos":
        _save_macos(output_path)
    elif plat == "linux":
        _save_linux(output_path)
    elif plat == "windows":
        _save_windows(output_path)
    else:
        raise ClipboardError(f"Unsupported platform: {sys.platform}")


def _has_content(path: Path) -> bool:
    try:
        return path.stat().st_size > 0
    except OSError:
        return False


def _run_into_file(cmd: list[str], output_path: Path) -> bool:
    """Run ``cmd`` with stdout redirected into ``output_path``.

    Returns True only if the command succeeded and wrote something.
    An empty result file is removed.
    """
    try:
        with open(output_path, "wb") as f:
            subprocess.run(cmd, stdout=f, stderr=subprocess.PIPE, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug(f"{cmd[0]} failed: {e}")
        output_path.unlink(missing_ok=True)
        return False

    if _has_content(output_path):
        return True
    logger.debug(f"{cmd[0]} produced no output")
    output_path.unlink(missing_ok=True)
    return False


# ── macOS ─────────────────────────────────────────────────────


_MACOS_SCRIPT = """
use framework "AppKit"
use scripting additions

set pb to current application's NSPasteboard's generalPasteboard()
set imgData to pb's dataForType:(current application's NSPasteboardTypePNG)

if imgData is missing value then
  set imgData to pb's dataForType:(current application's NSPasteboardTypeTIFF)
  if imgData is missing value then
    error "No image data in clipboard"
  end if
  -- TIFF -> PNG
  set bitmapRep to current application's NSBitmapImageRep's imageRepWithData:imgData
  set imgData to bitmapRep's representationUsingType:(current application's NSPNGFileType) |properties|:(missing value)
end if

imgData's writeToFile:"{path}" atomically:true
"""


def _save_macos(output_path: Path) -> None:
    """Save clipboard image on macOS via pngpaste (fallback: osascript)."""
    try:
        subprocess.run(
            ["pngpaste", str(output_path)],
            check=True,
            capture_output=True,
        )
        return
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug(f"pngpaste unavailable or failed, using osascript: {e}")

    script = _MACOS_SCRIPT.replace("{path}", _escape_applescript(str(output_path)))
    try:
        subprocess.run(
            ["osascript", "-e", script],
            check=True,
            capture_output=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        raise ClipboardError(
            "No image in clipboard. Install pngpaste for better support: "
            "brew install pngpaste",
            e,
        ) from e


def _copy_text_macos(text: str) -> None:
    subprocess.run(
        ["pbcopy"],
        input=text.encode("utf-8"),
        check=True,
        capture_output=True,
    )


def _paste_macos() -> None:
    """Simulate Cmd+V on macOS via AppleScript."""
    subprocess.run(
        [
            "osascript",
            "-e",
            'tell application "System Events" to keystroke "v" using command down',
        ],
        check=True,
        capture_output=True,
    )


def _escape_applescript(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


# ── Linux ─────────────────────────────────────────────────────


def _save_linux(output_path: Path) -> None:
    """Save clipboard image on Linux via xclip (fallback: xsel)."""
    if _run_into_file(
        ["xclip", "-selection", "clipboard", "-t", "image/png", "-o"], output_path
    ):
        return

    if _run_into_file(["xsel", "--clipboard", "--output"], output_path):
        return

    raise ClipboardError(
        "No image in clipboard or missing clipboard tools. "
        "Install xclip: sudo apt install xclip"
    )


def _copy_text_linux(text: str) -> None:
    """Copy text to Linux clipboard via xclip (fallback: xsel)."""
    data = text.encode("utf-8")
    try:
        subprocess.run(
            ["xclip", "-selection", "clipboard"],
            input=data,
            check=True,
            capture_output=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        logger.debug(f"xclip could not set the clipboard, using xsel: {e}")
        subprocess.run(
            ["xsel", "--clipboard", "--input"],
            input=data,
            check=True,
            capture_output=True,
        )


def _paste_linux() -> None:
    """Simulate Ctrl+V on Linux via xdotool."""
    subprocess.run(
        ["xdotool", "key", "ctrl+v"],
        check=True,
        capture_output=True,
    )


# ── Windows ───────────────────────────────────────────────────


def _save_windows(output_path: Path) -> None:
    """Save clipboard image on Windows via PowerShell."""
    ps_script = (
        "Add-Type -AssemblyName System.Windows.Forms;"
        "Add-Type -AssemblyName System.Drawing;"
        "$img = [System.Windows.Forms.Clipboard]::GetImage();"
        "if ($img -eq $null) { Write-Error 'No image in clipboard'; exit 1 };"
        f"$img.Save('{_escape_powershell(str(output_path))}', "
        "[System.Drawing.Imaging.ImageFormat]::Png)"
    )
    try:
        subprocess.run(
            ["powershell", "-NoProfile", "-Command", ps_script],
            check=True,
            capture_output=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        raise ClipboardError("No image in clipboard", e) from e


def _copy_text_windows(text: str) -> None:
    subprocess.run(
        [
            "powershell",
            "-NoProfile",
            "-Command",
            "[Console]::InputEncoding = [Text.Encoding]::UTF8;"
            "Set-Clipboard -Value ([Console]::In.ReadToEnd())",
        ],
        input=text.encode("utf-8"),
        check=True,
        capture_output=True,
    )


def _paste_windows() -> None:
    """Simulate Ctrl+V on Windows via PowerShell SendKeys."""
    subprocess.run(
        [
            "powershell",
            "-Command",
            "Add-Type -AssemblyName System.Windows.Forms;"
            '[System.Windows.Forms.SendKeys]::SendWait("^v")',
        ],
        check=True,
        capture_output=True,
    )


def _escape_powershell(text: str) -> str:
    """Escape for a single-quoted PowerShell string literal."""
    return text.replace("'", "''")
