"""Human-readable explanations for common failures.

Maps clipboard, upload and configuration errors to a short message plus
concrete steps to fix them.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass

from .exceptions import ClipboardError, ConfigError, UploadError, UploadTimeoutError


@dataclass
class FriendlyError:
    """An error with a fix suggestion."""

    title: str
    message: str
    fix: str


def _clipboard_tool_hint() -> str:
    if sys.platform == "darwin":
        return (
            "Copy an image first (e.g. Cmd+Ctrl+Shift+4 for a screenshot).\n"
            "For faster, more reliable capture install pngpaste:\n"
            "  brew install pngpaste"
        )
    if sys.platform == "win32":
        return (
            "Copy an image first (e.g. Win+Shift+S for a screenshot).\n"
            "PowerShell must be available on PATH."
        )
    return (
        "Copy an image first, then make sure a clipboard tool is installed:\n"
        "  sudo apt install xclip    (or: sudo apt install xsel)\n"
        "Wayland sessions need XWayland for xclip to see the clipboard."
    )


def friendly_clipboard_error(error: ClipboardError) -> FriendlyError:
    """Explain why no image could be read from the clipboard."""
    msg = str(error).lower()

    if "unsupported platform" in msg:
        return FriendlyError(
            title="Platform not supported",
            message=str(error),
            fix=(
                "Clipboard capture works on macOS, Linux and Windows. "
                "Save the image to a file and run 'pic-od-upload files PATH'."
            ),
        )

    if "missing clipboard tools" in msg or "install" in msg:
        return FriendlyError(
            title="Clipboard tool missing or clipboard empty",
            message=str(error),
            fix=_clipboard_tool_hint(),
        )

    return FriendlyError(
        title="No image in clipboard",
        message="The clipboard does not contain image data.",
        fix=_clipboard_tool_hint(),
    )


def friendly_upload_error(error: UploadError) -> FriendlyError:
    """Explain a failed pic-od invocation."""
    msg = str(error).lower()

    if isinstance(error, UploadTimeoutError):
        return FriendlyError(
            title="Upload timed out",
            message=str(error),
            fix=(
                "Check your network connection, or raise upload_timeout in "
                "~/.pic-od-upload/config.yaml (remove it to wait indefinitely)."
            ),
        )

    if "failed to execute" in msg:
        return FriendlyError(
            title="pic-od not found",
            message=str(error),
            fix=(
                "Install pic-od and make sure it is on your PATH, or point "
                "binary_path in ~/.pic-od-upload/config.yaml at the binary. "
                "Run 'pic-od-upload doctor' to check."
            ),
        )

    if "profile" in msg:
        return FriendlyError(
            title="Upload profile problem",
            message=str(error),
            fix=(
                "Check the profile name in ~/.pic-od-upload/config.yaml "
                "against the profiles configured for pic-od, or leave it "
                "empty to use pic-od's default."
            ),
        )

    return FriendlyError(
        title="Upload failed",
        message=str(error),
        fix="Run the same upload with pic-od directly to see its full output.",
    )


def friendly_config_error(error: ConfigError) -> FriendlyError:
    """Explain a broken configuration file."""
    msg = str(error).lower()

    if "yaml" in msg:
        return FriendlyError(
            title="Configuration file error",
            message="The configuration file has a formatting issue.",
            fix=(
                "Check ~/.pic-od-upload/config.yaml for syntax errors. "
                "Common issues:\n"
                "- Missing spaces after colons (use 'key: value' not 'key:value')\n"
                "- Templates starting with '!' must be quoted: "
                "url_template: '![${fileName}](${url})'\n"
                "Run 'pic-od-upload config init --force' to start over."
            ),
        )

    return FriendlyError(
        title="Configuration error",
        message=f"There's a problem with your settings: {error}",
        fix="Run 'pic-od-upload config show' to see the effective settings.",
    )


def format_friendly_error(err: FriendlyError) -> str:
    """Format a FriendlyError for display in the terminal."""
    lines = [
        err.title,
        f"   {err.message}",
        "",
        "How to fix:",
    ]
    for line in err.fix.split("\n"):
        lines.append(f"   {line}")
    return "\n".join(lines)


def explain_error(error: Exception) -> FriendlyError | None:
    """Pick the explanation for a known error type, or None."""
    if isinstance(error, ClipboardError):
        return friendly_clipboard_error(error)
    if isinstance(error, UploadError):
        return friendly_upload_error(error)
    if isinstance(error, ConfigError):
        return friendly_config_error(error)
    return None
