"""Platform detection and the OS tools each platform relies on."""

from __future__ import annotations

import shutil
import sys

# Clipboard image tools per platform, in the order they are tried
CLIPBOARD_TOOLS: dict[str, tuple[str, ...]] = {
    "macos": ("pngpaste", "osascript"),
    "linux": ("xclip", "xsel"),
    "windows": ("powershell",),
}

# Tools needed by --paste
PASTE_TOOLS: dict[str, tuple[str, ...]] = {
    "macos": ("pbcopy", "osascript"),
    "linux": ("xclip", "xdotool"),
    "windows": ("powershell",),
}


def get_platform() -> str:
    """Return normalized platform name, or "unsupported"."""
    if sys.platform == "darwin":
        return "macos"
    elif sys.platform == "win32":
        return "windows"
    elif sys.platform.startswith("linux"):
        return "linux"
    return "unsupported"


def available_tools(tools: tuple[str, ...]) -> dict[str, bool]:
    """Map each tool name to whether it is on PATH."""
    return {tool: shutil.which(tool) is not None for tool in tools}
