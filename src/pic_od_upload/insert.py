"""Insertion targets: where formatted URLs end up.

A target is anything with ``insert(text)``. The CLI picks one from its
options:

    StdoutTarget  print to standard output (default, pipe-friendly)
    FileTarget    insert into a text file at a 1-based line/column "cursor"
    PasteTarget   put the text on the clipboard and paste into the focused app
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Protocol, runtime_checkable

import click

from .notifications import Notifier

logger = logging.getLogger("pic-od-upload")


@runtime_checkable
class InsertionTarget(Protocol):
    def insert(self, text: str) -> None: ...


class StdoutTarget:
    def insert(self, text: str) -> None:
        click.echo(text)


class FileTarget:
    """Insert text into ``path`` at ``line``/``column`` (both 1-based).

    Without a line the text is appended at the end of the file. A column
    past the end of the line lands at the end of that line; a line past
    the end of the file appends.
    """

    def __init__(
        self, path: str | Path, line: int | None = None, column: int | None = None
    ):
        self.path = Path(path)
        self.line = line
        self.column = column

    def insert(self, text: str) -> None:
        # Bytes in, bytes out: line endings and non-UTF-8 bytes survive as-is
        content = ""
        if self.path.exists():
            content = self.path.read_bytes().decode("utf-8", "surrogateescape")
        offset = self._offset(content)
        updated = content[:offset] + text + content[offset:]
        self.path.write_bytes(updated.encode("utf-8", "surrogateescape"))
        logger.debug(f"Inserted {len(text)} chars into {self.path} at offset {offset}")

    def _offset(self, content: str) -> int:
        if self.line is None:
            return len(content)

        lines = content.splitlines(keepends=True)
        if self.line > len(lines):
            return len(content)

        offset = sum(len(line) for line in lines[: self.line - 1])
        current = lines[self.line - 1]
        body_len = len(current.rstrip("\r\n"))
        column = self.column or 1
        return offset + min(column - 1, body_len)


class PasteTarget:
    """Copy to the clipboard, then simulate the paste keystroke."""

    def __init__(self, delay: float = 0.15):
        self.delay = delay

    def insert(self, text: str) -> None:
        from .clipboard import copy_text_to_clipboard, simulate_paste

        copy_text_to_clipboard(text)
        time.sleep(self.delay)  # Brief delay for clipboard to settle
        simulate_paste()


def default_target() -> InsertionTarget | None:
    """Stdout, or None when there is no usable stdout (detached or closed)."""
    if sys.stdout is None or sys.stdout.closed:
        return None
    return StdoutTarget()


def insert_text(
    target: InsertionTarget | None, text: str, notifier: Notifier
) -> bool:
    """Insert ``text`` at the target. Returns False if there is no target."""
    if target is None:
        notifier.warning("No active text editor")
        return False
    target.insert(text)
    return True
