"""Shared fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Stand-in for the pic-od binary. Run as ``python upload ...`` so that the
# argv layout matches ``pic-od upload ...``.
FAKE_PIC_OD = """\
import os
import sys

args = sys.argv[1:]
if args[:1] == ["--profile"]:
    print("profile=" + args[1], file=sys.stderr)
    args = args[2:]

mode = os.environ.get("FAKE_PIC_OD_MODE", "")
if mode == "fail":
    print("bucket not configured", file=sys.stderr)
    sys.exit(3)
if mode == "garbled":
    sys.stderr.flush()
    sys.stderr.buffer.write(b"\\xff\\xfe bad")
    sys.exit(2)
if mode == "short":
    args = args[:1]
if mode == "empty":
    args = []

for path in args:
    print("https://img.example/" + os.path.basename(path))
"""


@pytest.fixture
def fake_pic_od(tmp_path: Path, monkeypatch) -> str:
    """Return a binary_path whose ``upload`` subcommand echoes URLs."""
    (tmp_path / "upload").write_text(FAKE_PIC_OD)
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FAKE_PIC_OD_MODE", raising=False)
    return sys.executable


@pytest.fixture
def images(tmp_path: Path) -> list[Path]:
    """Two small files with image extensions."""
    paths = [tmp_path / "first.png", tmp_path / "second.jpg"]
    for p in paths:
        p.write_bytes(b"\x89PNG\r\n\x1a\nfake")
    return paths


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for var in ("PIC_OD_BINARY", "PIC_OD_PROFILE", "PIC_OD_URL_TEMPLATE"):
        monkeypatch.delenv(var, raising=False)


class RecordingTarget:
    """Insertion target that remembers what it was given."""

    def __init__(self):
        self.inserted: list[str] = []

    def insert(self, text: str) -> None:
        self.inserted.append(text)


@pytest.fixture
def target() -> RecordingTarget:
    return RecordingTarget()
