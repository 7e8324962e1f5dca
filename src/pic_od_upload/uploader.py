"""Invoke the external ``pic-od`` binary and map its output to the inputs.

The binary's contract: ``pic-od upload [--profile NAME] PATH...`` prints one
URL per line, in input order, and exits 0. Anything else is a failure.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .exceptions import UploadError, UploadTimeoutError

logger = logging.getLogger("pic-od-upload")


@dataclass
class UploadResult:
    """One uploaded file and the URL pic-od returned for it."""

    filename: str
    url: str


def build_upload_args(
    binary_path: str, paths: Sequence[str | Path], profile: str = ""
) -> list[str]:
    args = [binary_path, "upload"]
    if profile:
        args.extend(["--profile", profile])
    args.extend(str(p) for p in paths)
    return args


def parse_upload_output(
    stdout: str, paths: Sequence[str | Path]
) -> list[UploadResult]:
    """Zip output lines with the input paths by position.

    Inputs past the last returned URL get an empty URL; extra lines are
    ignored.
    """
    urls = [line.strip() for line in stdout.splitlines() if line.strip()]
    return [
        UploadResult(
            filename=Path(path).name,
            url=urls[index] if index < len(urls) else "",
        )
        for index, path in enumerate(paths)
    ]


def upload_images(
    paths: Sequence[str | Path],
    binary_path: str = "pic-od",
    profile: str = "",
    timeout: float | None = None,
) -> list[UploadResult]:
    """Upload all ``paths`` with a single pic-od invocation.

    ``timeout`` of None blocks until pic-od exits.
    """
    if not paths:
        raise ValueError("upload_images() needs at least one path")

    args = build_upload_args(binary_path, paths, profile)
    logger.debug(f"Running {args}")

    try:
        proc = subprocess.run(
            args,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise UploadTimeoutError(
            f"{binary_path} did not finish within {timeout:g}s"
        ) from e
    except OSError as e:
        raise UploadError(f"Failed to execute {binary_path}: {e}") from e

    if proc.returncode != 0:
        stderr = (proc.stderr or "").strip()
        raise UploadError(
            stderr or f"{binary_path} exited with code {proc.returncode}"
        )

    results = parse_upload_output(proc.stdout or "", paths)
    missing = sum(1 for r in results if not r.url)
    if missing:
        logger.warning(f"{binary_path} returned no URL for {missing} file(s)")
    return results
