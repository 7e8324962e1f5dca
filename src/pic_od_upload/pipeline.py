"""Upload commands: clipboard or files → pic-od → template → insertion.

Each command is one linear run. Errors are reported through the Notifier
and recorded in the returned UploadOutcome; they never propagate to the
caller.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Sequence

from .clipboard import staged_clipboard_image
from .config import PicOdConfig
from .exceptions import ClipboardError, UploadError
from .formatting import format_results
from .insert import InsertionTarget, insert_text
from .notifications import Notifier
from .uploader import UploadResult, upload_images

logger = logging.getLogger("pic-od-upload")

IMAGE_EXTENSIONS = ("png", "jpg", "jpeg", "gif", "webp", "svg", "bmp", "ico")


class UploadStatus(str, Enum):
    INSERTED = "inserted"
    NO_URLS = "no_urls"
    NO_TARGET = "no_target"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class UploadOutcome:
    status: UploadStatus
    results: list[UploadResult] = field(default_factory=list)
    text: str = ""

    @property
    def ok(self) -> bool:
        return self.status != UploadStatus.FAILED


def handle_upload(
    paths: Sequence[str | Path],
    config: PicOdConfig,
    target: InsertionTarget | None,
    notifier: Notifier,
) -> UploadOutcome:
    """Upload ``paths`` in one pic-od call and insert the formatted URLs."""
    try:
        results = upload_images(
            paths,
            binary_path=config.binary_path,
            profile=config.profile,
            timeout=config.upload_timeout,
        )
    except UploadError as e:
        notifier.error(f"Upload failed: {e}", e)
        return UploadOutcome(UploadStatus.FAILED)

    text = format_results(config.url_template, results)
    if not text:
        notifier.warning("No URLs returned from upload")
        return UploadOutcome(UploadStatus.NO_URLS, results)

    try:
        inserted = insert_text(target, text, notifier)
    except (OSError, UnicodeError, subprocess.CalledProcessError) as e:
        notifier.error(f"Failed to insert text: {e}", e)
        return UploadOutcome(UploadStatus.FAILED, results, text)

    if not inserted:
        return UploadOutcome(UploadStatus.NO_TARGET, results, text)

    logger.info(f"Uploaded {len(results)} image(s)")
    return UploadOutcome(UploadStatus.INSERTED, results, text)


def upload_from_clipboard(
    config: PicOdConfig,
    target: InsertionTarget | None,
    notifier: Notifier,
) -> UploadOutcome:
    """Upload the clipboard image. The staged file is always removed."""
    try:
        with staged_clipboard_image() as image_path:
            return handle_upload([image_path], config, target, notifier)
    except ClipboardError as e:
        logger.debug(f"Clipboard acquisition failed: {e}", exc_info=e.cause)
        notifier.error(e.message, e)
        return UploadOutcome(UploadStatus.FAILED)
    except Exception as e:
        logger.debug("Clipboard upload failed", exc_info=True)
        notifier.error(f"Failed to read clipboard: {e}", e)
        return UploadOutcome(UploadStatus.FAILED)


def is_image_path(path: str | Path) -> bool:
    return Path(path).suffix.lower().lstrip(".") in IMAGE_EXTENSIONS


def upload_from_files(
    paths: Sequence[str | Path],
    config: PicOdConfig,
    target: InsertionTarget | None,
    notifier: Notifier,
) -> UploadOutcome:
    """Upload image files chosen by the user.

    Non-image and missing paths are skipped with a warning. An empty
    selection is a no-op.
    """
    selected: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if not is_image_path(path):
            notifier.warning(f"Skipping {path}: not an image file")
        elif not path.is_file():
            notifier.warning(f"Skipping {path}: file not found")
        else:
            selected.append(path)

    if not selected:
        logger.debug("No image files selected, nothing to upload")
        return UploadOutcome(UploadStatus.CANCELLED)

    return handle_upload(selected, config, target, notifier)
