"""Custom exception hierarchy for pic-od-upload.

All pic-od-upload exceptions inherit from PicOdError, allowing callers
to catch broad or specific errors:

    try:
        path = save_clipboard_image()
    except ClipboardError as e:
        print(f"Clipboard problem: {e}")
    except PicOdError as e:
        print(f"pic-od-upload error: {e}")
"""

from __future__ import annotations


class PicOdError(Exception):
    """Base exception for all pic-od-upload errors."""


class ClipboardError(PicOdError):
    """Raised when no image can be read from the system clipboard.

    Covers an empty clipboard, an unsupported platform and missing OS
    tools. ``cause`` holds the underlying error, if any.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class UploadError(PicOdError):
    """Raised when the external upload binary fails or cannot be started."""


class UploadTimeoutError(UploadError):
    """Raised when the upload binary exceeds the configured timeout."""


class ConfigError(PicOdError):
    """Raised when configuration is invalid or missing."""
