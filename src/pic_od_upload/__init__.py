"""pic-od-upload: upload clipboard images via pic-od and insert the URLs."""

import logging

__version__ = "0.3.0"

from .exceptions import (
    ClipboardError,
    ConfigError,
    PicOdError,
    UploadError,
    UploadTimeoutError,
)

# Silent unless the CLI (-v) or the host application configures logging
logging.getLogger("pic-od-upload").addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "PicOdError",
    "ClipboardError",
    "UploadError",
    "UploadTimeoutError",
    "ConfigError",
]
