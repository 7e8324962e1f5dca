"""Render upload results through the user's URL template."""

from __future__ import annotations

import re
from typing import Iterable

from .uploader import UploadResult

FILE_NAME_TOKEN = "${fileName}"
URL_TOKEN = "${url}"

_TOKEN = re.compile(r"\$\{(fileName|url)\}")


def format_url(template: str, result: UploadResult) -> str:
    """Replace every ${fileName} and ${url} in ``template``.

    Substitution is a single pass, so a file name that happens to contain
    ``${url}`` is inserted literally.
    """
    values = {"fileName": result.filename, "url": result.url}
    return _TOKEN.sub(lambda m: values[m.group(1)], template)


def format_results(template: str, results: Iterable[UploadResult]) -> str:
    """Format results that have a URL, one per line.

    Returns "" when no result has a URL.
    """
    return "\n".join(format_url(template, r) for r in results if r.url)
