from __future__ import annotations

import os

from .html_report import read_html_report
from .spreadsheet import read_spreadsheet
from .table import RawTable

HTML_SUFFIXES = {".htm", ".html", ".xhtml"}
_HTML_MARKERS = ("<HTML", "<TABLE", "<!DOCTYPE HTML", "MIME-VERSION")


def looks_like_html(data: bytes) -> bool:
    # xlsx is a zip container
    if data[:2] == b"PK":
        return False
    head = data[:800].decode("latin-1", errors="ignore").upper()
    return any(m in head for m in _HTML_MARKERS)


def read_source(data: bytes, filename: str | None = None) -> RawTable:
    """Dispatch by extension, falling back to content sniffing (MES exports
    are often HTML saved with an .xls extension)."""
    suffix = os.path.splitext(filename or "")[1].lower()
    if suffix in HTML_SUFFIXES or looks_like_html(data):
        return read_html_report(data)
    return read_spreadsheet(data)
