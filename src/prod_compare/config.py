# src/prod_compare/config.py
from __future__ import annotations

import logging
import os
import sys


# ---- Settings ----------------------------------------------------------------
def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def log_level() -> str:
    return os.getenv("PRODCOMPARE_LOG", "INFO").strip().upper() or "INFO"


def preview_rows() -> int:
    return max(0, _env_int("PRODCOMPARE_PREVIEW_ROWS", 50))


def sheet_name() -> str:
    # Excel caps sheet titles at 31 chars
    return (os.getenv("PRODCOMPARE_SHEET_NAME", "Comparison").strip() or "Comparison")[:31]


def max_upload_bytes() -> int:
    return max(1, _env_int("PRODCOMPARE_MAX_UPLOAD_MB", 25)) * 1024 * 1024


# ---- Logging -----------------------------------------------------------------
def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure the root handler. Only entrypoints (CLI, API) call this."""
    lvl = getattr(logging, (level or log_level()).upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    return logging.getLogger("prod_compare")
