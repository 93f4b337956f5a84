"""Locale-aware parsing of numeric cell text.

The convention is fixed system-wide: "3.135,60" means three thousand one
hundred thirty-five point six. "3,135.60" is NOT read as the English
thousands form (it becomes 3.1356).
"""
from __future__ import annotations

import math
import re
from typing import Any

_PLAIN_NUMBER = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def normalize_number_text(text: str) -> str:
    s = text.strip()
    if "." in s and "," in s:
        return s.replace(".", "").replace(",", ".")
    if "," in s:
        return s.replace(",", ".")
    return s


def parse_number(value: Any) -> float | None:
    """Return a float, or None for empty/unparsable input. Never raises."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        v = float(value)
        return v if math.isfinite(v) else None
    s = normalize_number_text(str(value))
    if not s or not _PLAIN_NUMBER.match(s):
        return None
    return float(s)


def is_number_text(value: Any) -> bool:
    return parse_number(value) is not None


__all__ = ["parse_number", "normalize_number_text", "is_number_text"]
