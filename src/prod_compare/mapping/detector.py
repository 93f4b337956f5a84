# src/prod_compare/mapping/detector.py
"""Proposes which header plays which role.

Rules are data: per role, an ordered list of patterns (highest priority
first). Patterns are matched against a folded header (lowercase, Turkish
and other diacritics removed, ``_`` and runs of whitespace collapsed to a
single space), so they are written in plain ASCII.
"""
from __future__ import annotations

import re
import unicodedata
from typing import Dict, Iterable, Optional, Pattern, Sequence, Tuple

from ..schemas import ColumnMapping, FieldRole

RoleRules = Sequence[Tuple[FieldRole, Sequence[Pattern[str]]]]

_SEP = re.compile(r"[\s_]+")
_DOTLESS = str.maketrans({"ı": "i"})


def fold_header(h: str) -> str:
    s = str(h).casefold().translate(_DOTLESS)
    s = "".join(ch for ch in unicodedata.normalize("NFKD", s) if not unicodedata.combining(ch))
    return _SEP.sub(" ", s).strip()


def _rx(*patterns: str) -> tuple[Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


_WORK_ORDER = _rx(r"is emri no", r"work ?order(?: no| number| nr)?\b", r"\bw\.?o\.? ?no\b")

# ===================== Rule catalogs =====================

PLAN_RULES: RoleRules = (
    (FieldRole.PLAN_WORK_ORDER, _WORK_ORDER),
    (FieldRole.PLAN_PART_CODE, _rx(r"parca kodu", r"part ?(?:no|code|number)\b")),
    (FieldRole.PLAN_DURATION, _rx(
        r"ua sure", r"uretim suresi", r"planned (?:time|duration)", r"sure.*dk", r"duration.*min",
    )),
)

MES_RULES: RoleRules = (
    (FieldRole.MES_WORK_ORDER, _WORK_ORDER),
    (FieldRole.MES_OPERATOR, _rx(r"operator")),
    (FieldRole.MES_OPERATION_NO, _rx(r"is emri op no", r"operation (?:no|number)\b", r"\bop no\b")),
    (FieldRole.MES_MACHINE, _rx(r"makine", r"machine", r"ekipman", r"equipment")),
    (FieldRole.MES_OPERATION_CODE, _rx(
        r"operasyon kodu", r"ops kodu", r"op kodu", r"operation code", r"op code",
    )),
    (FieldRole.MES_CYCLE_TIME, _rx(
        r"hiz cevrim", r"cevrim suresi", r"cycle ?time", r"\bhiz\b",
    )),
)


def match_role(headers: Sequence[str], patterns: Iterable[Pattern[str]]) -> Optional[str]:
    """First pattern (in priority order) that matches any header wins; within
    that pattern, the first header in document order is returned."""
    folded = [(h, fold_header(h)) for h in headers]
    for p in patterns:
        for original, f in folded:
            if p.search(f):
                return original
    return None


def detect_columns(headers: Sequence[str], rules: RoleRules) -> Dict[FieldRole, Optional[str]]:
    return {role: match_role(headers, patterns) for role, patterns in rules}


def propose_mapping(
    plan_headers: Sequence[str] = (),
    mes_headers: Sequence[str] = (),
) -> ColumnMapping:
    found = {**detect_columns(plan_headers, PLAN_RULES), **detect_columns(mes_headers, MES_RULES)}
    return ColumnMapping(**{role.value: header for role, header in found.items()})


__all__ = ["PLAN_RULES", "MES_RULES", "fold_header", "match_role", "detect_columns", "propose_mapping"]
