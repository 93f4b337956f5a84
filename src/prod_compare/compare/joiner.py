"""Plan vs. MES join on the work-order key.

The MES side drives iteration: one output record per executed operation
with a non-empty work-order number. Plan rows that were never executed
produce nothing.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..analysis.deviation import ReconciliationStats, build_stats
from ..errors import MappingError
from ..ingest.numbers import parse_number
from ..ingest.table import RawTable
from ..schemas import ColumnMapping, FieldRole

_log = logging.getLogger("prod_compare.compare")

SECONDS_PER_MINUTE = 60.0


@dataclass(frozen=True)
class MergedRecord:
    part_code: str = ""
    operator: str = ""
    work_order: str = ""
    operation_no: str = ""
    machine: str = ""
    operation_code: str = ""
    planned_minutes: Optional[float] = None
    actual_minutes: Optional[float] = None
    deviation_minutes: Optional[float] = None
    deviation_pct: Optional[float] = None
    plan_matched: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _text(row: Optional[dict[str, str]], header: Optional[str]) -> str:
    if row is None or header is None:
        return ""
    return str(row.get(header, "")).strip()


def _number(row: Optional[dict[str, str]], header: Optional[str]) -> Optional[float]:
    if row is None or header is None:
        return None
    return parse_number(row.get(header))


def build_plan_index(plan: RawTable, key_header: str) -> Dict[str, dict[str, str]]:
    """Work order -> first plan row with that key. Later duplicates are ignored."""
    index: Dict[str, dict[str, str]] = {}
    for row in plan.rows:
        key = _text(row, key_header)
        if key and key not in index:
            index[key] = row
    return index


def durations(actual: Optional[float], planned: Optional[float]) -> tuple[Optional[float], Optional[float]]:
    """(deviation minutes, deviation percent); None when undefined.

    Percent is undefined for a zero planned duration.
    """
    if actual is None or planned is None:
        return None, None
    # + 0.0 turns a rounded -0.0 into 0.0
    deviation = round(actual - planned, 1) + 0.0
    if planned == 0:
        return deviation, None
    return deviation, round(deviation / planned * 100.0, 1) + 0.0


def reconcile(plan: RawTable, mes: RawTable, mapping: ColumnMapping) -> List[MergedRecord]:
    if mapping.is_empty():
        _log.info("reconcile: mapping is empty, nothing to join")
        return []
    missing = mapping.missing_mandatory()
    if missing:
        raise MappingError(
            "work order column must be selected for both sources; unmapped: "
            + ", ".join(r.value for r in missing)
        )

    h = mapping.header_for
    plan_index = build_plan_index(plan, h(FieldRole.PLAN_WORK_ORDER))
    cycle_col = h(FieldRole.MES_CYCLE_TIME)
    duration_col = h(FieldRole.PLAN_DURATION)

    out: List[MergedRecord] = []
    skipped = 0
    for row in mes.rows:
        work_order = _text(row, h(FieldRole.MES_WORK_ORDER))
        if not work_order:
            skipped += 1
            continue
        plan_row = plan_index.get(work_order)

        seconds = _number(row, cycle_col)
        actual = round(seconds / SECONDS_PER_MINUTE, 1) if seconds is not None else None
        planned = _number(plan_row, duration_col)
        deviation, pct = durations(actual, planned)

        out.append(MergedRecord(
            part_code=_text(plan_row, h(FieldRole.PLAN_PART_CODE)),
            operator=_text(row, h(FieldRole.MES_OPERATOR)),
            work_order=work_order,
            operation_no=_text(row, h(FieldRole.MES_OPERATION_NO)),
            machine=_text(row, h(FieldRole.MES_MACHINE)),
            operation_code=_text(row, h(FieldRole.MES_OPERATION_CODE)),
            planned_minutes=planned,
            actual_minutes=actual,
            deviation_minutes=deviation,
            deviation_pct=pct,
            plan_matched=plan_row is not None,
        ))

    _log.info(
        "reconcile: plan keys=%d, mes rows=%d, records=%d, skipped (no work order)=%d",
        len(plan_index), len(mes.rows), len(out), skipped,
    )
    return out


@dataclass(frozen=True)
class ComparisonResult:
    mapping: ColumnMapping
    records: Sequence[MergedRecord]
    stats: ReconciliationStats


def compare(plan: RawTable, mes: RawTable, mapping: ColumnMapping) -> ComparisonResult:
    records = tuple(reconcile(plan, mes, mapping))
    return ComparisonResult(mapping=mapping, records=records, stats=build_stats(records))


__all__ = ["MergedRecord", "ComparisonResult", "build_plan_index", "durations", "reconcile", "compare"]
