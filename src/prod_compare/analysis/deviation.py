from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

if TYPE_CHECKING:
    from ..compare.joiner import MergedRecord


@dataclass(frozen=True)
class ReconciliationStats:
    total: int = 0
    with_deviation: int = 0
    positive: int = 0
    negative: int = 0
    total_deviation_minutes: float = 0.0
    mean_deviation_pct: float = 0.0
    unmatched: int = 0

    @property
    def on_plan(self) -> int:
        return self.with_deviation - self.positive - self.negative

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_stats(records: Iterable["MergedRecord"]) -> ReconciliationStats:
    total = with_dev = pos = neg = unmatched = 0
    dev_sum = 0.0
    pct_sum = 0.0
    pct_n = 0
    for r in records:
        total += 1
        if not r.plan_matched:
            unmatched += 1
        if r.deviation_minutes is not None:
            with_dev += 1
            dev_sum += r.deviation_minutes
            if r.deviation_minutes > 0:
                pos += 1
            elif r.deviation_minutes < 0:
                neg += 1
        if r.deviation_pct is not None:
            pct_sum += r.deviation_pct
            pct_n += 1
    return ReconciliationStats(
        total=total,
        with_deviation=with_dev,
        positive=pos,
        negative=neg,
        total_deviation_minutes=round(dev_sum, 1),
        mean_deviation_pct=round(pct_sum / pct_n, 1) if pct_n else 0.0,
        unmatched=unmatched,
    )


def filter_records(
    records: Iterable["MergedRecord"],
    machine: Optional[str] = None,
    operator: Optional[str] = None,
    only_deviating: bool = False,
) -> List["MergedRecord"]:
    """Pure filter; recompute stats on the result with ``build_stats``."""
    out = []
    for r in records:
        if machine is not None and r.machine != machine:
            continue
        if operator is not None and r.operator != operator:
            continue
        if only_deviating and not r.deviation_minutes:
            continue
        out.append(r)
    return out


def preview(records: Iterable["MergedRecord"], limit: int = 50) -> List[Dict[str, Any]]:
    out = []
    for i, r in enumerate(records):
        if i >= limit:
            break
        out.append(r.to_dict())
    return out


__all__ = ["ReconciliationStats", "build_stats", "filter_records", "preview"]
