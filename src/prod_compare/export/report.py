# src/prod_compare/export/report.py
from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from .. import config
from ..analysis.deviation import ReconciliationStats
from ..compare.joiner import MergedRecord

_log = logging.getLogger("prod_compare.export")

# (header, record attribute), in output order
COLUMNS: tuple[tuple[str, str], ...] = (
    ("Part Code", "part_code"),
    ("Operator", "operator"),
    ("Work Order No", "work_order"),
    ("Work Order Op No", "operation_no"),
    ("Machine", "machine"),
    ("Operation Code", "operation_code"),
    ("Actual (min)", "actual_minutes"),
    ("Planned (min)", "planned_minutes"),
    ("Deviation (min)", "deviation_minutes"),
    ("Deviation (%)", "deviation_pct"),
)

# (label, stats attribute, unit)
SUMMARY_ROWS: tuple[tuple[str, str, str], ...] = (
    ("Total records", "total", "rows"),
    ("Records with deviation", "with_deviation", "rows"),
    ("Slower than plan", "positive", "rows"),
    ("Faster than plan", "negative", "rows"),
    ("Total deviation", "total_deviation_minutes", "min"),
    ("Mean deviation", "mean_deviation_pct", "%"),
    ("Records without plan", "unmatched", "rows"),
)


def format_pct(v: Optional[float]) -> Optional[str]:
    return None if v is None else f"{v:+.1f}%"


def records_frame(records: Sequence[MergedRecord]) -> pd.DataFrame:
    data = []
    for r in records:
        row = {header: getattr(r, attr) for header, attr in COLUMNS}
        row["Deviation (%)"] = format_pct(r.deviation_pct)
        data.append(row)
    return pd.DataFrame(data, columns=[h for h, _ in COLUMNS])


def export_workbook(records: Sequence[MergedRecord], stats: ReconciliationStats,
                    sheet_name: str | None = None) -> bytes:
    """Merged rows + summary block as xlsx bytes. Absent values stay blank cells."""
    sheet = sheet_name or config.sheet_name()
    df = records_frame(records)
    buf = BytesIO()
    with pd.ExcelWriter(buf, engine="xlsxwriter") as writer:
        df.to_excel(writer, sheet_name=sheet, index=False, na_rep="")
        ws = writer.sheets[sheet]

        # summary block: one blank row after the data
        start = len(df) + 2
        ws.write(start, 0, "Summary")
        for i, (label, attr, unit) in enumerate(SUMMARY_ROWS, start=1):
            value = getattr(stats, attr)
            ws.write(start + i, 0, label)
            ws.write_number(start + i, 1, float(value) if isinstance(value, float) else int(value))
            ws.write(start + i, 2, unit)

        ws.set_column(0, len(COLUMNS) - 1, 18)
    _log.info("export: %d records written to sheet %r", len(df), sheet)
    return buf.getvalue()


def write_report(path: str | Path, records: Sequence[MergedRecord], stats: ReconciliationStats) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(export_workbook(records, stats))
    return out


__all__ = ["COLUMNS", "SUMMARY_ROWS", "export_workbook", "format_pct", "records_frame", "write_report"]
