# src/prod_compare/ingest/spreadsheet.py
from __future__ import annotations

import logging
import math
from datetime import date, datetime, time
from io import BytesIO
from typing import Any

import pandas as pd

from ..errors import SourceReadError
from .table import RawTable, cells_by_position

_log = logging.getLogger("prod_compare.ingest")


def _cell_text(v: Any) -> str:
    """Cell value -> text.

    Formula cells arrive as their cached result (workbook is opened
    data_only); a formula without a cached result arrives empty. Rich text
    runs arrive already concatenated.
    """
    if v is None:
        return ""
    if isinstance(v, float):
        if math.isnan(v):
            return ""
        if v.is_integer():
            return str(int(v))
        return repr(v)
    if isinstance(v, pd.Timestamp):
        if pd.isna(v):
            return ""
        v = v.to_pydatetime()
    if isinstance(v, datetime):
        return v.date().isoformat() if v.time() == time.min else v.isoformat(sep=" ")
    if isinstance(v, (date, time)):
        return v.isoformat()
    try:
        if pd.isna(v):
            return ""
    except (TypeError, ValueError):
        pass
    return str(v).strip()


def _read_first_sheet(data: bytes) -> pd.DataFrame:
    return pd.read_excel(
        BytesIO(data),
        sheet_name=0,
        header=None,
        dtype=object,
        engine="openpyxl",
        keep_default_na=False,
        na_filter=False,
    )


def read_spreadsheet(data: bytes) -> RawTable:
    """Read the first worksheet of a workbook. Row 1 is always the header row."""
    try:
        df = _read_first_sheet(data)
    except Exception as e:
        raise SourceReadError(f"workbook could not be read: {e}", cause=e) from e

    if df.empty:
        return RawTable()

    grid = [[_cell_text(v) for v in row] for row in df.itertuples(index=False, name=None)]
    header_cells = grid[0]
    rows = []
    blank = 0
    for cells in grid[1:]:
        keyed = cells_by_position(header_cells, cells)
        # values under dropped columns do not count
        if not any(keyed.values()):
            blank += 1
            continue
        rows.append(keyed)

    table = RawTable.build(header_cells, rows)
    _log.debug(
        "spreadsheet: %d columns (%d dropped), %d rows, %d blank rows skipped",
        len(table.headers), len(header_cells) - len(table.headers), len(table.rows), blank,
    )
    return table


__all__ = ["read_spreadsheet"]
