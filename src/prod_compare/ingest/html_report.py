"""Reader for MES reports saved from the browser as HTML.

The layout is not known up front. The data table is assumed to be the
largest table in the document; its header row is the first row that looks
like labels rather than data (see ``HEADER_ROW_RULES``).
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Sequence

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..errors import SourceReadError
from .numbers import is_number_text
from .table import RawTable, cells_by_position

_log = logging.getLogger("prod_compare.ingest")

_WS = re.compile(r"\s+")

MIN_HEADER_CELLS = 3

# A row is the header row when every rule holds. Rules see the non-empty cells.
HeaderRule = Callable[[Sequence[str]], bool]
HEADER_ROW_RULES: tuple[tuple[str, HeaderRule], ...] = (
    ("at least three labels", lambda cells: len(cells) >= MIN_HEADER_CELLS),
    ("no numeric cells", lambda cells: not any(is_number_text(c) for c in cells)),
)


def is_header_row(cells: Sequence[str], rules=HEADER_ROW_RULES) -> bool:
    filled = [c for c in cells if c]
    return all(check(filled) for _, check in rules)


def _cell_text(cell: Tag) -> str:
    return _WS.sub(" ", cell.get_text(" ", strip=True)).strip()


def _own_rows(table: Tag) -> list[Tag]:
    # skip rows that belong to tables nested inside this one
    return [tr for tr in table.find_all("tr") if tr.find_parent("table") is table]


def _row_cells(tr: Tag) -> list[str]:
    out: list[str] = []
    for cell in tr.find_all(["td", "th"], recursive=False):
        out.append(_cell_text(cell))
        try:
            span = int(cell.get("colspan", 1))
        except (TypeError, ValueError):
            span = 1
        out.extend([""] * max(0, span - 1))
    return out


def pick_data_table(tables: Sequence[Tag]) -> Tag:
    # max() keeps the first table on ties
    return max(tables, key=lambda t: len(_own_rows(t)))


def read_html_report(content: str | bytes) -> RawTable:
    try:
        soup = BeautifulSoup(content, "lxml")
    except Exception as e:
        raise SourceReadError(f"HTML could not be parsed: {e}", cause=e) from e

    tables = soup.find_all("table")
    if not tables:
        raise SourceReadError("HTML report contains no <table> element; select the columns manually")

    table = pick_data_table(tables)
    grid = [_row_cells(tr) for tr in _own_rows(table)]

    header_idx = next((i for i, cells in enumerate(grid) if is_header_row(cells)), None)
    if header_idx is None:
        raise SourceReadError(
            f"no header row found in the largest table ({len(grid)} rows): "
            f"expected a row with at least {MIN_HEADER_CELLS} non-numeric labels"
        )

    header_cells = grid[header_idx]
    rows = [cells_by_position(header_cells, cells) for cells in grid[header_idx + 1:] if any(cells)]
    result = RawTable.build(header_cells, rows)
    _log.debug(
        "html: %d tables, picked one with %d rows, header at row %d, %d data rows",
        len(tables), len(grid), header_idx + 1, len(result.rows),
    )
    return result


__all__ = ["read_html_report", "is_header_row", "pick_data_table", "HEADER_ROW_RULES"]
