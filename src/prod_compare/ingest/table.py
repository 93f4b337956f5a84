from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping


@dataclass(frozen=True)
class RawTable:
    """Header list plus rows of cell text. No type inference happens here."""

    headers: tuple[str, ...] = ()
    rows: tuple[dict[str, str], ...] = ()

    @classmethod
    def build(cls, headers: Iterable[object], rows: Iterable[Mapping[str, object]]) -> "RawTable":
        """Enforce the invariants: no empty/duplicate headers, row keys within headers."""
        clean: list[str] = []
        seen: set[str] = set()
        for h in headers:
            name = "" if h is None else str(h).strip()
            if not name or name in seen:
                continue
            seen.add(name)
            clean.append(name)
        out_rows = []
        for r in rows:
            out_rows.append({h: ("" if r[h] is None else str(r[h])) for h in clean if h in r})
        return cls(headers=tuple(clean), rows=tuple(out_rows))

    def __len__(self) -> int:
        return len(self.rows)


def cells_by_position(header_cells: list[str], cells: list[str]) -> dict[str, str]:
    """Key a positional row against a positional header row.

    Empty headers and repeated headers (after the first) are skipped, so
    the result already satisfies ``RawTable`` invariants.
    """
    out: dict[str, str] = {}
    seen: set[str] = set()
    for i, h in enumerate(header_cells):
        if not h or h in seen:
            continue
        seen.add(h)
        if i < len(cells):
            out[h] = cells[i]
    return out
