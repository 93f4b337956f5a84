"""Shared fixtures: in-memory workbooks and MES HTML exports."""

from io import BytesIO

import pytest
from openpyxl import Workbook

from prod_compare.ingest.table import RawTable


def make_xlsx(rows, title="Sheet1", extra_sheets=None) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for row in rows:
        ws.append(row)
    for name, sheet_rows in (extra_sheets or {}).items():
        other = wb.create_sheet(name)
        for row in sheet_rows:
            other.append(row)
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def make_html(header, data_rows, legend_rows=2, preamble_rows=()) -> str:
    """MES-style export: a small legend table followed by the data table."""
    legend = "".join(f"<tr><td>Legend {i}</td><td>x</td></tr>" for i in range(legend_rows))
    pre = "".join("<tr>" + "".join(f"<td>{c}</td>" for c in row) + "</tr>" for row in preamble_rows)
    head = "<tr>" + "".join(f"<th>{h}</th>" for h in header) + "</tr>"
    body = "".join("<tr>" + "".join(f"<td>{c}</td>" for c in row) + "</tr>" for row in data_rows)
    return (
        "<html><head><meta charset='utf-8'></head><body>"
        f"<table>{legend}</table>"
        f"<table>{pre}{head}{body}</table>"
        "</body></html>"
    )


@pytest.fixture
def xlsx_factory():
    return make_xlsx


@pytest.fixture
def html_factory():
    return make_html


PLAN_HEADERS = ["İş Emri No", "Parça Kodu", "ÜA Süre (dk)"]
MES_HEADERS = ["İş Emri No", "Operatör", "İş Emri Op No", "Makine", "Operasyon Kodu", "Hız Çevrim (sn)"]


@pytest.fixture
def plan_table():
    return RawTable.build(PLAN_HEADERS, [
        {"İş Emri No": "WO-1", "Parça Kodu": "X1", "ÜA Süre (dk)": "120"},
        {"İş Emri No": "WO-2", "Parça Kodu": "X2", "ÜA Süre (dk)": "10"},
        {"İş Emri No": "WO-3", "Parça Kodu": "X3", "ÜA Süre (dk)": "0"},
        {"İş Emri No": "WO-4", "Parça Kodu": "X4", "ÜA Süre (dk)": "not planned"},
    ])


@pytest.fixture
def mes_table():
    def row(wo, secs, op="Ali", mach="CNC-01"):
        return {
            "İş Emri No": wo, "Operatör": op, "İş Emri Op No": "10",
            "Makine": mach, "Operasyon Kodu": "OP-TORN", "Hız Çevrim (sn)": secs,
        }
    return RawTable.build(MES_HEADERS, [
        row("WO-1", "7200"),
        row("WO-2", "900", op="Ayşe", mach="CNC-02"),
        row("WO-3", "60"),
        row("WO-4", "600"),
        row("WO-9", "300"),
        row("   ", "300"),
        row("WO-2", "", op="Ayşe", mach="CNC-02"),
    ])
