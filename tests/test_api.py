"""Tests for the /compare endpoints."""

import json
from io import BytesIO

import httpx
import pytest
from openpyxl import load_workbook

from prod_compare.api.app import create_app

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def uploads(xlsx_factory, html_factory):
    plan = xlsx_factory([
        ["İş Emri No", "Parça Kodu", "ÜA Süre (dk)"],
        ["WO-1", "X1", 120],
        ["WO-2", "X2", "10"],
    ])
    mes = html_factory(
        ["İş Emri No", "Operatör", "Makine", "Hız Çevrim (sn)"],
        [["WO-1", "Ali", "CNC-01", "7200"], ["WO-2", "Can", "CNC-02", "900"], ["WO-7", "Can", "CNC-02", "60"]],
    ).encode("utf-8")
    return {
        "plan": ("plan.xlsx", plan, XLSX),
        "mes": ("mes_report.html", mes, "text/html"),
    }


async def _post(app, url, files, data=None):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        return await client.post(url, files=files, data=data or {})


class TestCompareEndpoints:
    @pytest.mark.asyncio
    async def test_headers_and_proposal(self, app, uploads):
        response = await _post(app, "/compare/headers", uploads)
        assert response.status_code == 200
        body = response.json()
        assert body["plan"]["headers"] == ["İş Emri No", "Parça Kodu", "ÜA Süre (dk)"]
        assert body["mes"]["row_count"] == 3
        assert body["proposed_mapping"]["mes_cycle_time"] == "Hız Çevrim (sn)"
        assert body["proposed_mapping"]["mes_operation_code"] is None

    @pytest.mark.asyncio
    async def test_run_with_detected_mapping(self, app, uploads):
        response = await _post(app, "/compare/run", uploads)
        assert response.status_code == 200
        body = response.json()
        assert body["record_count"] == 3
        assert body["stats"]["with_deviation"] == 2
        assert body["stats"]["unmatched"] == 1
        assert body["preview"][1]["deviation_pct"] == 50.0

    @pytest.mark.asyncio
    async def test_run_with_filter(self, app, uploads):
        response = await _post(app, "/compare/run", uploads, data={"machine": "CNC-02"})
        assert response.json()["record_count"] == 2

    @pytest.mark.asyncio
    async def test_run_missing_work_order_mapping(self, app, uploads):
        mapping = json.dumps({"plan_work_order": "İş Emri No", "mes_cycle_time": "Hız Çevrim (sn)"})
        response = await _post(app, "/compare/run", uploads, data={"mapping": mapping})
        assert response.status_code == 400
        assert "mes_work_order" in response.json()["detail"]["msg"]

    @pytest.mark.asyncio
    async def test_run_invalid_mapping_json(self, app, uploads):
        response = await _post(app, "/compare/run", uploads, data={"mapping": "{not json"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unreadable_upload(self, app, uploads):
        uploads["plan"] = ("plan.xlsx", b"garbage", XLSX)
        response = await _post(app, "/compare/headers", uploads)
        assert response.status_code == 400
        assert response.json()["detail"]["msg"].startswith("plan.xlsx")

    @pytest.mark.asyncio
    async def test_export_returns_workbook(self, app, uploads):
        response = await _post(app, "/compare/export", uploads)
        assert response.status_code == 200
        assert response.headers["content-type"] == XLSX
        ws = load_workbook(BytesIO(response.content)).active
        assert ws.cell(row=2, column=3).value == "WO-1"
        assert ws.cell(row=2, column=10).value == "+0.0%"

    @pytest.mark.asyncio
    async def test_upload_size_cap(self, app, uploads, monkeypatch):
        monkeypatch.setenv("PRODCOMPARE_MAX_UPLOAD_MB", "1")
        uploads["mes"] = ("mes.html", b"<table>" + b" " * (1024 * 1024 + 1) + b"</table>", "text/html")
        response = await _post(app, "/compare/headers", uploads)
        assert response.status_code == 413
