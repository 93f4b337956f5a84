from __future__ import annotations

import json
import logging
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.responses import Response
from pydantic import ValidationError

from ... import config
from ...analysis.deviation import build_stats, filter_records, preview
from ...compare.joiner import reconcile
from ...errors import MappingError, SourceReadError
from ...export.report import export_workbook
from ...ingest.sources import read_source
from ...ingest.table import RawTable
from ...mapping.detector import propose_mapping
from ...schemas import ColumnMapping, HeadersOut, RunOut, SourceHeadersOut

router = APIRouter(prefix="/compare", tags=["compare"])
_log = logging.getLogger("prod_compare.api")

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


async def _read_upload(file: UploadFile) -> RawTable:
    data = await file.read()
    if len(data) > config.max_upload_bytes():
        raise HTTPException(status_code=413, detail={"msg": f"{file.filename}: file too large"})
    try:
        return read_source(data, file.filename)
    except SourceReadError as e:
        raise HTTPException(status_code=400, detail={"msg": f"{file.filename or 'upload'}: {e}"})


def _parse_mapping(raw: Optional[str], plan: RawTable, mes: RawTable) -> ColumnMapping:
    # no mapping supplied -> use the detector's proposal as-is
    if raw is None or not raw.strip():
        return propose_mapping(plan.headers, mes.headers)
    try:
        return ColumnMapping.model_validate(json.loads(raw))
    except (ValueError, ValidationError) as e:
        raise HTTPException(status_code=400, detail={"msg": f"invalid mapping: {e}"})


async def _run(plan_file: UploadFile, mes_file: UploadFile, mapping: Optional[str],
               machine: Optional[str], operator: Optional[str], only_deviating: bool):
    plan = await _read_upload(plan_file)
    mes = await _read_upload(mes_file)
    cm = _parse_mapping(mapping, plan, mes)
    try:
        records = reconcile(plan, mes, cm)
    except MappingError as e:
        raise HTTPException(status_code=400, detail={"msg": str(e)})
    records = filter_records(records, machine=machine, operator=operator, only_deviating=only_deviating)
    return cm, records, build_stats(records)


@router.post("/headers", response_model=HeadersOut, summary="Read both sources and propose a column mapping")
async def headers(plan: UploadFile = File(...), mes: UploadFile = File(...)):
    plan_t = await _read_upload(plan)
    mes_t = await _read_upload(mes)
    return HeadersOut(
        plan=SourceHeadersOut(filename=plan.filename, headers=list(plan_t.headers), row_count=len(plan_t)),
        mes=SourceHeadersOut(filename=mes.filename, headers=list(mes_t.headers), row_count=len(mes_t)),
        proposed_mapping=propose_mapping(plan_t.headers, mes_t.headers),
    )


@router.post("/run", response_model=RunOut, summary="Join plan and MES rows and return statistics")
async def run(
    plan: UploadFile = File(...),
    mes: UploadFile = File(...),
    mapping: Optional[str] = Form(default=None),
    machine: Optional[str] = Form(default=None),
    operator: Optional[str] = Form(default=None),
    only_deviating: bool = Form(default=False),
):
    cm, records, stats = await _run(plan, mes, mapping, machine, operator, only_deviating)
    return RunOut(
        mapping=cm,
        stats=stats.to_dict(),
        record_count=len(records),
        preview=preview(records, config.preview_rows()),
    )


@router.post("/export", summary="Join plan and MES rows and download the comparison workbook")
async def export(
    plan: UploadFile = File(...),
    mes: UploadFile = File(...),
    mapping: Optional[str] = Form(default=None),
    machine: Optional[str] = Form(default=None),
    operator: Optional[str] = Form(default=None),
    only_deviating: bool = Form(default=False),
):
    _, records, stats = await _run(plan, mes, mapping, machine, operator, only_deviating)
    body = export_workbook(records, stats)
    return Response(
        content=body,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="production_comparison.xlsx"'},
    )
