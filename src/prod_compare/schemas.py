from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FieldRole(str, Enum):
    """Abstract column meanings consumed by the joiner."""

    # plan (production plan spreadsheet)
    PLAN_WORK_ORDER = "plan_work_order"
    PLAN_PART_CODE = "plan_part_code"
    PLAN_DURATION = "plan_duration"
    # MES (execution report)
    MES_WORK_ORDER = "mes_work_order"
    MES_OPERATOR = "mes_operator"
    MES_OPERATION_NO = "mes_operation_no"
    MES_MACHINE = "mes_machine"
    MES_OPERATION_CODE = "mes_operation_code"
    MES_CYCLE_TIME = "mes_cycle_time"

    @property
    def side(self) -> str:
        """"plan" or "mes"."""
        return self.value.split("_", 1)[0]


class ColumnMapping(BaseModel):
    """Role -> header name for one comparison run. ``None`` means unmapped."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    plan_work_order: Optional[str] = None
    plan_part_code: Optional[str] = None
    plan_duration: Optional[str] = None
    mes_work_order: Optional[str] = None
    mes_operator: Optional[str] = None
    mes_operation_no: Optional[str] = None
    mes_machine: Optional[str] = None
    mes_operation_code: Optional[str] = None
    mes_cycle_time: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_unmapped(cls, v: Any) -> Any:
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    def header_for(self, role: FieldRole) -> Optional[str]:
        return getattr(self, role.value)

    def is_empty(self) -> bool:
        return all(self.header_for(r) is None for r in FieldRole)

    def missing_mandatory(self) -> list[FieldRole]:
        return [r for r in (FieldRole.PLAN_WORK_ORDER, FieldRole.MES_WORK_ORDER) if self.header_for(r) is None]

    def with_overrides(self, overrides: Mapping[FieldRole | str, Optional[str]]) -> "ColumnMapping":
        """Return a new mapping with the given roles replaced (human edits)."""
        data = self.model_dump()
        for role, header in overrides.items():
            key = FieldRole(role).value
            data[key] = header
        return ColumnMapping(**data)


# ---- API payloads ------------------------------------------------------------

class SourceHeadersOut(BaseModel):
    filename: Optional[str] = None
    headers: List[str] = Field(default_factory=list)
    row_count: int = 0


class HeadersOut(BaseModel):
    plan: SourceHeadersOut
    mes: SourceHeadersOut
    proposed_mapping: ColumnMapping


class RunOut(BaseModel):
    status: str = "ok"
    mapping: ColumnMapping
    stats: Dict[str, Any]
    record_count: int
    preview: List[Dict[str, Any]] = Field(default_factory=list)
