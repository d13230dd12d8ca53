from pydantic import BaseModel
from typing import Any, Optional, Literal, List

from ..pipeline.derive import EnrichedRecord, Summary

class EditRequest(BaseModel):
    field: str
    value: Any = None

class SummaryOut(BaseModel):
    totals: Summary
    profit_margin_display: str
    break_even_month: Optional[str] = None

class ProjectionResponse(BaseModel):
    version: int
    source: Optional[str] = None
    records: List[EnrichedRecord]
    summary: SummaryOut

class EditResponse(BaseModel):
    changed: bool
    projection: ProjectionResponse

class SaveResponse(BaseModel):
    ok: bool
    error: Optional[str] = None
    payload_sha256: Optional[str] = None

class NoticeOut(BaseModel):
    id: str
    level: Literal['info','warning','error']
    message: str
    created_at_utc: str

class HealthResponse(BaseModel):
    ok: bool
    sync_state: str
    records: int
    version: int
