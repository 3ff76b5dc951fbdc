"""
Schemas for spreadsheet import.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from hiring.models.enums import OwnerRole, PipelineStage
from hiring.schemas.base import ApiModel
from hiring.schemas.candidate import CandidateRead


class CandidateImportRow(ApiModel):
    """One normalised spreadsheet row. Source/referrer are names, not ids."""

    name: str = ""
    telegram: Optional[str] = None
    country: Optional[str] = None
    timezone: Optional[str] = None
    source: Optional[str] = None
    referrer: Optional[str] = None
    current_stage: Optional[PipelineStage] = None
    current_owner: Optional[OwnerRole] = None
    interview_rating: Optional[int] = None
    notes: Optional[str] = None


class RowError(ApiModel):
    row: int
    error: str


class ImportResult(ApiModel):
    success: bool = True
    imported: int = 0
    failed: int = 0
    errors: List[RowError] = Field(default_factory=list)
    candidates: List[CandidateRead] = Field(default_factory=list)


class ImportExecuteResponse(ApiModel):
    success: bool
    message: str
    result: ImportResult


class PreviewRow(ApiModel):
    row: int
    data: CandidateImportRow
    valid: bool
    error: Optional[str] = None


class ImportPreview(ApiModel):
    total_rows: int
    valid_rows: int
    invalid_rows: int
    candidates: List[PreviewRow]


class ImportPreviewResponse(ApiModel):
    success: bool = True
    preview: ImportPreview


class ImportTemplate(ApiModel):
    headers: List[str]
    example: List[str]
    stages: List[str]
    owners: List[str]


class ImportTemplateResponse(ApiModel):
    success: bool = True
    template: ImportTemplate
    instructions: Dict[str, Any]
