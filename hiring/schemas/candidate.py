"""
Pydantic schemas for Candidate.

Stage and owner arrive as loose strings and are checked by the service
layer, so an out-of-vocabulary value is reported as an invalid enum rather
than a malformed request. Ratings must be JSON integers; the 1-5 range is
checked by the service.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, StrictInt, field_validator

from hiring.models.enums import OwnerRole, PipelineStage
from hiring.schemas.base import ApiModel, TimestampedRead, normalize_notes
from hiring.schemas.referrer import ReferrerRead
from hiring.schemas.source import SourceRead


class CandidateCreate(ApiModel):
    """Schema for creating a candidate."""

    name: str = Field(min_length=2, max_length=100)
    telegram: Optional[str] = Field(default=None, min_length=1, max_length=50)
    country: Optional[str] = Field(default=None, min_length=1, max_length=100)
    timezone: Optional[str] = Field(default=None, min_length=1, max_length=50)
    source_id: Optional[UUID] = None
    referrer_id: Optional[UUID] = None
    current_stage: Optional[str] = None
    current_owner: Optional[str] = None
    interview_rating: Optional[StrictInt] = None
    notes: Optional[str] = Field(default=None, max_length=5000)

    @field_validator("notes")
    @classmethod
    def trim_notes(cls, value: Optional[str]) -> Optional[str]:
        return normalize_notes(value)


class CandidateUpdate(ApiModel):
    """Schema for a partial update; only fields sent by the client are applied."""

    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    telegram: Optional[str] = Field(default=None, min_length=1, max_length=50)
    country: Optional[str] = Field(default=None, min_length=1, max_length=100)
    timezone: Optional[str] = Field(default=None, min_length=1, max_length=50)
    source_id: Optional[UUID] = None
    referrer_id: Optional[UUID] = None
    current_stage: Optional[str] = None
    current_owner: Optional[str] = None
    interview_rating: Optional[StrictInt] = None
    notes: Optional[str] = Field(default=None, max_length=5000)

    @field_validator("notes")
    @classmethod
    def trim_notes(cls, value: Optional[str]) -> Optional[str]:
        return normalize_notes(value)


class CandidateFeedback(ApiModel):
    """Interviewer feedback; omitted values clear the stored ones."""

    interview_rating: Optional[StrictInt] = None
    notes: Optional[str] = Field(default=None, max_length=5000)

    @field_validator("notes")
    @classmethod
    def trim_notes(cls, value: Optional[str]) -> Optional[str]:
        return normalize_notes(value)


class BulkStageUpdate(ApiModel):
    candidate_ids: List[UUID] = Field(min_length=1)
    current_stage: str


class BulkStageUpdateResponse(ApiModel):
    message: str
    count: int


class CandidateRead(TimestampedRead):
    """Schema for reading candidate data (API response)."""

    name: str
    telegram: Optional[str] = None
    country: Optional[str] = None
    timezone: Optional[str] = None
    source_id: Optional[UUID] = None
    referrer_id: Optional[UUID] = None
    current_stage: PipelineStage
    current_owner: Optional[OwnerRole] = None
    interview_rating: Optional[int] = None
    notes: Optional[str] = None
    source: Optional[SourceRead] = None
    referrer: Optional[ReferrerRead] = None


class CandidateEnvelope(ApiModel):
    message: str
    candidate: CandidateRead


class CandidateResponse(ApiModel):
    candidate: CandidateRead


class CandidateListResponse(ApiModel):
    data: List[CandidateRead]
    total: int
    limit: int
    offset: int


class CandidateFilters(BaseModel):
    """
    Composite predicate for candidate scans and grouped counts.

    Every field is optional; set fields are AND-ed together.
    """

    current_stage: Optional[PipelineStage] = None
    current_owner: Optional[OwnerRole] = None
    source_id: Optional[UUID] = None
    source_ids: Optional[List[UUID]] = None
    referrer_id: Optional[UUID] = None
    referrer_ids: Optional[List[UUID]] = None
    search: Optional[str] = None
    interview_rating: Optional[int] = None
    min_interview_rating: Optional[int] = None
    max_interview_rating: Optional[int] = None
    has_interview_rating: Optional[bool] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None


CandidateSortField = Literal["name", "currentStage", "createdAt", "updatedAt"]


class CandidatePagination(BaseModel):
    limit: int = 20
    offset: int = 0
    sort_by: CandidateSortField = "createdAt"
    sort_order: Literal["asc", "desc"] = "desc"


class SourceBrief(ApiModel):
    id: UUID
    name: str


class StageCandidate(ApiModel):
    """Trimmed candidate row shown inside a stage column."""

    id: UUID
    name: str
    telegram: Optional[str] = None
    current_owner: Optional[OwnerRole] = None
    interview_rating: Optional[int] = None
    notes: Optional[str] = None
    updated_at: datetime
    source: Optional[SourceBrief] = None


class StageSummary(ApiModel):
    count: int = 0
    candidates: List[StageCandidate] = Field(default_factory=list)


class CandidateStats(ApiModel):
    total_candidates: int
    by_stage: Dict[PipelineStage, int]
    by_owner: Dict[OwnerRole, int]
    recent_candidates: List[CandidateRead]
    stage_summaries: Dict[PipelineStage, StageSummary]
