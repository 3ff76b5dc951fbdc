"""
Pydantic schemas for Source.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional
from uuid import UUID

from pydantic import Field

from hiring.schemas.base import ApiModel, TimestampedRead


class SourceCreate(ApiModel):
    name: str = Field(min_length=2, max_length=100)
    type: Optional[str] = Field(default=None, min_length=1, max_length=50)


class SourceUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    type: Optional[str] = Field(default=None, min_length=1, max_length=50)


class SourceRead(TimestampedRead):
    name: str
    type: Optional[str] = None


class InterviewInsights(ApiModel):
    """Rated candidates of a source split by outcome."""

    interviewed: int = 0
    passed: int = 0
    failed: int = 0


class SourceWithStats(SourceRead):
    candidate_count: int = 0
    interview_insights: InterviewInsights = Field(default_factory=InterviewInsights)


class SourceEnvelope(ApiModel):
    message: str
    source: SourceWithStats


class SourceListResponse(ApiModel):
    data: List[SourceWithStats]
    total: int
    limit: int
    offset: int


class SourceFilters(ApiModel):
    search: Optional[str] = None
    type: Optional[str] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None


class SourcePagination(ApiModel):
    limit: int = 20
    offset: int = 0
    sort_by: Literal["name", "type", "createdAt"] = "createdAt"
    sort_order: Literal["asc", "desc"] = "desc"


class TopSource(ApiModel):
    id: UUID
    name: str
    candidate_count: int


class SourceInterviewRow(InterviewInsights):
    id: UUID
    name: str


class SourceStats(ApiModel):
    total: int
    by_type: Dict[str, int]
    top_sources: List[TopSource]
    interview_summary: InterviewInsights
    by_source_interview: List[SourceInterviewRow]


class InterviewMetrics(ApiModel):
    interviewed: int
    passed: int
    consideration: int
    failed: int
    not_rated: int


class ConversionRates(ApiModel):
    interview_rate: float
    pass_rate: float
    fail_rate: float
    quality_score: float


class PipelineBreakdown(ApiModel):
    active: int
    completed: int
    dropped: int


class SourceAnalytics(ApiModel):
    id: UUID
    name: str
    type: Optional[str] = None
    total_candidates: int
    interview_metrics: InterviewMetrics
    conversion_rates: ConversionRates
    pipeline: PipelineBreakdown
