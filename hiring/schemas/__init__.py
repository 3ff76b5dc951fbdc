"""
Schemas package.

Import all schemas here for easy access.
"""

from hiring.schemas.base import ApiModel, MessageResponse, TimestampedRead
from hiring.schemas.source import (
    SourceCreate,
    SourceUpdate,
    SourceRead,
    SourceWithStats,
    SourceAnalytics,
    SourceStats,
    InterviewInsights,
)
from hiring.schemas.referrer import (
    ReferrerCreate,
    ReferrerUpdate,
    ReferrerRead,
    ReferrerWithStats,
    ReferrerStats,
)
from hiring.schemas.candidate import (
    CandidateCreate,
    CandidateUpdate,
    CandidateRead,
    CandidateFeedback,
    CandidateFilters,
    CandidatePagination,
    CandidateStats,
    BulkStageUpdate,
    StageSummary,
)
from hiring.schemas.imports import CandidateImportRow, ImportResult

__all__ = [
    # Shared
    "ApiModel", "MessageResponse", "TimestampedRead",
    # Source
    "SourceCreate", "SourceUpdate", "SourceRead", "SourceWithStats",
    "SourceAnalytics", "SourceStats", "InterviewInsights",
    # Referrer
    "ReferrerCreate", "ReferrerUpdate", "ReferrerRead", "ReferrerWithStats", "ReferrerStats",
    # Candidate
    "CandidateCreate", "CandidateUpdate", "CandidateRead", "CandidateFeedback",
    "CandidateFilters", "CandidatePagination", "CandidateStats", "BulkStageUpdate", "StageSummary",
    # Import
    "CandidateImportRow", "ImportResult",
]
