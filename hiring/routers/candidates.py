"""
Candidate router - API endpoints for candidates, pipeline stats and bulk moves.
"""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from hiring.core.config import settings
from hiring.core.dependencies import get_candidate_service
from hiring.schemas.base import MessageResponse
from hiring.schemas.candidate import (
    BulkStageUpdate,
    BulkStageUpdateResponse,
    CandidateCreate,
    CandidateEnvelope,
    CandidateFeedback,
    CandidateFilters,
    CandidateListResponse,
    CandidatePagination,
    CandidateRead,
    CandidateResponse,
    CandidateSortField,
    CandidateStats,
    CandidateUpdate,
)
from hiring.services.candidate_service import CandidateService, parse_owner, parse_stage

router = APIRouter(prefix="/candidates", tags=["candidates"])


# Static paths are registered before /{candidate_id}
@router.get("/stats", response_model=CandidateStats)
async def get_candidate_stats(service: CandidateService = Depends(get_candidate_service)):
    """Per-stage and per-owner counts, recent candidates and stage columns."""
    return await service.get_stats()


@router.post("/bulk/update-stages", response_model=BulkStageUpdateResponse)
async def bulk_update_stages(
    data: BulkStageUpdate,
    service: CandidateService = Depends(get_candidate_service),
):
    """Move a set of candidates to one stage. Unknown ids are skipped."""
    count = await service.bulk_update_stages(data.candidate_ids, data.current_stage)
    return BulkStageUpdateResponse(message=f"Updated {count} candidates successfully", count=count)


@router.post("", response_model=CandidateEnvelope, status_code=status.HTTP_201_CREATED)
async def create_candidate(
    data: CandidateCreate,
    service: CandidateService = Depends(get_candidate_service),
):
    candidate = await service.create_candidate(data)
    return CandidateEnvelope(
        message="Candidate created successfully",
        candidate=CandidateRead.model_validate(candidate),
    )


@router.get("", response_model=CandidateListResponse)
async def list_candidates(
    current_stage: Optional[str] = Query(None, alias="currentStage"),
    current_owner: Optional[str] = Query(None, alias="currentOwner"),
    source_id: Optional[UUID] = Query(None, alias="sourceId"),
    referrer_id: Optional[UUID] = Query(None, alias="referrerId"),
    search: Optional[str] = None,
    interview_rating: Optional[int] = Query(None, alias="interviewRating", ge=1, le=5),
    min_interview_rating: Optional[int] = Query(None, alias="minInterviewRating", ge=1, le=5),
    max_interview_rating: Optional[int] = Query(None, alias="maxInterviewRating", ge=1, le=5),
    has_interview_rating: Optional[bool] = Query(None, alias="hasInterviewRating"),
    created_from: Optional[datetime] = Query(None, alias="createdFrom"),
    created_to: Optional[datetime] = Query(None, alias="createdTo"),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
    sort_by: CandidateSortField = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    service: CandidateService = Depends(get_candidate_service),
):
    """
    List candidates with pagination and filters.

    hasInterviewRating=false returns unrated candidates only and ignores the
    other rating filters.
    """
    filters = CandidateFilters(
        current_stage=parse_stage(current_stage) if current_stage else None,
        current_owner=parse_owner(current_owner) if current_owner else None,
        source_id=source_id,
        referrer_id=referrer_id,
        search=search or None,
        interview_rating=interview_rating,
        min_interview_rating=min_interview_rating,
        max_interview_rating=max_interview_rating,
        has_interview_rating=has_interview_rating,
        created_from=created_from,
        created_to=created_to,
    )
    pagination = CandidatePagination(
        limit=limit,
        offset=offset,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    candidates, total = await service.list_candidates(filters, pagination)
    return CandidateListResponse(
        data=[CandidateRead.model_validate(c) for c in candidates],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/{candidate_id}", response_model=CandidateResponse)
async def get_candidate(
    candidate_id: UUID,
    service: CandidateService = Depends(get_candidate_service),
):
    candidate = await service.get_candidate(candidate_id)
    return CandidateResponse(candidate=CandidateRead.model_validate(candidate))


@router.patch("/{candidate_id}", response_model=CandidateEnvelope)
async def update_candidate(
    candidate_id: UUID,
    data: CandidateUpdate,
    service: CandidateService = Depends(get_candidate_service),
):
    candidate = await service.update_candidate(candidate_id, data)
    return CandidateEnvelope(
        message="Candidate updated successfully",
        candidate=CandidateRead.model_validate(candidate),
    )


@router.patch("/{candidate_id}/feedback", response_model=CandidateEnvelope)
async def update_candidate_feedback(
    candidate_id: UUID,
    data: CandidateFeedback,
    service: CandidateService = Depends(get_candidate_service),
):
    """Set interview rating and notes together; missing values clear them."""
    candidate = await service.update_feedback(candidate_id, data)
    return CandidateEnvelope(
        message="Candidate feedback updated successfully",
        candidate=CandidateRead.model_validate(candidate),
    )


@router.delete("/{candidate_id}", response_model=MessageResponse)
async def delete_candidate(
    candidate_id: UUID,
    service: CandidateService = Depends(get_candidate_service),
):
    await service.delete_candidate(candidate_id)
    return MessageResponse(message="Candidate deleted successfully")
