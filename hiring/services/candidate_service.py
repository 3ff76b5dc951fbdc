"""
Candidate business logic service.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hiring.errors import InvalidEnumError, NotFoundError, ValidationFailedError
from hiring.models.candidate import Candidate
from hiring.models.enums import OwnerRole, PipelineStage
from hiring.repositories.candidate_repository import CandidateRepository
from hiring.repositories.interfaces import CandidateStore
from hiring.repositories.referrer_repository import ReferrerRepository
from hiring.repositories.source_repository import SourceRepository
from hiring.schemas.candidate import (
    CandidateCreate,
    CandidateFeedback,
    CandidateFilters,
    CandidatePagination,
    CandidateStats,
    CandidateUpdate,
)
from hiring.services.candidate_stats import get_candidate_stats
from hiring.utils.ratings import is_valid_rating

logger = logging.getLogger(__name__)

RATING_RANGE_MESSAGE = "Interview rating must be an integer between 1 and 5"

SORT_FIELDS = {
    "name": "name",
    "currentStage": "current_stage",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

# Columns that cannot be cleared by a partial update
NOT_NULLABLE_FIELDS = ("name", "current_stage")


def parse_stage(value: Any) -> PipelineStage:
    try:
        return PipelineStage(value)
    except ValueError:
        raise InvalidEnumError(f"Invalid stage: {value}", {"field": "currentStage"}) from None


def parse_owner(value: Any) -> OwnerRole:
    try:
        return OwnerRole(value)
    except ValueError:
        raise InvalidEnumError(f"Invalid owner role: {value}", {"field": "currentOwner"}) from None


def check_rating(value: Any) -> Optional[int]:
    if value is None:
        return None
    if not is_valid_rating(value):
        raise ValidationFailedError(RATING_RANGE_MESSAGE, {"field": "interviewRating"})
    return value


class CandidateService:
    """Service for candidate business logic."""

    def __init__(
        self,
        candidates: CandidateStore,
        sources: SourceRepository,
        referrers: ReferrerRepository,
    ):
        self.candidates = candidates
        self.sources = sources
        self.referrers = referrers

    @classmethod
    def for_session(cls, db: AsyncSession) -> "CandidateService":
        return cls(CandidateRepository(db), SourceRepository(db), ReferrerRepository(db))

    async def _check_references(self, values: Dict[str, Any]) -> None:
        source_id = values.get("source_id")
        if source_id is not None and await self.sources.get_by_id(source_id) is None:
            raise NotFoundError(f"Source not found: {source_id}")

        referrer_id = values.get("referrer_id")
        if referrer_id is not None and await self.referrers.get_by_id(referrer_id) is None:
            raise NotFoundError(f"Referrer not found: {referrer_id}")

    def _check_values(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Validate enum and rating fields in place; only keys present are checked."""
        for field in NOT_NULLABLE_FIELDS:
            if field in values and values[field] is None:
                raise ValidationFailedError(f"{field} cannot be null", {"field": field})

        if values.get("current_stage") is not None:
            values["current_stage"] = parse_stage(values["current_stage"])
        if values.get("current_owner") is not None:
            values["current_owner"] = parse_owner(values["current_owner"])
        if "interview_rating" in values:
            values["interview_rating"] = check_rating(values["interview_rating"])
        return values

    async def create_candidate(self, data: CandidateCreate) -> Candidate:
        values = data.model_dump()
        if values["current_stage"] is None:
            values["current_stage"] = PipelineStage.NEW
        self._check_values(values)
        await self._check_references(values)

        candidate = await self.candidates.create(values)
        logger.info("Created candidate %s at stage %s", candidate.id, candidate.current_stage.value)
        return candidate

    async def get_candidate(self, candidate_id: UUID) -> Candidate:
        candidate = await self.candidates.get_by_id(candidate_id)
        if not candidate:
            raise NotFoundError("Candidate not found")
        return candidate

    async def list_candidates(
        self,
        filters: Optional[CandidateFilters] = None,
        pagination: Optional[CandidatePagination] = None,
    ) -> Tuple[List[Candidate], int]:
        """One page of candidates plus the total matching the filters."""
        pagination = pagination or CandidatePagination()
        order_by = (
            (SORT_FIELDS[pagination.sort_by], pagination.sort_order),
            ("id", "asc"),
        )
        candidates = await self.candidates.scan(
            filters,
            order_by=order_by,
            limit=pagination.limit,
            offset=pagination.offset,
        )
        total = await self.candidates.count(filters)
        return candidates, total

    async def update_candidate(self, candidate_id: UUID, data: CandidateUpdate) -> Candidate:
        """Apply the fields the client sent; absent fields stay untouched."""
        await self.get_candidate(candidate_id)

        values = self._check_values(data.model_dump(exclude_unset=True))
        await self._check_references(values)

        candidate = await self.candidates.update(candidate_id, values)
        if not candidate:
            raise NotFoundError("Candidate not found")
        return candidate

    async def update_feedback(self, candidate_id: UUID, data: CandidateFeedback) -> Candidate:
        values = {
            "interview_rating": check_rating(data.interview_rating),
            "notes": data.notes,
        }
        candidate = await self.candidates.update(candidate_id, values)
        if not candidate:
            raise NotFoundError("Candidate not found")
        return candidate

    async def delete_candidate(self, candidate_id: UUID) -> None:
        candidate = await self.get_candidate(candidate_id)
        await self.candidates.delete(candidate)
        logger.info("Deleted candidate %s", candidate_id)

    async def bulk_update_stages(self, candidate_ids: Sequence[UUID], stage: Any) -> int:
        """Move every existing candidate in the set to one stage; returns rows changed."""
        if not candidate_ids:
            raise ValidationFailedError("candidateIds must be a non-empty array")
        new_stage = parse_stage(stage)

        count = await self.candidates.bulk_update_stage(list(candidate_ids), new_stage)
        logger.info(
            "Bulk stage update to %s: %d of %d candidates updated",
            new_stage.value,
            count,
            len(candidate_ids),
        )
        return count

    async def get_stats(self) -> CandidateStats:
        return await get_candidate_stats(self.candidates)
