"""
Candidate repository - database operations for Candidate.

This is the candidate reader the analytics services are built on: grouped
counts by any column, filtered scans and bulk updates by id set.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hiring.models.candidate import Candidate
from hiring.models.enums import PipelineStage
from hiring.schemas.candidate import CandidateFilters

OrderBy = Sequence[Tuple[str, str]]

GROUPABLE_COLUMNS = {
    "current_stage": Candidate.current_stage,
    "current_owner": Candidate.current_owner,
    "source_id": Candidate.source_id,
    "referrer_id": Candidate.referrer_id,
}

SORTABLE_COLUMNS = {
    "id": Candidate.id,
    "name": Candidate.name,
    "current_stage": Candidate.current_stage,
    "created_at": Candidate.created_at,
    "updated_at": Candidate.updated_at,
}


def _apply_filters(query, filters: Optional[CandidateFilters]):
    """Translate a CandidateFilters predicate into WHERE clauses."""
    if filters is None:
        return query

    if filters.current_stage is not None:
        query = query.where(Candidate.current_stage == filters.current_stage)
    if filters.current_owner is not None:
        query = query.where(Candidate.current_owner == filters.current_owner)
    if filters.source_id is not None:
        query = query.where(Candidate.source_id == filters.source_id)
    if filters.source_ids is not None:
        query = query.where(Candidate.source_id.in_(filters.source_ids))
    if filters.referrer_id is not None:
        query = query.where(Candidate.referrer_id == filters.referrer_id)
    if filters.referrer_ids is not None:
        query = query.where(Candidate.referrer_id.in_(filters.referrer_ids))

    if filters.search:
        query = query.where(
            or_(
                Candidate.name.icontains(filters.search, autoescape=True),
                Candidate.telegram.icontains(filters.search, autoescape=True),
                Candidate.country.icontains(filters.search, autoescape=True),
            )
        )

    # hasInterviewRating=false wins over every other rating filter
    if filters.has_interview_rating is False:
        query = query.where(Candidate.interview_rating.is_(None))
    else:
        if filters.has_interview_rating is True:
            query = query.where(Candidate.interview_rating.is_not(None))
        if filters.interview_rating is not None:
            query = query.where(Candidate.interview_rating == filters.interview_rating)
        if filters.min_interview_rating is not None:
            query = query.where(Candidate.interview_rating >= filters.min_interview_rating)
        if filters.max_interview_rating is not None:
            query = query.where(Candidate.interview_rating <= filters.max_interview_rating)

    if filters.created_from is not None:
        query = query.where(Candidate.created_at >= filters.created_from)
    if filters.created_to is not None:
        query = query.where(Candidate.created_at <= filters.created_to)

    return query


class CandidateRepository:
    """Repository for Candidate database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def scan(
        self,
        filters: Optional[CandidateFilters] = None,
        order_by: OrderBy = (("created_at", "desc"),),
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Candidate]:
        """Filtered scan with explicit ordering; no limit means every row."""
        query = _apply_filters(select(Candidate), filters)

        for field, direction in order_by:
            column = SORTABLE_COLUMNS[field]
            query = query.order_by(column.desc() if direction == "desc" else column.asc())

        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(self, filters: Optional[CandidateFilters] = None) -> int:
        query = _apply_filters(select(func.count()).select_from(Candidate), filters)
        result = await self.db.execute(query)
        return result.scalar_one()

    async def count_by(
        self,
        column: str,
        filters: Optional[CandidateFilters] = None,
    ) -> Dict[Any, int]:
        """Grouped counts keyed by the raw column value (None included)."""
        group_column = GROUPABLE_COLUMNS[column]
        query = _apply_filters(
            select(group_column, func.count()).select_from(Candidate),
            filters,
        ).group_by(group_column)

        result = await self.db.execute(query)
        return {value: count for value, count in result.all()}

    async def recent(self, limit: int = 5) -> List[Candidate]:
        return await self.scan(order_by=(("created_at", "desc"), ("id", "asc")), limit=limit)

    async def get_by_id(self, candidate_id: UUID) -> Optional[Candidate]:
        """Get a candidate by ID with source and referrer loaded."""
        result = await self.db.execute(
            select(Candidate)
            .where(Candidate.id == candidate_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create(self, values: Dict[str, Any]) -> Candidate:
        """Create a new candidate."""
        candidate = Candidate(**values)
        self.db.add(candidate)
        await self.db.flush()
        return await self.get_by_id(candidate.id)

    async def update(self, candidate_id: UUID, values: Dict[str, Any]) -> Optional[Candidate]:
        """Apply column values to a candidate; None when it does not exist."""
        candidate = await self.get_by_id(candidate_id)
        if not candidate:
            return None

        for field, value in values.items():
            setattr(candidate, field, value)

        candidate.updated_at = func.now()
        await self.db.flush()
        return await self.get_by_id(candidate_id)

    async def delete(self, candidate: Candidate) -> None:
        await self.db.delete(candidate)
        await self.db.flush()

    async def bulk_update_stage(self, candidate_ids: Sequence[UUID], stage: PipelineStage) -> int:
        """Move every existing candidate in the id set; unknown ids are skipped."""
        if not candidate_ids:
            return 0

        result = await self.db.execute(
            update(Candidate)
            .where(Candidate.id.in_(list(candidate_ids)))
            .values(current_stage=stage, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    def savepoint(self):
        """Nested transaction so one failed row can be rolled back alone."""
        return self.db.begin_nested()
