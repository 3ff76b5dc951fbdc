"""
Source business logic service.

Every source handed back to the API carries its candidate count and
interview insights.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hiring.errors import ConflictError, NotFoundError
from hiring.models.source import Source
from hiring.repositories.candidate_repository import CandidateRepository
from hiring.repositories.interfaces import CandidateReader
from hiring.repositories.source_repository import SourceRepository
from hiring.schemas.candidate import CandidateFilters
from hiring.schemas.source import (
    InterviewInsights,
    SourceAnalytics,
    SourceCreate,
    SourceFilters,
    SourceInterviewRow,
    SourcePagination,
    SourceStats,
    SourceUpdate,
    SourceWithStats,
    TopSource,
)
from hiring.services.source_analytics import build_interview_insights, get_source_analytics

logger = logging.getLogger(__name__)

TOP_SOURCES_LIMIT = 10
UNKNOWN_TYPE = "unknown"


class SourceService:
    """Service for source business logic."""

    def __init__(self, sources: SourceRepository, candidates: CandidateReader):
        self.sources = sources
        self.candidates = candidates

    @classmethod
    def for_session(cls, db: AsyncSession) -> "SourceService":
        return cls(SourceRepository(db), CandidateRepository(db))

    async def _candidate_counts(self, source_ids: Sequence[UUID]) -> Dict[UUID, int]:
        if not source_ids:
            return {}
        return await self.candidates.count_by(
            "source_id", CandidateFilters(source_ids=list(source_ids))
        )

    async def with_stats(self, sources: Sequence[Source]) -> List[SourceWithStats]:
        """Attach candidate counts and interview insights to each source."""
        ids = [source.id for source in sources]
        counts = await self._candidate_counts(ids)
        insights = await build_interview_insights(self.candidates, ids)

        return [
            SourceWithStats.model_validate(source).model_copy(
                update={
                    "candidate_count": counts.get(source.id, 0),
                    "interview_insights": insights.get(source.id, InterviewInsights()),
                }
            )
            for source in sources
        ]

    async def _get_source(self, source_id: UUID) -> Source:
        source = await self.sources.get_by_id(source_id)
        if not source:
            raise NotFoundError("Source not found")
        return source

    async def create_source(self, data: SourceCreate) -> SourceWithStats:
        if await self.sources.get_by_name(data.name):
            raise ConflictError(f'Source with name "{data.name}" already exists')

        source = await self.sources.create(data.model_dump())
        logger.info("Created source %s (%s)", source.id, source.name)
        [result] = await self.with_stats([source])
        return result

    async def get_source(self, source_id: UUID) -> SourceWithStats:
        source = await self._get_source(source_id)
        [result] = await self.with_stats([source])
        return result

    async def list_sources(
        self,
        filters: Optional[SourceFilters] = None,
        pagination: Optional[SourcePagination] = None,
    ) -> Tuple[List[SourceWithStats], int]:
        sources = await self.sources.list(filters, pagination)
        total = await self.sources.count(filters)
        return await self.with_stats(sources), total

    async def update_source(self, source_id: UUID, data: SourceUpdate) -> SourceWithStats:
        source = await self._get_source(source_id)
        values = data.model_dump(exclude_unset=True)

        new_name = values.get("name")
        if new_name and new_name != source.name:
            if await self.sources.get_by_name(new_name):
                raise ConflictError(f'Source with name "{new_name}" already exists')

        source = await self.sources.update(source, values)
        [result] = await self.with_stats([source])
        return result

    async def delete_source(self, source_id: UUID) -> None:
        source = await self._get_source(source_id)
        attached = (await self._candidate_counts([source_id])).get(source_id, 0)
        if attached > 0:
            raise ConflictError(
                f"Cannot delete source with {attached} associated candidates",
                {"candidateCount": attached},
            )

        await self.sources.delete(source)
        logger.info("Deleted source %s", source_id)

    async def get_stats(self) -> SourceStats:
        sources = await self.sources.list_all()
        ids = [source.id for source in sources]
        counts = await self._candidate_counts(ids)
        insights = await build_interview_insights(self.candidates, ids)

        by_type: Dict[str, int] = {}
        for source in sources:
            key = source.type or UNKNOWN_TYPE
            by_type[key] = by_type.get(key, 0) + 1

        # Sorted by name already, so equal counts keep alphabetical order
        ranked = sorted(sources, key=lambda s: counts.get(s.id, 0), reverse=True)
        top_sources = [
            TopSource(id=s.id, name=s.name, candidate_count=counts.get(s.id, 0))
            for s in ranked[:TOP_SOURCES_LIMIT]
        ]

        summary = InterviewInsights()
        by_source_interview = []
        for source in sources:
            row = insights[source.id]
            summary.interviewed += row.interviewed
            summary.passed += row.passed
            summary.failed += row.failed
            by_source_interview.append(
                SourceInterviewRow(id=source.id, name=source.name, **row.model_dump())
            )

        return SourceStats(
            total=len(sources),
            by_type=by_type,
            top_sources=top_sources,
            interview_summary=summary,
            by_source_interview=by_source_interview,
        )

    async def get_analytics(self, now: Optional[datetime] = None) -> List[SourceAnalytics]:
        sources = await self.sources.list_all()
        return await get_source_analytics(sources, self.candidates, now)
