"""
Referrer business logic service.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from hiring.errors import ConflictError, NotFoundError
from hiring.models.referrer import Referrer
from hiring.repositories.candidate_repository import CandidateRepository
from hiring.repositories.interfaces import CandidateReader
from hiring.repositories.referrer_repository import ReferrerRepository
from hiring.schemas.candidate import CandidateFilters
from hiring.schemas.referrer import (
    ReferrerCreate,
    ReferrerFilters,
    ReferrerPagination,
    ReferrerStats,
    ReferrerUpdate,
    ReferrerWithStats,
    TopReferrer,
)

logger = logging.getLogger(__name__)

TOP_REFERRERS_LIMIT = 10


def _conflict_message(name: str, external_id: str) -> str:
    return f'Referrer with name "{name}" and external ID "{external_id}" already exists'


class ReferrerService:
    """Service for referrer business logic."""

    def __init__(self, referrers: ReferrerRepository, candidates: CandidateReader):
        self.referrers = referrers
        self.candidates = candidates

    @classmethod
    def for_session(cls, db: AsyncSession) -> "ReferrerService":
        return cls(ReferrerRepository(db), CandidateRepository(db))

    async def _candidate_counts(self, referrer_ids: Sequence[UUID]) -> Dict[UUID, int]:
        if not referrer_ids:
            return {}
        return await self.candidates.count_by(
            "referrer_id", CandidateFilters(referrer_ids=list(referrer_ids))
        )

    async def with_stats(self, referrers: Sequence[Referrer]) -> List[ReferrerWithStats]:
        counts = await self._candidate_counts([r.id for r in referrers])
        return [
            ReferrerWithStats.model_validate(referrer).model_copy(
                update={"candidate_count": counts.get(referrer.id, 0)}
            )
            for referrer in referrers
        ]

    async def _get_referrer(self, referrer_id: UUID) -> Referrer:
        referrer = await self.referrers.get_by_id(referrer_id)
        if not referrer:
            raise NotFoundError("Referrer not found")
        return referrer

    async def create_referrer(self, data: ReferrerCreate) -> ReferrerWithStats:
        # Without an external id the (name, externalId) pair cannot collide
        if data.external_id and await self.referrers.find_conflict(data.name, data.external_id):
            raise ConflictError(_conflict_message(data.name, data.external_id))

        referrer = await self.referrers.create(data.model_dump())
        logger.info("Created referrer %s (%s)", referrer.id, referrer.name)
        [result] = await self.with_stats([referrer])
        return result

    async def get_referrer(self, referrer_id: UUID) -> ReferrerWithStats:
        referrer = await self._get_referrer(referrer_id)
        [result] = await self.with_stats([referrer])
        return result

    async def get_by_external_id(self, external_id: str) -> ReferrerWithStats:
        referrer = await self.referrers.get_by_external_id(external_id)
        if not referrer:
            raise NotFoundError("Referrer not found")
        [result] = await self.with_stats([referrer])
        return result

    async def list_referrers(
        self,
        filters: Optional[ReferrerFilters] = None,
        pagination: Optional[ReferrerPagination] = None,
    ) -> Tuple[List[ReferrerWithStats], int]:
        referrers = await self.referrers.list(filters, pagination)
        total = await self.referrers.count(filters)
        return await self.with_stats(referrers), total

    async def update_referrer(self, referrer_id: UUID, data: ReferrerUpdate) -> ReferrerWithStats:
        referrer = await self._get_referrer(referrer_id)
        values = data.model_dump(exclude_unset=True)

        new_name = values.get("name") or referrer.name
        new_external_id = values.get("external_id", referrer.external_id)
        changed = new_name != referrer.name or new_external_id != referrer.external_id
        if changed and new_external_id:
            if await self.referrers.find_conflict(new_name, new_external_id, exclude_id=referrer_id):
                raise ConflictError(_conflict_message(new_name, new_external_id))

        referrer = await self.referrers.update(referrer, values)
        [result] = await self.with_stats([referrer])
        return result

    async def delete_referrer(self, referrer_id: UUID) -> None:
        referrer = await self._get_referrer(referrer_id)
        attached = (await self._candidate_counts([referrer_id])).get(referrer_id, 0)
        if attached > 0:
            raise ConflictError(
                f"Cannot delete referrer with {attached} associated candidates",
                {"candidateCount": attached},
            )

        await self.referrers.delete(referrer)
        logger.info("Deleted referrer %s", referrer_id)

    async def get_stats(self) -> ReferrerStats:
        referrers = await self.referrers.list_all()
        counts = await self._candidate_counts([r.id for r in referrers])

        ranked = sorted(referrers, key=lambda r: counts.get(r.id, 0), reverse=True)
        return ReferrerStats(
            total=len(referrers),
            with_external_id=sum(1 for r in referrers if r.external_id),
            with_telegram=sum(1 for r in referrers if r.telegram),
            top_referrers=[
                TopReferrer(id=r.id, name=r.name, candidate_count=counts.get(r.id, 0))
                for r in ranked[:TOP_REFERRERS_LIMIT]
            ],
        )
