"""
Referrer repository - database operations for Referrer.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hiring.models.referrer import Referrer
from hiring.schemas.referrer import ReferrerFilters, ReferrerPagination

SORT_COLUMNS = {
    "name": Referrer.name,
    "externalId": Referrer.external_id,
    "createdAt": Referrer.created_at,
}


def _apply_filters(query, filters: Optional[ReferrerFilters]):
    if filters is None:
        return query
    if filters.external_id is not None:
        query = query.where(Referrer.external_id == filters.external_id)
    if filters.created_from is not None:
        query = query.where(Referrer.created_at >= filters.created_from)
    if filters.created_to is not None:
        query = query.where(Referrer.created_at <= filters.created_to)
    if filters.search:
        query = query.where(
            or_(
                Referrer.name.icontains(filters.search, autoescape=True),
                Referrer.external_id.icontains(filters.search, autoescape=True),
                Referrer.telegram.icontains(filters.search, autoescape=True),
            )
        )
    return query


class ReferrerRepository:
    """Repository for Referrer database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self,
        filters: Optional[ReferrerFilters] = None,
        pagination: Optional[ReferrerPagination] = None,
    ) -> List[Referrer]:
        pagination = pagination or ReferrerPagination()
        column = SORT_COLUMNS[pagination.sort_by]
        query = _apply_filters(select(Referrer), filters)
        query = query.order_by(
            column.desc() if pagination.sort_order == "desc" else column.asc(),
            Referrer.id.asc(),
        ).limit(pagination.limit).offset(pagination.offset)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(self, filters: Optional[ReferrerFilters] = None) -> int:
        query = _apply_filters(select(func.count()).select_from(Referrer), filters)
        result = await self.db.execute(query)
        return result.scalar_one()

    async def list_all(self) -> List[Referrer]:
        result = await self.db.execute(select(Referrer).order_by(Referrer.name.asc(), Referrer.id.asc()))
        return list(result.scalars().all())

    async def get_by_id(self, referrer_id: UUID) -> Optional[Referrer]:
        result = await self.db.execute(select(Referrer).where(Referrer.id == referrer_id))
        return result.scalar_one_or_none()

    async def get_by_external_id(self, external_id: str) -> Optional[Referrer]:
        result = await self.db.execute(
            select(Referrer)
            .where(Referrer.external_id == external_id)
            .order_by(Referrer.created_at.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[Referrer]:
        """First referrer with this exact name (names are not unique on their own)."""
        result = await self.db.execute(
            select(Referrer)
            .where(Referrer.name == name)
            .order_by(Referrer.created_at.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def find_conflict(
        self,
        name: str,
        external_id: str,
        exclude_id: Optional[UUID] = None,
    ) -> Optional[Referrer]:
        """Another referrer holding the same (name, external_id) pair."""
        query = select(Referrer).where(
            Referrer.name == name,
            Referrer.external_id == external_id,
        )
        if exclude_id is not None:
            query = query.where(Referrer.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none()

    async def create(self, values: Dict[str, Any]) -> Referrer:
        referrer = Referrer(**values)
        self.db.add(referrer)
        await self.db.flush()
        await self.db.refresh(referrer)
        return referrer

    async def update(self, referrer: Referrer, values: Dict[str, Any]) -> Referrer:
        for field, value in values.items():
            setattr(referrer, field, value)

        referrer.updated_at = func.now()
        await self.db.flush()
        await self.db.refresh(referrer)
        return referrer

    async def delete(self, referrer: Referrer) -> None:
        await self.db.delete(referrer)
        await self.db.flush()
