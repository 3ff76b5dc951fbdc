"""
Source repository - database operations for Source.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hiring.models.source import Source
from hiring.schemas.source import SourceFilters, SourcePagination

SORT_COLUMNS = {
    "name": Source.name,
    "type": Source.type,
    "createdAt": Source.created_at,
}


def _apply_filters(query, filters: Optional[SourceFilters]):
    if filters is None:
        return query
    if filters.type is not None:
        query = query.where(Source.type == filters.type)
    if filters.created_from is not None:
        query = query.where(Source.created_at >= filters.created_from)
    if filters.created_to is not None:
        query = query.where(Source.created_at <= filters.created_to)
    if filters.search:
        query = query.where(
            or_(
                Source.name.icontains(filters.search, autoescape=True),
                Source.type.icontains(filters.search, autoescape=True),
            )
        )
    return query


class SourceRepository:
    """Repository for Source database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(
        self,
        filters: Optional[SourceFilters] = None,
        pagination: Optional[SourcePagination] = None,
    ) -> List[Source]:
        """List sources with filters and pagination."""
        pagination = pagination or SourcePagination()
        column = SORT_COLUMNS[pagination.sort_by]
        query = _apply_filters(select(Source), filters)
        query = query.order_by(
            column.desc() if pagination.sort_order == "desc" else column.asc(),
            Source.id.asc(),
        ).limit(pagination.limit).offset(pagination.offset)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(self, filters: Optional[SourceFilters] = None) -> int:
        query = _apply_filters(select(func.count()).select_from(Source), filters)
        result = await self.db.execute(query)
        return result.scalar_one()

    async def list_all(self) -> List[Source]:
        result = await self.db.execute(select(Source).order_by(Source.name.asc(), Source.id.asc()))
        return list(result.scalars().all())

    async def get_by_id(self, source_id: UUID) -> Optional[Source]:
        result = await self.db.execute(select(Source).where(Source.id == source_id))
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[Source]:
        result = await self.db.execute(select(Source).where(Source.name == name))
        return result.scalar_one_or_none()

    async def create(self, values: Dict[str, Any]) -> Source:
        source = Source(**values)
        self.db.add(source)
        await self.db.flush()
        await self.db.refresh(source)
        return source

    async def update(self, source: Source, values: Dict[str, Any]) -> Source:
        for field, value in values.items():
            setattr(source, field, value)

        source.updated_at = func.now()
        await self.db.flush()
        await self.db.refresh(source)
        return source

    async def delete(self, source: Source) -> None:
        await self.db.delete(source)
        await self.db.flush()
