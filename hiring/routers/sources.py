"""
Source router - API endpoints for candidate sources and their analytics.
"""

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from hiring.core.config import settings
from hiring.core.dependencies import get_source_service
from hiring.schemas.base import MessageResponse
from hiring.schemas.source import (
    SourceAnalytics,
    SourceCreate,
    SourceEnvelope,
    SourceFilters,
    SourceListResponse,
    SourcePagination,
    SourceStats,
    SourceUpdate,
    SourceWithStats,
)
from hiring.services.source_service import SourceService

router = APIRouter(prefix="/sources", tags=["sources"])


@router.get("/stats", response_model=SourceStats)
async def get_source_stats(service: SourceService = Depends(get_source_service)):
    return await service.get_stats()


@router.get("/analytics", response_model=List[SourceAnalytics])
async def get_source_analytics(service: SourceService = Depends(get_source_service)):
    """Interview outcomes, conversion rates and pipeline state per source."""
    return await service.get_analytics()


@router.post("", response_model=SourceEnvelope, status_code=status.HTTP_201_CREATED)
async def create_source(
    data: SourceCreate,
    service: SourceService = Depends(get_source_service),
):
    source = await service.create_source(data)
    return SourceEnvelope(message="Source created successfully", source=source)


@router.get("", response_model=SourceListResponse)
async def list_sources(
    search: Optional[str] = None,
    type: Optional[str] = None,
    created_from: Optional[datetime] = Query(None, alias="createdFrom"),
    created_to: Optional[datetime] = Query(None, alias="createdTo"),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
    sort_by: Literal["name", "type", "createdAt"] = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    service: SourceService = Depends(get_source_service),
):
    filters = SourceFilters(
        search=search or None,
        type=type,
        created_from=created_from,
        created_to=created_to,
    )
    pagination = SourcePagination(limit=limit, offset=offset, sort_by=sort_by, sort_order=sort_order)
    sources, total = await service.list_sources(filters, pagination)
    return SourceListResponse(data=sources, total=total, limit=limit, offset=offset)


@router.get("/{source_id}", response_model=SourceWithStats)
async def get_source(
    source_id: UUID,
    service: SourceService = Depends(get_source_service),
):
    return await service.get_source(source_id)


@router.patch("/{source_id}", response_model=SourceEnvelope)
async def update_source(
    source_id: UUID,
    data: SourceUpdate,
    service: SourceService = Depends(get_source_service),
):
    source = await service.update_source(source_id, data)
    return SourceEnvelope(message="Source updated successfully", source=source)


@router.delete("/{source_id}", response_model=MessageResponse)
async def delete_source(
    source_id: UUID,
    service: SourceService = Depends(get_source_service),
):
    """Delete a source. Sources with candidates attached cannot be deleted."""
    await service.delete_source(source_id)
    return MessageResponse(message="Source deleted successfully")
