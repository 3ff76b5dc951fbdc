"""
Referrer router - API endpoints for referrers.
"""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from hiring.core.config import settings
from hiring.core.dependencies import get_referrer_service
from hiring.schemas.base import MessageResponse
from hiring.schemas.referrer import (
    ReferrerCreate,
    ReferrerEnvelope,
    ReferrerFilters,
    ReferrerListResponse,
    ReferrerPagination,
    ReferrerStats,
    ReferrerUpdate,
    ReferrerWithStats,
)
from hiring.services.referrer_service import ReferrerService

router = APIRouter(prefix="/referrers", tags=["referrers"])


@router.get("/stats", response_model=ReferrerStats)
async def get_referrer_stats(service: ReferrerService = Depends(get_referrer_service)):
    return await service.get_stats()


@router.get("/external/{external_id}", response_model=ReferrerWithStats)
async def get_referrer_by_external_id(
    external_id: str,
    service: ReferrerService = Depends(get_referrer_service),
):
    """Look a referrer up by the id it has in the external referral system."""
    return await service.get_by_external_id(external_id)


@router.post("", response_model=ReferrerEnvelope, status_code=status.HTTP_201_CREATED)
async def create_referrer(
    data: ReferrerCreate,
    service: ReferrerService = Depends(get_referrer_service),
):
    referrer = await service.create_referrer(data)
    return ReferrerEnvelope(message="Referrer created successfully", referrer=referrer)


@router.get("", response_model=ReferrerListResponse)
async def list_referrers(
    search: Optional[str] = None,
    external_id: Optional[str] = Query(None, alias="externalId"),
    created_from: Optional[datetime] = Query(None, alias="createdFrom"),
    created_to: Optional[datetime] = Query(None, alias="createdTo"),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=settings.MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
    sort_by: Literal["name", "externalId", "createdAt"] = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    service: ReferrerService = Depends(get_referrer_service),
):
    filters = ReferrerFilters(
        search=search or None,
        external_id=external_id,
        created_from=created_from,
        created_to=created_to,
    )
    pagination = ReferrerPagination(limit=limit, offset=offset, sort_by=sort_by, sort_order=sort_order)
    referrers, total = await service.list_referrers(filters, pagination)
    return ReferrerListResponse(referrers=referrers, total=total, limit=limit, offset=offset)


@router.get("/{referrer_id}", response_model=ReferrerWithStats)
async def get_referrer(
    referrer_id: UUID,
    service: ReferrerService = Depends(get_referrer_service),
):
    return await service.get_referrer(referrer_id)


@router.patch("/{referrer_id}", response_model=ReferrerEnvelope)
async def update_referrer(
    referrer_id: UUID,
    data: ReferrerUpdate,
    service: ReferrerService = Depends(get_referrer_service),
):
    referrer = await service.update_referrer(referrer_id, data)
    return ReferrerEnvelope(message="Referrer updated successfully", referrer=referrer)


@router.delete("/{referrer_id}", response_model=MessageResponse)
async def delete_referrer(
    referrer_id: UUID,
    service: ReferrerService = Depends(get_referrer_service),
):
    await service.delete_referrer(referrer_id)
    return MessageResponse(message="Referrer deleted successfully")
