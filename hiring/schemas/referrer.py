"""
Pydantic schemas for Referrer.
"""

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import Field

from hiring.schemas.base import ApiModel, TimestampedRead


class ReferrerCreate(ApiModel):
    name: str = Field(min_length=2, max_length=100)
    external_id: Optional[str] = Field(default=None, min_length=1, max_length=50)
    telegram: Optional[str] = Field(default=None, min_length=1, max_length=50)


class ReferrerUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    external_id: Optional[str] = Field(default=None, min_length=1, max_length=50)
    telegram: Optional[str] = Field(default=None, min_length=1, max_length=50)


class ReferrerRead(TimestampedRead):
    name: str
    external_id: Optional[str] = None
    telegram: Optional[str] = None


class ReferrerWithStats(ReferrerRead):
    candidate_count: int = 0


class ReferrerEnvelope(ApiModel):
    message: str
    referrer: ReferrerWithStats


class ReferrerListResponse(ApiModel):
    referrers: List[ReferrerWithStats]
    total: int
    limit: int
    offset: int


class ReferrerFilters(ApiModel):
    search: Optional[str] = None
    external_id: Optional[str] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None


class ReferrerPagination(ApiModel):
    limit: int = 20
    offset: int = 0
    sort_by: Literal["name", "externalId", "createdAt"] = "createdAt"
    sort_order: Literal["asc", "desc"] = "desc"


class TopReferrer(ApiModel):
    id: UUID
    name: str
    candidate_count: int


class ReferrerStats(ApiModel):
    total: int
    with_external_id: int
    with_telegram: int
    top_referrers: List[TopReferrer]
