"""
FastAPI dependencies for the application.

Routers ask for services, not sessions; tests override these providers
with services built on in-memory repositories.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hiring.db.session import get_db
from hiring.services.candidate_service import CandidateService
from hiring.services.import_service import ImportService
from hiring.services.referrer_service import ReferrerService
from hiring.services.source_service import SourceService


async def get_candidate_service(db: AsyncSession = Depends(get_db)) -> CandidateService:
    return CandidateService.for_session(db)


async def get_source_service(db: AsyncSession = Depends(get_db)) -> SourceService:
    return SourceService.for_session(db)


async def get_referrer_service(db: AsyncSession = Depends(get_db)) -> ReferrerService:
    return ReferrerService.for_session(db)


async def get_import_service(db: AsyncSession = Depends(get_db)) -> ImportService:
    return ImportService.for_session(db)
