"""
Candidate import from spreadsheets.

Each row is validated, then persisted inside its own savepoint so a failing
row is recorded and rolled back without touching the rows around it.
Sources and referrers named in the sheet are reused when they exist and
created otherwise; lookups are cached per batch.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hiring.errors import AppError, ValidationFailedError
from hiring.models.enums import OwnerRole, PipelineStage
from hiring.repositories.candidate_repository import CandidateRepository
from hiring.repositories.interfaces import CandidateStore
from hiring.repositories.referrer_repository import ReferrerRepository
from hiring.repositories.source_repository import SourceRepository
from hiring.schemas.base import normalize_notes
from hiring.schemas.candidate import CandidateRead
from hiring.schemas.imports import (
    CandidateImportRow,
    ImportPreview,
    ImportResult,
    ImportTemplate,
    ImportTemplateResponse,
    PreviewRow,
    RowError,
)
from hiring.services.spreadsheet import parse_spreadsheet
from hiring.utils.ratings import MAX_RATING, MIN_RATING

logger = logging.getLogger(__name__)

# Spreadsheet row of the first data row (row 1 is the header)
FIRST_DATA_ROW = 2

TEMPLATE_HEADERS = [
    "Name",
    "Telegram",
    "Country",
    "Timezone",
    "Source",
    "Referrer",
    "Stage",
    "Owner",
    "Rating",
    "Notes",
]

TEMPLATE_EXAMPLE = [
    "John Doe",
    "@johndoe",
    "United States",
    "America/New_York",
    "LinkedIn",
    "Jane Smith",
    "qualifying",
    "sourcer",
    "2",
    "Strong technical background",
]

TEMPLATE_INSTRUCTIONS = {
    "name": "Required. Full name of the candidate.",
    "telegram": "Optional. Telegram handle (with or without @).",
    "country": "Optional. Country of residence.",
    "timezone": "Optional. Timezone (e.g., America/New_York).",
    "source": "Optional. How the candidate was found. Unknown sources are created.",
    "referrer": "Optional. Who referred the candidate. Unknown referrers are created.",
    "stage": "Optional. Current pipeline stage (see allowed values). Defaults to new.",
    "owner": "Optional. Current owner role (see allowed values).",
    "rating": "Optional. Interview rating (1-5, 1-2 passed, 3 consideration, 4-5 failed).",
    "notes": "Optional. Additional notes or comments.",
}


def validate_import_row(row: CandidateImportRow) -> Optional[str]:
    """Error message for a row that cannot be imported, None when it is valid."""
    if not row.name or not row.name.strip():
        return "Name is required"
    if row.interview_rating is not None and not MIN_RATING <= row.interview_rating <= MAX_RATING:
        return "Interview rating must be between 1 and 5"
    return None


def build_template() -> ImportTemplateResponse:
    return ImportTemplateResponse(
        template=ImportTemplate(
            headers=TEMPLATE_HEADERS,
            example=TEMPLATE_EXAMPLE,
            stages=[stage.value for stage in PipelineStage],
            owners=[owner.value for owner in OwnerRole],
        ),
        instructions=TEMPLATE_INSTRUCTIONS,
    )


class ImportService:
    """Service for spreadsheet preview and import."""

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
    def for_session(cls, db: AsyncSession) -> "ImportService":
        return cls(CandidateRepository(db), SourceRepository(db), ReferrerRepository(db))

    async def parse(self, content: bytes, filename: str) -> List[CandidateImportRow]:
        """Parse an upload off the event loop."""
        return await asyncio.to_thread(parse_spreadsheet, content, filename)

    async def preview(self, content: bytes, filename: str) -> ImportPreview:
        rows = await self.parse(content, filename)
        checked = []
        for index, row in enumerate(rows):
            error = validate_import_row(row)
            checked.append(
                PreviewRow(row=index + FIRST_DATA_ROW, data=row, valid=error is None, error=error)
            )

        valid = sum(1 for r in checked if r.valid)
        return ImportPreview(
            total_rows=len(rows),
            valid_rows=valid,
            invalid_rows=len(rows) - valid,
            candidates=checked,
        )

    async def execute(self, content: bytes, filename: str) -> ImportResult:
        rows = await self.parse(content, filename)
        if not rows:
            raise ValidationFailedError("No valid data found in spreadsheet")

        result = await self.import_candidates(rows)
        logger.info(
            "Import of %s finished: %d imported, %d failed",
            filename,
            result.imported,
            result.failed,
        )
        return result

    async def _source_id(self, name: str, cache: Dict[str, UUID], created: Dict[str, UUID]) -> UUID:
        if name in cache:
            return cache[name]
        source = await self.sources.get_by_name(name)
        if source is None:
            source = await self.sources.create({"name": name})
        created[name] = source.id
        return source.id

    async def _referrer_id(self, name: str, cache: Dict[str, UUID], created: Dict[str, UUID]) -> UUID:
        if name in cache:
            return cache[name]
        referrer = await self.referrers.get_by_name(name)
        if referrer is None:
            referrer = await self.referrers.create({"name": name})
        created[name] = referrer.id
        return referrer.id

    async def import_candidates(self, rows: Sequence[CandidateImportRow]) -> ImportResult:
        """Import every valid row; failures are collected per row and never abort the batch."""
        result = ImportResult()
        source_cache: Dict[str, UUID] = {}
        referrer_cache: Dict[str, UUID] = {}

        for index, row in enumerate(rows):
            row_number = index + FIRST_DATA_ROW

            error = validate_import_row(row)
            if error:
                result.failed += 1
                result.errors.append(RowError(row=row_number, error=error))
                continue

            # Lookups made inside the savepoint only reach the cache once it commits
            new_sources: Dict[str, UUID] = {}
            new_referrers: Dict[str, UUID] = {}
            try:
                async with self.candidates.savepoint():
                    source_id = None
                    if row.source:
                        source_id = await self._source_id(row.source, source_cache, new_sources)
                    referrer_id = None
                    if row.referrer:
                        referrer_id = await self._referrer_id(row.referrer, referrer_cache, new_referrers)

                    candidate = await self.candidates.create(
                        {
                            "name": row.name.strip(),
                            "telegram": row.telegram,
                            "country": row.country,
                            "timezone": row.timezone,
                            "source_id": source_id,
                            "referrer_id": referrer_id,
                            "current_stage": row.current_stage or PipelineStage.NEW,
                            "current_owner": row.current_owner,
                            "interview_rating": row.interview_rating,
                            "notes": normalize_notes(row.notes),
                        }
                    )
            except (SQLAlchemyError, AppError) as exc:
                logger.warning("Import row %d failed: %s", row_number, exc)
                result.failed += 1
                result.errors.append(RowError(row=row_number, error=str(exc)))
                continue

            source_cache.update(new_sources)
            referrer_cache.update(new_referrers)
            result.imported += 1
            result.candidates.append(CandidateRead.model_validate(candidate))

        result.success = result.failed == 0
        return result


def summarize(result: ImportResult) -> str:
    return f"Import completed. {result.imported} candidates imported, {result.failed} failed."