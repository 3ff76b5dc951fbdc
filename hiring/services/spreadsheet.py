"""
Spreadsheet parsing for candidate import.

Reads the first worksheet of an .xlsx workbook (openpyxl) or a .csv file.
The first row is the header; headers are matched case-insensitively
against the aliases in COLUMN_ALIASES. Fully blank rows are skipped.
"""

import csv
import io
import logging
import os
import re
import zipfile
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from hiring.errors import ValidationFailedError
from hiring.models.enums import OwnerRole, PipelineStage
from hiring.schemas.imports import CandidateImportRow
from hiring.utils.ratings import clamp_rating

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = (".xlsx", ".csv")

# First alias with a non-empty cell wins
COLUMN_ALIASES: Dict[str, Sequence[str]] = {
    "name": ("Name", "Full Name"),
    "telegram": ("Telegram", "Telegram Handle"),
    "country": ("Country", "Location"),
    "timezone": ("Timezone", "Time Zone"),
    "source": ("Source", "How Found"),
    "referrer": ("Referrer", "Referred By"),
    "current_stage": ("Stage", "Current Stage"),
    "current_owner": ("Owner", "Current Owner"),
    "interview_rating": ("Rating", "Interview Rating"),
    "notes": ("Notes", "Comments"),
}

STAGE_LOOKUP = {stage.value: stage for stage in PipelineStage}
OWNER_LOOKUP = {owner.value: owner for owner in OwnerRole}
OWNER_LOOKUP["chatting_manager"] = OwnerRole.CHATTING_MANAGERS

_SEPARATORS = re.compile(r"[\s\-]+")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def check_upload(filename: Optional[str], size: int, max_bytes: int) -> str:
    """Reject unsupported extensions and oversized uploads; returns the extension."""
    extension = os.path.splitext(filename or "")[1].lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise ValidationFailedError(
            "Invalid file type. Only .xlsx and .csv files are allowed.",
            {"filename": filename},
        )
    if size > max_bytes:
        raise ValidationFailedError(
            f"File too large. Maximum size is {max_bytes} bytes.",
            {"size": size, "maxBytes": max_bytes},
        )
    return extension


def normalize_token(value: str) -> str:
    return _SEPARATORS.sub("_", value.strip().lower())


def map_stage(value: Any) -> Optional[PipelineStage]:
    text = cell_text(value)
    if text is None:
        return None
    return STAGE_LOOKUP.get(normalize_token(text))


def map_owner(value: Any) -> Optional[OwnerRole]:
    text = cell_text(value)
    if text is None:
        return None
    return OWNER_LOOKUP.get(normalize_token(text))


def parse_rating(value: Any) -> Optional[int]:
    """Leading integer of a string, truncated number; clamped onto 1-5."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and value != value:
            return None
        parsed = int(value)
    else:
        match = _LEADING_INT.match(str(value))
        if not match:
            return None
        parsed = int(match.group(1))
    return clamp_rating(parsed)


def cell_text(value: Any) -> Optional[str]:
    """Cell value as trimmed text; empty cells become None."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    elif isinstance(value, (datetime, date)):
        value = value.isoformat()
    text = str(value).strip()
    return text or None


def _is_blank(values: Iterable[Any]) -> bool:
    return all(cell_text(v) is None for v in values)


def rows_to_import_rows(header: Sequence[Any], rows: Iterable[Sequence[Any]]) -> List[CandidateImportRow]:
    """Map raw header + data rows onto CandidateImportRow records."""
    positions: Dict[str, int] = {}
    for index, title in enumerate(header):
        key = (cell_text(title) or "").lower()
        if key and key not in positions:
            positions[key] = index

    columns = {
        field: [positions[a.lower()] for a in aliases if a.lower() in positions]
        for field, aliases in COLUMN_ALIASES.items()
    }

    def pick(row: Sequence[Any], field: str) -> Any:
        for index in columns[field]:
            if index < len(row) and cell_text(row[index]) is not None:
                return row[index]
        return None

    parsed = []
    for row in rows:
        if _is_blank(row):
            continue
        parsed.append(
            CandidateImportRow(
                name=cell_text(pick(row, "name")) or "",
                telegram=cell_text(pick(row, "telegram")),
                country=cell_text(pick(row, "country")),
                timezone=cell_text(pick(row, "timezone")),
                source=cell_text(pick(row, "source")),
                referrer=cell_text(pick(row, "referrer")),
                current_stage=map_stage(pick(row, "current_stage")),
                current_owner=map_owner(pick(row, "current_owner")),
                interview_rating=parse_rating(pick(row, "interview_rating")),
                notes=cell_text(pick(row, "notes")),
            )
        )
    return parsed


# openpyxl parses read-only sheets lazily; XML errors (stdlib or lxml) derive from SyntaxError
XLSX_READ_ERRORS = (
    InvalidFileException,
    zipfile.BadZipFile,
    KeyError,
    OSError,
    SyntaxError,
    ValueError,
)


def _read_xlsx(content: bytes) -> List[Sequence[Any]]:
    workbook = None
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
        if not workbook.worksheets:
            return []
        return [tuple(row) for row in workbook.worksheets[0].iter_rows(values_only=True)]
    except XLSX_READ_ERRORS as exc:
        raise ValidationFailedError("Could not read Excel workbook", {"reason": str(exc)}) from exc
    finally:
        if workbook is not None:
            workbook.close()


def _read_csv(content: bytes) -> List[Sequence[Any]]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ValidationFailedError("CSV file must be UTF-8 encoded") from exc

    try:
        return [tuple(row) for row in csv.reader(io.StringIO(text))]
    except csv.Error as exc:
        raise ValidationFailedError("Could not read CSV file", {"reason": str(exc)}) from exc


def parse_spreadsheet(content: bytes, filename: str) -> List[CandidateImportRow]:
    """Parse an uploaded spreadsheet into normalised import rows."""
    extension = os.path.splitext(filename or "")[1].lower()
    if extension == ".csv":
        raw_rows = _read_csv(content)
    elif extension == ".xlsx":
        raw_rows = _read_xlsx(content)
    else:
        raise ValidationFailedError(
            "Invalid file type. Only .xlsx and .csv files are allowed.",
            {"filename": filename},
        )

    if not raw_rows:
        return []

    header, data = raw_rows[0], raw_rows[1:]
    rows = rows_to_import_rows(header, data)
    logger.debug("Parsed %d data rows from %s", len(rows), filename)
    return rows
