"""
Import router - spreadsheet preview, import and template download.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from hiring.core.config import settings
from hiring.core.dependencies import get_import_service
from hiring.schemas.imports import (
    ImportExecuteResponse,
    ImportPreviewResponse,
    ImportTemplateResponse,
)
from hiring.services.import_service import ImportService, build_template, summarize
from hiring.services.spreadsheet import check_upload

router = APIRouter(prefix="/import", tags=["import"])


async def _read_upload(file: UploadFile) -> bytes:
    # One byte past the cap is enough to reject an oversized upload
    content = await file.read(settings.IMPORT_MAX_BYTES + 1)
    check_upload(file.filename, len(content), settings.IMPORT_MAX_BYTES)
    return content


@router.post("/preview", response_model=ImportPreviewResponse)
async def preview_import(
    file: UploadFile = File(...),
    service: ImportService = Depends(get_import_service),
):
    """Parse and validate a spreadsheet without writing anything."""
    content = await _read_upload(file)
    preview = await service.preview(content, file.filename)
    return ImportPreviewResponse(preview=preview)


@router.post("/execute", response_model=ImportExecuteResponse)
async def execute_import(
    file: UploadFile = File(...),
    service: ImportService = Depends(get_import_service),
):
    """
    Import every valid row of a spreadsheet.

    Rows fail independently; the response lists each failed row with its
    spreadsheet row number.
    """
    content = await _read_upload(file)
    result = await service.execute(content, file.filename)
    return ImportExecuteResponse(success=result.success, message=summarize(result), result=result)


@router.get("/template", response_model=ImportTemplateResponse)
async def get_import_template():
    return build_template()
