"""
Workbook import API routes.

Includes:
- Preview (parse only, nothing stored)
- Import (parse and store in batches)
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse

from edgecore.db.store import TradeStore
from edgecore.errors import EdgecoreError
from edgecore.journal.ingest import IngestResult, SpreadsheetIngestor, import_trades
from edgecore.web.schemas import success_response
from edgecore.web.utils import (
    ALLOWED_WORKBOOK_EXTENSIONS,
    edgecore_error_response,
    get_owner_id,
    max_workbook_size,
    sanitize_filename,
    upload_error_response,
    validate_upload_file,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/imports", tags=["imports"])

PREVIEW_TRADES = 20


def _ingest_summary(result: IngestResult) -> dict:
    return {
        "parsed": len(result.trades),
        "rows_read": result.rows_read,
        "duplicates_removed": result.duplicates_removed,
        "sheets_used": result.sheets_used,
        "skipped": [asdict(t) for t in result.skipped],
        "errors": [asdict(e) for e in result.errors],
    }


@router.post("/preview")
async def preview_import(file: UploadFile = File(...)):
    """Parse a workbook and show what would be imported."""
    try:
        content = await validate_upload_file(
            file, ALLOWED_WORKBOOK_EXTENSIONS, max_workbook_size(), "Workbook"
        )
    except HTTPException as e:
        return upload_error_response(e)

    filename = sanitize_filename(file.filename)
    try:
        result = await asyncio.to_thread(SpreadsheetIngestor().ingest, content, filename)
    except EdgecoreError as e:
        logger.error(f"Preview failed for {filename}: {e}")
        return edgecore_error_response(e)

    data = _ingest_summary(result)
    data["trades"] = [t.to_record() for t in result.trades[:PREVIEW_TRADES]]
    return JSONResponse(success_response(data=data))


@router.post("")
async def import_workbook(
    request: Request,
    file: UploadFile = File(...),
    account_id: Optional[str] = Form(None),
):
    """Parse a workbook and store its trades in batches."""
    owner_id = get_owner_id(request)

    try:
        content = await validate_upload_file(
            file, ALLOWED_WORKBOOK_EXTENSIONS, max_workbook_size(), "Workbook"
        )
    except HTTPException as e:
        return upload_error_response(e)

    filename = sanitize_filename(file.filename)

    def _do_import():
        result = SpreadsheetIngestor().ingest(content, filename)
        report = import_trades(
            result.trades,
            TradeStore(),
            owner_id=owner_id,
            account_id=account_id or None,
        )
        return result, report

    try:
        result, report = await asyncio.to_thread(_do_import)
    except EdgecoreError as e:
        logger.error(f"Import failed for {filename}: {e}")
        return edgecore_error_response(e)

    data = _ingest_summary(result)
    data.update(
        {
            "imported": report.imported,
            "total_batches": report.total_batches,
            "failed_batches": [asdict(f) for f in report.failed_batches],
            "ok": report.ok,
        }
    )
    message = f"Imported {report.imported} of {len(result.trades)} trades"
    return JSONResponse(success_response(data=data, message=message))
