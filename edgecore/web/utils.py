"""
Shared utilities for the web API.
"""

from __future__ import annotations

from pathlib import Path

from fastapi import HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse

from edgecore.config import get_default_owner_id, settings
from edgecore.errors import EdgecoreError
from edgecore.web.schemas import error_response


# ==================== FILE UPLOAD SECURITY ====================

ALLOWED_WORKBOOK_EXTENSIONS = {".xlsx", ".xls", ".csv"}


def max_workbook_size() -> int:
    """Maximum workbook upload size in bytes (10 MB unless configured)."""
    return settings.max_upload_bytes


async def validate_upload_file(
    file: UploadFile,
    allowed_extensions: set[str],
    max_size: int,
    error_prefix: str = "File",
) -> bytes:
    """
    Validate and read an uploaded file.

    Args:
        file: The uploaded file
        allowed_extensions: Set of allowed file extensions (e.g., {'.xlsx', '.csv'})
        max_size: Maximum file size in bytes
        error_prefix: Prefix for error messages

    Returns:
        File content as bytes

    Raises:
        HTTPException: 400 for a missing name or bad extension, 413 when too large
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail=f"{error_prefix} name is required")

    filename = sanitize_filename(file.filename)
    ext = Path(filename).suffix.lower()

    if ext not in allowed_extensions:
        allowed = ", ".join(sorted(allowed_extensions))
        raise HTTPException(
            status_code=400,
            detail=f"{error_prefix} type '{ext}' not allowed. Allowed types: {allowed}",
        )

    content = await file.read()
    if len(content) > max_size:
        max_mb = max_size / (1024 * 1024)
        actual_mb = len(content) / (1024 * 1024)
        raise HTTPException(
            status_code=413,
            detail=f"{error_prefix} too large: {actual_mb:.1f} MB (max: {max_mb:.0f} MB)",
        )

    return content


def sanitize_filename(filename: str) -> str:
    """Sanitize a filename to prevent path traversal attacks."""
    name = Path(filename).name
    name = name.replace("\x00", "").replace("/", "").replace("\\", "")
    return name


# ==================== REQUEST HELPERS ====================


def get_owner_id(request: Request) -> str | None:
    """Owner of the request: X-User-Id header, else the configured default owner."""
    owner = request.headers.get("X-User-Id", "").strip()
    return owner or get_default_owner_id()


def edgecore_error_response(error: EdgecoreError, status_code: int = 422) -> JSONResponse:
    """JSON error response for a whole-operation or configuration failure."""
    body, status = error_response(error.message, data=error.context or None, status_code=status_code)
    return JSONResponse(body, status_code=status)


def upload_error_response(error: HTTPException) -> JSONResponse:
    body, status = error_response(str(error.detail), status_code=error.status_code)
    return JSONResponse(body, status_code=status)
