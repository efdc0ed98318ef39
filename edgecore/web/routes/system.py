"""
System/health API routes.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from edgecore import __version__
from edgecore.config import settings
from edgecore.web.schemas import success_response

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return JSONResponse(success_response(data={"status": "healthy"}, message="Service is running"))


@router.get("/api/status")
async def api_status():
    """Get API status and import limits."""
    return JSONResponse(
        success_response(
            data={
                "version": __version__,
                "import_batch_size": settings.import_batch_size,
                "max_upload_bytes": settings.max_upload_bytes,
                "min_import_year": settings.min_import_year,
            }
        )
    )
