"""
Health check endpoints.
"""

from datetime import datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ... import __version__
from ...core.config import get_settings
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    version: str
    service: str


@router.get("", response_model=ApiResponse[HealthResponse])
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns the current status of the service.
    """
    return ok(request, data=HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        version=__version__,
        service="Clinic-Intake Check-in Service",
    ), message="OK")


@router.get("/ready", response_model=ApiResponse[dict])
async def readiness_check(request: Request):
    """
    Readiness check endpoint.

    Reports database connectivity and which optional capabilities are configured.
    """
    settings = get_settings()
    checks = {}
    all_ok = True

    database = getattr(request.app.state, "database", None)
    if database is None:
        checks["database"] = "not_connected"
        all_ok = False
    else:
        try:
            await database.command("ping")
            checks["database"] = "ok"
        except Exception as e:
            checks["database"] = f"error: {str(e)[:50]}"
            all_ok = False

    checks["report_storage"] = settings.file_storage.storage_type
    checks["analysis_provider"] = settings.analysis.provider
    checks["speech"] = "configured" if settings.azure_speech.is_configured else "not_configured"
    checks["auth"] = "configured" if settings.auth.url and settings.auth.api_key else "not_configured"

    return ok(
        request,
        data={"ready": all_ok, "checks": checks},
        message="READY" if all_ok else "NOT_READY",
    )
