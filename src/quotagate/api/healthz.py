"""
Health check endpoints.

- /healthz: Liveness probe (always 200 if service alive)
- /readyz: Readiness probe (200 only if both backends are configured)
"""

from datetime import datetime, timezone
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Depends, Response, status

from ..config import Settings
from .dependencies import get_app_settings

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get(
    "/healthz",
    status_code=200,
    summary="Liveness probe",
)
async def liveness_check() -> Dict[str, Any]:
    """
    Liveness probe - always returns 200 if service is alive.
    """
    return {
        "status": "alive",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "quotagate",
        "version": "0.1.0",
    }


@router.get(
    "/readyz",
    summary="Readiness probe",
    description="""
    Readiness probe endpoint.

    Returns 200 only when the Unkey root key, the Unkey API id and the
    OpenAI API key are configured. Backends are not contacted.

    Returns 503 Service Unavailable listing the missing settings otherwise.
    """,
)
async def readiness_check(
    response: Response,
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """Readiness probe - configuration check only."""
    missing = settings.missing_backend_settings()

    if missing:
        logger.warning("Service not ready, missing settings", missing=missing)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {
            "status": "not_ready",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "missing_settings": missing,
        }

    return {
        "status": "ready",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
