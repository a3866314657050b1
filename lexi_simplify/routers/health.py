"""
Health check router for monitoring API status
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from loguru import logger

from .. import __version__
from ..models.requests import HealthResponse

router = APIRouter(prefix="/health", tags=["health"])

# Track application start time
app_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(request: Request):
    """
    Report whether the external clients were built and the database answers
    """
    services = {}
    clients = getattr(request.app.state, "clients", None)

    if clients is None:
        services = {name: "not_initialized" for name in ("storage", "ocr", "gemini_ai", "identity", "database")}
    else:
        services["storage"] = "configured"
        services["ocr"] = "configured"
        services["gemini_ai"] = "configured"
        services["identity"] = "configured"

        try:
            if clients.mongo_client:
                await clients.mongo_client.admin.command('ping')
                services["database"] = "healthy"
            else:
                services["database"] = "not_connected"
        except Exception as e:
            services["database"] = "unhealthy"
            logger.warning(f"Database health check failed: {e}")

    if any(status == "unhealthy" for status in services.values()):
        overall_status = "degraded"
    elif any(status.startswith("not_") for status in services.values()):
        overall_status = "partial"
    else:
        overall_status = "healthy"

    return HealthResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        services=services,
        uptime_seconds=time.time() - app_start_time
    )
