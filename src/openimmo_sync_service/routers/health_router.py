"""
Health check endpoints for monitoring service status.
"""

import time
from datetime import datetime

from fastapi import APIRouter

from openimmo_sync_service import __version__
from openimmo_sync_service.config import settings
from openimmo_sync_service.schemas.common import HealthCheckResponse, HealthStatus

router = APIRouter(tags=["Health"])

# Track app startup time for uptime monitoring
start_time = time.time()


@router.get("/health", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """
    Basic health check endpoint for the service.

    Reports whether the FTP feed and Webflow settings are present; it does not
    contact either system.
    """
    components = {"api": {"status": HealthStatus.OK}}
    status = HealthStatus.OK

    if settings.ftp_configured():
        components["ftp_feed"] = {"status": HealthStatus.OK}
    else:
        components["ftp_feed"] = {
            "status": HealthStatus.ERROR,
            "message": "FTP host or user is not configured",
        }
        status = HealthStatus.DEGRADED

    if settings.webflow_configured():
        components["webflow"] = {"status": HealthStatus.OK}
    else:
        components["webflow"] = {
            "status": HealthStatus.ERROR,
            "message": "Webflow token, collection id or site id is not configured",
        }
        status = HealthStatus.DEGRADED

    components["environment"] = {
        "status": HealthStatus.OK,
        "message": f"Environment: {settings.ENVIRONMENT.value}",
    }

    return HealthCheckResponse(
        status=status,
        version=__version__,
        timestamp=datetime.utcnow(),
        components=components,
        uptime_seconds=time.time() - start_time,
    )
