"""
API routers for the OpenImmo Sync Service.

Each submodule exposes its APIRouter as `router`.
"""

from openimmo_sync_service.routers import cron_router, health_router

__all__ = ["cron_router", "health_router"]
