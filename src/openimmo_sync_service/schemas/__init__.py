"""
Pydantic schemas for feed records, run reports and API responses.
"""

from openimmo_sync_service.schemas.common import (
    ComponentHealth,
    HealthCheckResponse,
    HealthStatus,
    SyncTriggerResponse,
)
from openimmo_sync_service.schemas.property_record import (
    AttachmentImage,
    FileBatchEntry,
    PropertyRecord,
    SyncReport,
)

__all__ = [
    "AttachmentImage",
    "ComponentHealth",
    "FileBatchEntry",
    "HealthCheckResponse",
    "HealthStatus",
    "PropertyRecord",
    "SyncReport",
    "SyncTriggerResponse",
]
