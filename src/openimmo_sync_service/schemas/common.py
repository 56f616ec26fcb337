"""
Common schemas shared across multiple endpoints.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field

from openimmo_sync_service.schemas.property_record import SyncReport


class SyncTriggerResponse(BaseModel):
    """Response of the trigger endpoint. Always delivered with HTTP 200."""

    success: bool = Field(..., description="Whether the run finished without error")
    message: Optional[str] = Field(None, description="Outcome message on success")
    error: Optional[str] = Field(None, description="Error message on failure")
    note: Optional[str] = Field(None, description="Additional information")
    report: Optional[SyncReport] = Field(None, description="Run counters when finished")


class HealthStatus(str, Enum):
    """Health status enum for health check responses."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"
    DEGRADED = "degraded"


class ComponentHealth(BaseModel):
    """Health information for a single component."""

    status: HealthStatus = Field(..., description="Status of the component")
    message: Optional[str] = Field(None, description="Optional message about the component health")


class HealthCheckResponse(BaseModel):
    """Standard health check response."""

    status: HealthStatus = Field(..., description="Overall service health status")
    version: str = Field(..., description="Service version")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Timestamp of health check")
    components: Dict[str, ComponentHealth] = Field(..., description="Health of individual components")
    uptime_seconds: Optional[float] = Field(None, description="Service uptime in seconds")
