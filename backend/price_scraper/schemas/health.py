"""Health check schemas."""

from datetime import datetime

from pydantic import BaseModel


class HealthCheckResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    uptime: float
    browser: str


class ServiceInfoResponse(BaseModel):
    """Root endpoint response listing the service endpoints."""

    name: str
    version: str
    endpoints: dict
