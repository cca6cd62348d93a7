"""
Plant API — Shared Response Schemas
====================================

Error and health payloads used by every router.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standardized error body for every non-2xx response.

    Example:
        {"error": "not_found", "message": "Plant not found"}

    The request id travels in the X-Request-ID header, so two identical
    failures produce identical bodies.
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Any] = Field(
        default=None,
        description="Extra context (validation errors, or the exception text in development)",
    )


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
