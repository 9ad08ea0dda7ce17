"""
Game Reviews API — Shared Schemas
===================================

What:  Response models shared by every route (errors, health) and the
       timestamp normalisation used by all record schemas.
Why:   Clients get one error shape for every failure: {"message": "..."}.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


def as_utc(value: datetime) -> datetime:
    """
    Attach UTC to naive timestamps.

    SQLite hands back naive datetimes even for timezone-aware columns;
    everything is stored in UTC, so naive means UTC.
    """
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ErrorResponse(BaseModel):
    """
    Error body returned for every 4xx/5xx.

    Example:
        {"message": "Review ID: 100 Not Found"}
    """
    message: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Returned by GET /health for container and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
