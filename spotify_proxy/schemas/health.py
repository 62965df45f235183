"""Schemas returned by the health endpoint."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class EndpointMap(BaseModel):
    setup: str = "/setup"
    callback: str = "/callback"
    now_playing: str = "/now-playing"
    recent: str = "/recent"
    health: str = "/health"


class HealthResponse(BaseModel):
    """Liveness report including whether a usable credential is stored."""

    status: str = "healthy"
    timestamp: datetime
    environment: str = "unknown"
    oauth_configured: bool = Field(
        ..., description="True when the token vault holds an unexpired credential."
    )
    endpoints: EndpointMap = Field(default_factory=EndpointMap)


__all__ = ["EndpointMap", "HealthResponse"]
