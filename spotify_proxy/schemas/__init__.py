"""Pydantic schemas for API responses."""

from .health import EndpointMap, HealthResponse

__all__ = ["EndpointMap", "HealthResponse"]
