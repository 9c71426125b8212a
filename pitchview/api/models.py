"""Pydantic models for API responses."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every error the proxy synthesizes itself."""

    error: str
    detail: str | None = None


class HealthResponse(BaseModel):
    """Liveness report. Never includes the credential."""

    status: str = "healthy"
    credential_configured: bool
    cache_entries: int
    cache_hits: int
    cache_misses: int
    upstream_calls: int
