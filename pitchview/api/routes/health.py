"""Health endpoint."""

from fastapi import APIRouter, Request

from pitchview.api.models import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health(request: Request) -> HealthResponse:
    """Report liveness, credential presence, cache counters and upstream calls."""
    proxy = request.app.state.proxy
    stats = proxy.cache.stats()
    return HealthResponse(
        credential_configured=request.app.state.settings.has_credential,
        cache_entries=stats["size"],
        cache_hits=stats["hits"],
        cache_misses=stats["misses"],
        upstream_calls=proxy.upstream_calls,
    )
