"""FastAPI application factory.

The ForwardingProxy and its ResponseCache are created once per application
and live on app.state for the lifetime of the process.
"""

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from pitchview.api.routes import health, proxy
from pitchview.config import CREDENTIAL_ENV_VARS, Settings, load_settings
from pitchview.proxy import ForwardingProxy, ResponseCache

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    transport: httpx.BaseTransport | None = None,
    clock: Callable[[], float] | None = None,
) -> FastAPI:
    """Build the proxy application.

    Args:
        settings: Resolved settings, loaded from the environment if omitted
        transport: Optional httpx transport for the upstream client (tests)
        clock: Optional monotonic clock for the response cache (tests)
    """
    settings = settings or load_settings()
    cache = ResponseCache(ttl=settings.cache_ttl, clock=clock)
    forwarding_proxy = ForwardingProxy(settings, cache, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not settings.has_credential:
            logger.warning(
                "No API key configured (%s) - /api requests will fail with 500",
                " / ".join(CREDENTIAL_ENV_VARS),
            )
        logger.info(
            "Proxy forwarding /api -> %s (cache ttl %ss)", settings.api_base, settings.cache_ttl
        )
        yield
        forwarding_proxy.close()

    app = FastAPI(
        title="Pitchview",
        description="Same-origin caching proxy for the football-data API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.proxy = forwarding_proxy

    app.include_router(health.router)
    app.include_router(proxy.router)
    return app
