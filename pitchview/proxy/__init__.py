"""Forwarding proxy for the upstream football-data API.

Usage:
    from pitchview.proxy import ForwardingProxy, ResponseCache

    proxy = ForwardingProxy(settings, ResponseCache(ttl=settings.cache_ttl))
    result = proxy.handle("GET", "/competitions")
"""

from pitchview.proxy.cache import CacheEntry, ResponseCache
from pitchview.proxy.forwarder import (
    PROXY_PREFIX,
    ForwardingProxy,
    MalformedURLError,
    ProxyResponse,
    resolve_upstream_url,
)

__all__ = [
    "CacheEntry",
    "ForwardingProxy",
    "MalformedURLError",
    "PROXY_PREFIX",
    "ProxyResponse",
    "ResponseCache",
    "resolve_upstream_url",
]
