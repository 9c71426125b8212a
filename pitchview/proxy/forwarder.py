"""Same-origin forwarding proxy for the football-data API.

Takes the part of an inbound request after the proxy prefix, resolves it
against the upstream base, attaches the server-held credential and relays
the upstream response. Successful responses are cached for a short TTL.

The proxy never retries upstream. A 429 is relayed with its Retry-After so
the caller decides when to try again.
"""

import logging
import threading
from dataclasses import dataclass, field
from urllib.parse import unquote

import httpx

from pitchview.api.models import ErrorResponse
from pitchview.config import CREDENTIAL_ENV_VARS, CREDENTIAL_HEADER, Settings
from pitchview.proxy.cache import ResponseCache

logger = logging.getLogger(__name__)

PROXY_PREFIX = "/api"

JSON_CONTENT_TYPE = "application/json"

# Upstream headers relayed back to the caller
RELAYED_HEADERS = (
    "Retry-After",
    "X-Requests-Available-Minute",
    "X-RequestCounter-Reset",
)


class MalformedURLError(ValueError):
    """The inbound path cannot be turned into a safe upstream URL."""


@dataclass
class ProxyResponse:
    """Framework-neutral response produced by the proxy."""

    status: int
    body: bytes
    content_type: str = JSON_CONTENT_TYPE
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def error(
        cls,
        status: int,
        error: str,
        detail: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> "ProxyResponse":
        payload = ErrorResponse(error=error, detail=detail)
        return cls(
            status=status,
            body=payload.model_dump_json().encode("utf-8"),
            headers={"Cache-Control": "no-store", **(headers or {})},
        )


def resolve_upstream_url(api_base: str, path_qs: str) -> str:
    """Resolve a prefix-stripped path (with query string) against the upstream base.

    Args:
        api_base: Upstream base URL (e.g., 'https://api.football-data.org/v4')
        path_qs: Remainder after the proxy prefix (e.g., '/competitions?areas=2072')

    Returns:
        Absolute upstream URL

    Raises:
        MalformedURLError: If the result would not be a well-formed URL on the
            upstream host under the upstream base path
    """
    if not path_qs.startswith("/"):
        path_qs = "/" + path_qs
    if path_qs.startswith("//") or "\\" in path_qs:
        raise MalformedURLError(f"Invalid upstream path: {path_qs!r}")
    if any(ch.isspace() or ord(ch) < 0x20 for ch in path_qs):
        raise MalformedURLError("Upstream path contains whitespace or control characters")

    # Decoded before the check so %2E%2E cannot stand in for ..
    path_only = unquote(path_qs.split("?", 1)[0])
    if "\\" in path_only:
        raise MalformedURLError(f"Invalid upstream path: {path_qs!r}")
    if any(segment in ("..", ".") for segment in path_only.split("/")):
        raise MalformedURLError(f"Relative path segments are not allowed: {path_only!r}")

    base = httpx.URL(api_base)
    try:
        url = httpx.URL(f"{api_base.rstrip('/')}{path_qs}")
    except (httpx.InvalidURL, ValueError) as e:
        raise MalformedURLError(f"Could not build upstream URL: {e}") from e

    if url.scheme not in ("http", "https") or url.host != base.host or url.port != base.port:
        raise MalformedURLError(f"Resolved URL leaves the upstream host: {url}")
    if not url.path.startswith(base.path.rstrip("/") + "/"):
        raise MalformedURLError(f"Resolved URL leaves the upstream base path: {url}")

    return str(url)


class ForwardingProxy:
    """Forwards GET requests to the upstream API with a write-through cache.

    Usage:
        proxy = ForwardingProxy(settings, ResponseCache(ttl=60))
        result = proxy.handle("GET", "/competitions")
        proxy.close()
    """

    def __init__(
        self,
        settings: Settings,
        cache: ResponseCache,
        transport: httpx.BaseTransport | None = None,
    ):
        self._settings = settings
        self._cache = cache
        self._transport = transport
        self._client: httpx.Client | None = None
        self._lock = threading.Lock()
        self.upstream_calls = 0

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = httpx.Client(
                        timeout=self._settings.timeout,
                        transport=self._transport,
                        follow_redirects=False,
                    )
        return self._client

    def handle(self, method: str, path_qs: str) -> ProxyResponse:
        """Handle one inbound request.

        Args:
            method: HTTP method of the inbound request
            path_qs: Path and query string after the proxy prefix

        Returns:
            ProxyResponse to send back to the caller
        """
        if method.upper() != "GET":
            return ProxyResponse.error(
                405,
                "Method not allowed",
                f"{method.upper()} is not supported, this proxy only forwards GET requests",
                headers={"Allow": "GET"},
            )

        if path_qs.split("?", 1)[0] in ("", "/"):
            return ProxyResponse.error(
                404,
                "No upstream path",
                f"Request a path under {PROXY_PREFIX}/, e.g. {PROXY_PREFIX}/competitions",
            )

        try:
            url = resolve_upstream_url(self._settings.api_base, path_qs)
        except MalformedURLError as e:
            logger.warning("[PROXY] Rejected path %r: %s", path_qs, e)
            return ProxyResponse.error(500, "Malformed upstream URL", str(e))

        if not self._settings.has_credential:
            logger.error("[PROXY] No API key configured, refusing to call upstream")
            return ProxyResponse.error(
                500,
                "Server missing API key",
                f"Set {' or '.join(CREDENTIAL_ENV_VARS)} in the server environment",
            )

        entry = self._cache.get(url)
        if entry is not None:
            return ProxyResponse(
                status=entry.status,
                body=entry.body,
                content_type=entry.content_type,
                headers={
                    "Cache-Control": f"public, max-age={self._cache.max_age(entry)}",
                    "X-Cache": "HIT",
                },
            )

        try:
            return self._forward(url)
        except httpx.HTTPError as e:
            logger.exception("[PROXY] Upstream request failed for %s", url)
            return ProxyResponse.error(500, "Proxy error", str(e) or type(e).__name__)

    def _forward(self, url: str) -> ProxyResponse:
        headers = {
            "Accept": JSON_CONTENT_TYPE,
            CREDENTIAL_HEADER: self._settings.api_key,
        }
        with self._lock:
            self.upstream_calls += 1
        response = self._get_client().get(url, headers=headers)

        body = response.content
        content_type = response.headers.get("content-type", JSON_CONTENT_TYPE)
        relayed = {
            name: response.headers[name] for name in RELAYED_HEADERS if name in response.headers
        }

        if not response.is_success:
            logger.warning("[PROXY] Upstream HTTP %d for %s", response.status_code, url)
            return ProxyResponse(
                status=response.status_code,
                body=body,
                content_type=content_type,
                headers={"Cache-Control": "no-store", **relayed},
            )

        self._cache.put(url, body, response.status_code, content_type)
        logger.debug("[PROXY] %d %s (%d bytes)", response.status_code, url, len(body))
        return ProxyResponse(
            status=response.status_code,
            body=body,
            content_type=content_type,
            headers={
                "Cache-Control": f"public, max-age={int(self._cache.ttl)}",
                "X-Cache": "MISS",
                **relayed,
            },
        )

    def close(self) -> None:
        """Close the upstream HTTP client."""
        with self._lock:
            if self._client:
                self._client.close()
                self._client = None
