"""HTTP fetch helper for talking to the proxy.

Handles raw requests to the proxy and returns parsed JSON. No data
transformation happens here - see decoders.py.

Every call goes through one RetryPolicy. Before any request is issued the
page origin is checked against the proxy origin: a page opened from file://
or from another host would only produce doomed cross-origin calls, so we
fail early with an instruction instead.
"""

import logging
import threading
import time
from collections.abc import Callable
from urllib.parse import urlsplit

import httpx

from pitchview.client.errors import ApiError, UnsafeOriginError
from pitchview.client.retry import RATE_LIMIT_STATUS, RetryPolicy

logger = logging.getLogger(__name__)

DEFAULT_PROXY_BASE = "http://localhost:3000/api"

LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


def _origin(url: str) -> tuple[str, str, int | None] | None:
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        # Bad IPv6 literal, non-numeric or out-of-range port
        return None
    if parts.scheme not in ("http", "https") or not parts.hostname:
        return None
    default_port = 443 if parts.scheme == "https" else 80
    return (parts.scheme, parts.hostname.lower(), port or default_port)


def is_safe_origin(page_origin: str | None, proxy_base: str) -> bool:
    """Whether a page at page_origin can call the proxy at proxy_base.

    True when both share scheme, host and port, or when both live on a
    loopback host (a dev page on another local port).

    Args:
        page_origin: Origin of the page issuing requests ('null' for file://)
        proxy_base: Base URL of the proxy
    """
    proxy = _origin(proxy_base)
    if proxy is None or not page_origin or page_origin == "null":
        return False
    page = _origin(page_origin)
    if page is None:
        return False
    if page == proxy:
        return True
    return page[1] in LOCAL_HOSTS and proxy[1] in LOCAL_HOSTS


class ApiFetcher:
    """Fetches JSON from the proxy with retry.

    Usage:
        fetcher = ApiFetcher("http://localhost:3000/api")
        data = fetcher.fetch_json("/competitions")
    """

    def __init__(
        self,
        base_url: str = DEFAULT_PROXY_BASE,
        page_origin: str | None = None,
        policy: RetryPolicy | None = None,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the fetcher.

        Args:
            base_url: Proxy base URL including its /api prefix
            page_origin: Origin the requests are issued from. Defaults to the
                proxy's own origin (same-origin)
            policy: Retry policy (default: 3 attempts)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
            sleep: Sleep function used between retries (tests)
        """
        self._base_url = base_url.rstrip("/")
        if page_origin is None:
            parts = urlsplit(self._base_url)
            page_origin = f"{parts.scheme}://{parts.netloc}"
        self._page_origin = page_origin
        self._policy = policy or RetryPolicy()
        self._timeout = timeout
        self._transport = transport
        self._sleep = sleep
        self._client: httpx.Client | None = None
        self._lock = threading.Lock()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    def can_call_api(self) -> bool:
        return is_safe_origin(self._page_origin, self._base_url)

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = httpx.Client(
                        timeout=self._timeout,
                        transport=self._transport,
                        headers={"Accept": "application/json"},
                    )
        return self._client

    def fetch_json(self, path: str, params: dict | None = None) -> dict:
        """GET a proxy path and return the parsed JSON body.

        Args:
            path: API path relative to the proxy base (e.g., '/competitions')
            params: Optional query parameters

        Returns:
            Parsed JSON object

        Raises:
            UnsafeOriginError: Page origin cannot reach the proxy
            ApiError: Retries exhausted or response unusable
        """
        if not self.can_call_api():
            proxy_root = self._base_url.rsplit("/api", 1)[0]
            raise UnsafeOriginError(
                f"Cannot call the API from origin {self._page_origin!r}. "
                f"Start the proxy and open the app through it (e.g. {proxy_root}/) "
                "instead of opening the page from disk or another host."
            )

        if not path.startswith("/"):
            path = "/" + path
        url = f"{self._base_url}{path}"
        policy = self._policy

        for attempt in range(policy.max_attempts):
            try:
                response = self._get_client().get(url, params=params)
            except httpx.RequestError as e:
                logger.warning(
                    "[FETCH] Request failed for %s: %s (attempt %d/%d)",
                    path,
                    e,
                    attempt + 1,
                    policy.max_attempts,
                )
                if policy.can_retry(attempt):
                    self._sleep(policy.failure_delay(attempt))
                    continue
                raise ApiError(path, None, reason=str(e) or type(e).__name__) from e

            if response.is_success:
                try:
                    data = response.json()
                except ValueError as e:
                    logger.warning("[FETCH] Invalid JSON from %s (attempt %d)", path, attempt + 1)
                    if policy.can_retry(attempt):
                        self._sleep(policy.failure_delay(attempt))
                        continue
                    raise ApiError(path, response.status_code, response.text, "invalid JSON") from e
                logger.debug("[FETCH] %s", path)
                return data

            status = response.status_code
            if not (policy.is_retryable_status(status) and policy.can_retry(attempt)):
                logger.error("[FETCH] HTTP %d for %s, giving up", status, path)
                raise ApiError(path, status, response.text)

            if status == RATE_LIMIT_STATUS:
                delay = policy.rate_limit_delay(attempt, response.headers.get("Retry-After"))
                logger.warning(
                    "[FETCH] Rate limited (429). Retry %d/%d in %.1fs for %s",
                    attempt + 1,
                    policy.max_attempts - 1,
                    delay,
                    path,
                )
            else:
                delay = policy.failure_delay(attempt)
                logger.warning(
                    "[FETCH] HTTP %d for %s. Retry %d/%d in %.1fs",
                    status,
                    path,
                    attempt + 1,
                    policy.max_attempts - 1,
                    delay,
                )
            self._sleep(delay)

        # Only reachable with max_attempts < 1
        raise ApiError(path, None, reason="no attempts allowed by retry policy")

    def close(self) -> None:
        with self._lock:
            if self._client:
                self._client.close()
                self._client = None
