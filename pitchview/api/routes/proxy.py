"""Proxy endpoint.

Every request under /api/ is handed to the ForwardingProxy owned by the
application. Only GET is forwarded; everything else gets a 405 body.
"""

import logging

from fastapi import APIRouter, Request, Response

from pitchview.proxy import PROXY_PREFIX, ForwardingProxy, ProxyResponse

logger = logging.getLogger(__name__)

router = APIRouter()

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _path_and_query(request: Request) -> str:
    """Raw path after the proxy prefix plus the raw query string."""
    raw_path = request.scope.get("raw_path")
    path = raw_path.decode("latin-1").split("?", 1)[0] if raw_path else request.url.path
    path = path[len(PROXY_PREFIX) :] if path.startswith(PROXY_PREFIX) else path
    query = request.url.query
    return f"{path}?{query}" if query else path


def _to_response(result: ProxyResponse) -> Response:
    return Response(
        content=result.body,
        status_code=result.status,
        media_type=result.content_type,
        headers=result.headers,
    )


@router.api_route(PROXY_PREFIX, methods=ALL_METHODS)
@router.api_route(PROXY_PREFIX + "/{upstream_path:path}", methods=ALL_METHODS)
def forward(request: Request) -> Response:
    """Forward a request to the upstream API.

    Returns the upstream status, body and content type, or a JSON
    `{error, detail}` body for misconfiguration and internal failures.
    """
    proxy: ForwardingProxy = request.app.state.proxy
    path_qs = _path_and_query(request)

    try:
        result = proxy.handle(request.method, path_qs)
    except Exception as e:
        logger.exception("[PROXY] Unhandled error for %s %s", request.method, path_qs)
        result = ProxyResponse.error(500, "Proxy error", str(e) or type(e).__name__)

    logger.info("[PROXY] %s /api%s -> %d", request.method, path_qs, result.status)
    return _to_response(result)
