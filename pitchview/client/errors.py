"""Client-side exceptions."""


class PitchviewClientError(Exception):
    """Base class for every error raised by the client data layer."""


class ApiError(PitchviewClientError):
    """A request through the proxy failed for good.

    Raised after retries are exhausted or for a non-retryable failure.
    status is None when no HTTP response was received at all.
    """

    def __init__(self, path: str, status: int | None, body: str = "", reason: str | None = None):
        self.path = path
        self.status = status
        self.body = body
        self.reason = reason
        if status is None:
            message = f"Request to {path} failed: {reason or 'no response'}"
        else:
            message = f"Request to {path} failed with HTTP {status}: {body[:200]}"
        super().__init__(message)


class UnsafeOriginError(PitchviewClientError):
    """The page origin cannot reach the proxy, so no request is attempted."""


class DecodeError(PitchviewClientError):
    """An upstream payload did not have the shape its endpoint promises."""
