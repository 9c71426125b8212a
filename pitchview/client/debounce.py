"""Debounce helper for search-as-you-type."""

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)

DEFAULT_WAIT = 0.3


class Debouncer:
    """Delay calls to fn until input pauses for `wait` seconds.

    Each call() restarts the timer and replaces the pending arguments, so
    only the last call in a burst runs.

    Usage:
        debounced = Debouncer(refresh, wait=0.3)
        debounced("r")
        debounced("ro")   # only this one runs, 300ms later
    """

    def __init__(self, fn: Callable[..., object], wait: float = DEFAULT_WAIT):
        self._fn = fn
        self._wait = wait
        self._timer: threading.Timer | None = None
        self._pending: tuple[tuple, dict] | None = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def __call__(self, *args, **kwargs) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = (args, kwargs)
            self._timer = threading.Timer(self._wait, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            pending = self._pending
            self._pending = None
            self._timer = None
        if pending is None:
            return
        args, kwargs = pending
        try:
            self._fn(*args, **kwargs)
        except Exception:
            # Timer threads have nobody to propagate to
            logger.exception("Debounced call to %s failed", getattr(self._fn, "__name__", self._fn))

    def flush(self) -> None:
        """Run the pending call now instead of waiting."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
        self._fire()

    def cancel(self) -> None:
        """Drop the pending call."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None
