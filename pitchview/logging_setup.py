"""Logging configuration shared by the proxy server and the client tools."""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty third-party loggers that drown out our own DEBUG output
QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str | int = "INFO") -> None:
    """Configure the root logger once.

    Safe to call multiple times - basicConfig is a no-op when handlers exist.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
