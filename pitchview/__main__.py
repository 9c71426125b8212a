"""Run the proxy server: `python -m pitchview` or `pitchview`."""

import logging

import uvicorn

from pitchview.api.app import create_app
from pitchview.config import load_settings
from pitchview.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    app = create_app(settings)
    logger.info("Proxy listening on http://%s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
