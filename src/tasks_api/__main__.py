"""Run the API with uvicorn: ``python -m tasks_api``."""

import logging

import uvicorn

from .logging_setup import setup_logging
from .settings import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info(
        "Starting task API on http://%s:%s (backend=%s)",
        settings.host,
        settings.port,
        settings.persistence_backend,
    )
    uvicorn.run(
        "tasks_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()
