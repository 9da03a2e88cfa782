import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure root logging; a no-op if handlers are already installed."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
    # uvicorn access lines are noisy next to the pipeline timings
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
