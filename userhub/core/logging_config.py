"""Process-wide logging setup, applied once when the app is built."""

import logging

from userhub.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%SZ"


def configure_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.DEBUG else getattr(logging, settings.LOG_LEVEL)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
