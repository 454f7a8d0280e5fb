"""Logging configuration for CLI and server entrypoints.

Library modules only create `logging.getLogger(__name__)` loggers. This module
is called once by entrypoints to attach a root handler.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Attach a stream handler to the root logger.

    Args:
        level: Level name; falls back to `LOG_LEVEL`, then `DEBUG` when the
            `DEBUG` env flag is `"true"`, then `INFO`.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL")
    if level is None:
        level = "DEBUG" if os.getenv("DEBUG") == "true" else "INFO"

    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
