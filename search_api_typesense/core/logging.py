"""
Logging configuration
"""

import logging

from search_api_typesense.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("search_api_typesense")


def setup_logging() -> None:
    """Configure root logging from settings. DEBUG wins over log_level."""
    if settings.debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)
