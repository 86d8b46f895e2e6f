"""
Logging configuration
"""
import logging
import sys
from backend.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(debug: bool = None) -> logging.Logger:
    """Attach a stdout handler to the `backend` logger tree (idempotent)"""
    if debug is None:
        debug = get_settings().DEBUG

    logger = logging.getLogger("backend")

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    return logger
