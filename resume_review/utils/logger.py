"""
Logging helpers.

`setup_logging` configures the root logger once from the application
config; modules obtain their logger with `get_logger(__name__)`.
"""

import logging
import sys
from typing import Optional

from resume_review.config import Config

_configured = False


def setup_logging(config: Optional[Config] = None) -> None:
    """Configure root logging from LOG_LEVEL / LOG_FORMAT."""
    global _configured
    if _configured:
        return

    level_name = config.LOG_LEVEL if config else "INFO"
    fmt = config.LOG_FORMAT if config else "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    level = getattr(logging, str(level_name).upper(), logging.INFO)

    logging.basicConfig(level=level, format=fmt, stream=sys.stdout)
    # httpx logs every request URL at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
