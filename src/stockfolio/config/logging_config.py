"""Logging configuration."""

import logging
import sys
from typing import Optional

from stockfolio.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are chatty at INFO
_QUIET_LOGGERS = ("sqlalchemy.engine", "yfinance", "urllib3", "httpx", "openai")


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging to stdout.

    ``level`` overrides ``Settings.log_level``. Unknown level names fall back
    to INFO.
    """
    name = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
