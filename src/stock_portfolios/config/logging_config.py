"""Logging configuration."""

import logging
import sys

from stock_portfolios.config.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"

# Market-data and storage libraries log every request at INFO/DEBUG
_QUIET_LOGGERS = ("sqlalchemy.engine", "yfinance", "urllib3", "peewee")


def setup_logging() -> None:
    """Route ``stock_portfolios.*`` loggers to stdout at the configured level."""
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("stock_portfolios").setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
