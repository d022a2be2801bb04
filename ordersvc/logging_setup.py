"""Logging configuration for the order service."""
import logging
import sys

LOG_FORMAT = "%(asctime)s - ordersvc - %(name)s - %(levelname)s - %(message)s"


def configure_logging(app):
    """
    Configure the root logger from LOG_LEVEL.

    Installs a single stdout handler; Flask's app.logger propagates to it.
    """
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger().setLevel(level)
