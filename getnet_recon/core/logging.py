"""Centralized logging configuration for the application."""

import logging
import sys

_NAMESPACE = "getnet_recon"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure and return the application logger.

    Every module logs through a child of the ``getnet_recon`` logger, so a
    single handler here covers the decoder, the reconciler and the API.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    Returns:
        The configured root application logger.
    """
    log_format = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logger = logging.getLogger(_NAMESPACE)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Prevent duplicate handlers if called multiple times
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(log_format, datefmt=date_format))
        logger.addHandler(handler)

    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger under the getnet_recon namespace.

    Usage:
        from getnet_recon.core.logging import get_logger
        logger = get_logger(__name__)
        logger.info("Decoding settlement file")

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        A child logger with the given name.
    """
    if name.startswith(f"{_NAMESPACE}.") or name == _NAMESPACE:
        return logging.getLogger(name)
    return logging.getLogger(f"{_NAMESPACE}.{name}")
