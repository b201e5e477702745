"""Shared logging format and configuration for gcs-helper."""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%SZ"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
    "panic": logging.CRITICAL,
}


def parse_log_level(name: str) -> int:
    """Map a level name (case-insensitive) to a logging level; unknown names give DEBUG."""
    return _LEVELS.get((name or "").strip().lower(), logging.DEBUG)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure the root logger for this process. Call once at application startup."""
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
