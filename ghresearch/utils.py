import logging
import math
import sys
from typing import Optional, TextIO


LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Accepts both the short and long spellings used in config files
LEVEL_NAMES: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
}


def parse_level(level_name: Optional[str]) -> int:
    """
    Map a level name from config or CLI to a logging level.

    Unknown or missing names fall back to INFO.
    """
    if not level_name:
        return logging.INFO
    return LEVEL_NAMES.get(level_name.strip().lower(), logging.INFO)


def create_logger(
    name: str = "ghresearch",
    level: int = logging.INFO,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Build a logger that writes "[timestamp] LEVEL: message" lines.

    Calling this twice with the same name reuses the existing handler
    instead of stacking a second one.

    Args:
        name: Logger name
        level: Logging level (see parse_level)
        stream: Output stream (default: stdout)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not any(getattr(h, "_ghresearch", False) for h in logger.handlers):
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        handler._ghresearch = True
        logger.addHandler(handler)

    return logger


def estimate_tokens(text: str) -> int:
    """
    Rough token count estimation (4 chars ≈ 1 token for English).
    """
    if not text:
        return 0
    return math.ceil(len(text) / 4)
