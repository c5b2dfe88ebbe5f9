"""
Logging setup for dmcore command-line tools.

Library modules only call logging.getLogger(__name__); handlers are attached
here, by the entry points.
"""
import logging
import os
import sys
from typing import Optional


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Return a logger writing to stdout as
    `timestamp - name - level - message`.

    Level defaults to the LOG_LEVEL env var, else INFO. Handlers are
    attached once per logger name.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    lvl = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(lvl)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(lvl)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    logger.addHandler(handler)
    return logger


__all__ = ["get_logger"]
