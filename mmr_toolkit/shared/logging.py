"""
Logging helpers for the MMR toolkit.

Every module asks for its logger through get_logger(__name__). Loggers are
created with a single console handler; the level comes from MMR_LOG_LEVEL
unless the CLI overrides it with --verbose.
"""

import logging
import os
from typing import Optional, Union

_DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_ROOT_NAME = "mmr_toolkit"


def _level_from_env() -> int:
    level_str = os.getenv("MMR_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_str, logging.INFO)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a configured logger with a stream handler.

    Handlers are only attached the first time a given logger is requested.
    """
    logger = logging.getLogger(name if name else _ROOT_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(_level_from_env())

    return logger


def set_log_level(level: Union[int, str]) -> None:
    """Apply a level to every toolkit logger created so far."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    for name, logger in logging.Logger.manager.loggerDict.items():
        if name.startswith(_ROOT_NAME) and isinstance(logger, logging.Logger):
            logger.setLevel(level)
