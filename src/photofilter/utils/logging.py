"""Package logger for photofilter.

Modules log through ``logging.getLogger(__name__)``; their records propagate
to the ``photofilter`` logger configured here.  ``PHOTOFILTER_LOG_LEVEL``
overrides the default ``INFO`` threshold.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

LOGGER_NAME = "photofilter"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LEVEL_ENV_VAR = "PHOTOFILTER_LOG_LEVEL"

_LOGGER: Optional[logging.Logger] = None


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.environ.get(LEVEL_ENV_VAR, "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    # ``getLevelName`` echoes unknown names back as "Level <name>" strings.
    return resolved if isinstance(resolved, int) else logging.INFO


def get_logger(level: int | str | None = None) -> logging.Logger:
    """Return the package logger, attaching its stream handler on first use.

    Passing *level* re-applies the threshold on an already configured logger.
    """

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger(LOGGER_NAME)
        if not _LOGGER.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            _LOGGER.addHandler(handler)
        _LOGGER.setLevel(_resolve_level(level))
    elif level is not None:
        _LOGGER.setLevel(_resolve_level(level))
    return _LOGGER


logger = get_logger()
