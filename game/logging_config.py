from __future__ import annotations

import logging
from logging import Logger
from typing import Union

DEFAULT_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
DEFAULT_DATEFMT = "%H:%M:%S"

def setup_logging(level: Union[int, str] = logging.INFO) -> Logger:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(level=level, format=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logger = logging.getLogger("rulery")
    logger.debug("Logging initialized.")
    return logger
