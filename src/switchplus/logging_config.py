import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "SWITCHPLUS_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def level_for_verbosity(verbosity: int) -> int:
    """Map a count of ``-v`` flags to a level: none is WARNING, -v INFO, -vv DEBUG."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def resolve_level(verbosity: Optional[int] = None, default_level: int = logging.INFO) -> int:
    """Pick the root level. SWITCHPLUS_LOG_LEVEL wins over flags when it names a real level."""
    level = default_level if verbosity is None else level_for_verbosity(verbosity)
    level_name = os.getenv(LOG_LEVEL_ENV)
    if level_name:
        named = logging.getLevelName(level_name.upper())
        if isinstance(named, int):
            return named
    return level


def configure_logging(verbosity: Optional[int] = None, default_level: int = logging.INFO) -> None:
    logging.basicConfig(level=resolve_level(verbosity, default_level), format=LOG_FORMAT)
