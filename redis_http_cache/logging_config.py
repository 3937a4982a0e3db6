"""
Redis HTTP Cache - Logging Setup

Applications embedding the stores usually configure logging themselves.
configure_logging() is a convenience for scripts and tests.
"""

import logging

from .config import LogLevel
from .errors import ConfigurationError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: LogLevel | str = LogLevel.INFO) -> None:
    """Configure root logging at the given level."""
    try:
        level = LogLevel(str(getattr(level, "value", level)).upper())
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown log level: {level}",
            details={"level": str(level), "supported": [lvl.value for lvl in LogLevel]},
        ) from e

    logging.basicConfig(level=getattr(logging, level.value), format=LOG_FORMAT)
    logging.getLogger(__name__.split(".")[0]).setLevel(level.value)
