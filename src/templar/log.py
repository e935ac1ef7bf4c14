"""
Logging setup for Templar.
"""

import logging
from typing import Optional

from templar.config import LoggingConfig


def setup_logging(config: Optional[LoggingConfig] = None, debug: bool = False) -> None:
    """Configure root logging from a LoggingConfig"""
    config = config or LoggingConfig()
    level = logging.DEBUG if debug else getattr(logging, config.level.upper(), logging.INFO)

    handlers = [logging.StreamHandler()]
    if config.file:
        handlers.append(logging.FileHandler(config.file))

    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=handlers,
        force=True
    )
    logging.getLogger("templar").debug("Logging configured at level %s", logging.getLevelName(level))
