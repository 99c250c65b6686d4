import logging
import os
from typing import Optional

ENV_LOG_LEVEL = "FUNPAINTBALL_LOG_LEVEL"
PLUGIN_LOGGER = "funpaintball"
LOG_FORMAT = "[%(asctime)s %(levelname)s] [FunPaintball] %(name)s: %(message)s"


def parse_level(value: Optional[str], default: int = logging.INFO) -> int:
    """Turn a level name ("debug") or number ("10") into a logging level.

    Anything unrecognised falls back to ``default``.
    """
    if not value:
        return default
    value = value.strip()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else default


def configure_logging(default_level: int = logging.INFO) -> int:
    """Set up console logging for the plugin and return the level in use.

    The host may already have configured the root logger, in which case only
    the plugin's own logger level is changed.
    """
    level = parse_level(os.getenv(ENV_LOG_LEVEL), default_level)
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger(PLUGIN_LOGGER).setLevel(level)
    return level
