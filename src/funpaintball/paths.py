from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from platformdirs import PlatformDirs

LOGGER = logging.getLogger("funpaintball.paths")
LOGGER.addHandler(logging.NullHandler())

APP_NAME = "FunPaintball"

# Environment variable override (useful for tests and server operators)
ENV_DATA_DIR = "FUNPAINTBALL_DATA_DIR"


def default_data_dir(app_name: str = APP_NAME) -> Path:
    """Resolve the plugin data folder.

    ``FUNPAINTBALL_DATA_DIR`` wins when set; otherwise the platform user data
    directory for the app is used.
    """
    override = os.getenv(ENV_DATA_DIR)
    if override:
        return Path(override).expanduser().resolve()
    dirs = PlatformDirs(appname=app_name, appauthor=False)
    return Path(dirs.user_data_dir).expanduser().resolve()


def ensure_dir(path: Path) -> bool:
    """Create ``path`` if needed. Returns whether it already existed."""
    if path.exists():
        return True
    path.mkdir(parents=True, exist_ok=True)
    LOGGER.debug("Created directory %s", path)
    return False


def resolve_data_dir(data_dir: Optional[Path] = None) -> Path:
    if data_dir is not None:
        return Path(data_dir).expanduser().resolve()
    return default_data_dir()
