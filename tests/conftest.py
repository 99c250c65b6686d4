import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from funpaintball.config import CodecRegistry, ConfigManager  # noqa: E402


@pytest.fixture()
def registry() -> CodecRegistry:
    """A private registry with the built-in codecs, so tests never touch the global one."""
    return CodecRegistry.with_builtins()


@pytest.fixture()
def manager(tmp_path: Path) -> ConfigManager:
    return ConfigManager(data_dir=tmp_path / "plugins" / "FunPaintball")
