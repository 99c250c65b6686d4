from __future__ import annotations

import logging

from .config import ConfigManager, FailurePolicy, persistable, persisted

logger = logging.getLogger(__name__)

SETTINGS_FILE = "config.yml"

DEFAULT_MIN_PLAYERS = 2
DEFAULT_MAX_PLAYERS = 20


@persistable
class PluginSettings:
    """Plugin-wide settings, stored in ``config.yml`` in the data folder.

    Times are in seconds. Bad values fall back to the defaults; player
    limits are clamped after loading so min <= max always holds.
    """

    default_min_players: int = persisted(DEFAULT_MIN_PLAYERS, on_fail=FailurePolicy.CONSOLE_ERR)
    default_max_players: int = persisted(DEFAULT_MAX_PLAYERS, on_fail=FailurePolicy.CONSOLE_ERR)
    wait_start: float = persisted(10.0, on_fail=FailurePolicy.CONSOLE_ERR)
    wait_death: float = persisted(3.0, on_fail=FailurePolicy.CONSOLE_ERR)
    team_blue: str = persisted("Blue")
    team_red: str = persisted("Red")

    def on_deserialize(self) -> None:
        if self.default_min_players < 1:
            logger.warning("default_min_players=%s is below 1; using 1", self.default_min_players)
            self.default_min_players = 1
        if self.default_max_players < self.default_min_players:
            logger.warning(
                "default_max_players=%s is below default_min_players=%s; raising it",
                self.default_max_players,
                self.default_min_players,
            )
            self.default_max_players = self.default_min_players
        self.wait_start = max(0.0, float(self.wait_start))
        self.wait_death = max(0.0, float(self.wait_death))


def load_settings(manager: ConfigManager, name: str = SETTINGS_FILE) -> PluginSettings:
    """Load plugin settings, writing the defaults out if the file is missing."""
    settings = manager.load(PluginSettings, name)
    if settings is None:
        if manager.get_file(name).exists():
            logger.error("Could not load settings from %s; using defaults", name)
            return PluginSettings()
        settings = PluginSettings()
        manager.save(settings, name)
        logger.info("Wrote default settings to %s", manager.get_file(name))
    return settings
