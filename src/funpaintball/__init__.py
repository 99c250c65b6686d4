"""
FunPaintball plugin core.

This package provides the headless, persistent side of the paintball
mini-game:
- A configuration engine mapping persistable dataclasses to YAML/JSON documents
- Codecs for the host-world primitives (vectors, worlds, locations)
- The persisted arena model (regions, spawns, player limits)
- Plugin settings loaded through the same engine

The live match flow (teleports, scoreboards, scheduled tasks) belongs to the
host server integration and composes these pieces.
"""
from .arena import BLUE_TEAM, RED_TEAM, Arena, ArenaState, Region, delete_arena, load_arena, load_arenas, save_arena
from .config import ConfigManager, FailurePolicy, deserialize, persistable, persisted, register_codec, serialize
from .settings import PluginSettings, load_settings
from .world import Location, Vector, World

__version__ = "0.1.0"

__all__ = [
    "BLUE_TEAM",
    "RED_TEAM",
    "Arena",
    "ArenaState",
    "Region",
    "delete_arena",
    "load_arena",
    "load_arenas",
    "save_arena",
    "ConfigManager",
    "FailurePolicy",
    "deserialize",
    "persistable",
    "persisted",
    "register_codec",
    "serialize",
    "PluginSettings",
    "load_settings",
    "Location",
    "Vector",
    "World",
]
