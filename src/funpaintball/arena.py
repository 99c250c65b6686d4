"""Persisted arena data.

Only the configuration side of an arena lives here: its regions, spawn
points and player limits. Match flow, scoring broadcasts and teleporting
players are driven by the host server and are not modelled.
"""
from __future__ import annotations

import logging
from dataclasses import field
from enum import IntEnum
from typing import List, Optional

from .config import ConfigManager, FailurePolicy, persistable, persisted
from .config.tree import SECTION_SEP
from .settings import DEFAULT_MAX_PLAYERS, DEFAULT_MIN_PLAYERS
from .world import Location, Vector, World

logger = logging.getLogger(__name__)

ARENAS_FILE = "arenas.yml"
ARENAS_SECTION = "arenas"

BLUE_TEAM = 0
RED_TEAM = 1
NO_TEAM = -1


class ArenaState(IntEnum):
    WAITING = 0  # waiting for enough players
    STARTING = 1  # countdown running
    RUNNING = 2


@persistable
class Region:
    """Axis-aligned box in one world. Corners may be given in any order."""

    world: Optional[World] = persisted(None)
    min: Vector = persisted(default_factory=Vector, on_fail=FailurePolicy.CANCEL_LOAD)
    max: Vector = persisted(default_factory=Vector, on_fail=FailurePolicy.CANCEL_LOAD)

    def on_deserialize(self) -> None:
        self.min, self.max = Vector.min_of(self.min, self.max), Vector.max_of(self.min, self.max)

    def is_valid(self) -> bool:
        return self.world is not None and self.min != self.max

    def contains(self, location: Optional[Location]) -> bool:
        if location is None or not self.is_valid() or location.world != self.world:
            return False
        lo = Vector.min_of(self.min, self.max)
        hi = Vector.max_of(self.min, self.max)
        return lo.x <= location.x <= hi.x and lo.y <= location.y <= hi.y and lo.z <= location.z <= hi.z


@persistable
class Arena:
    name: str = persisted("default", on_fail=FailurePolicy.CANCEL_LOAD)
    min_players: int = persisted(DEFAULT_MIN_PLAYERS, on_fail=FailurePolicy.CONSOLE_ERR)
    max_players: int = persisted(DEFAULT_MAX_PLAYERS, on_fail=FailurePolicy.CONSOLE_ERR)

    arena_region: Optional[Region] = persisted(default_factory=Region)
    lobby_region: Optional[Region] = persisted(default_factory=Region)
    death_box: Optional[Region] = persisted(default_factory=Region)

    arena_blue_spawn: Optional[Location] = persisted(None, on_fail=FailurePolicy.CONSOLE_ERR)
    arena_red_spawn: Optional[Location] = persisted(None, on_fail=FailurePolicy.CONSOLE_ERR)
    lobby_spawn: Optional[Location] = persisted(None, on_fail=FailurePolicy.CONSOLE_ERR)
    death_box_spawn: Optional[Location] = persisted(None, on_fail=FailurePolicy.CONSOLE_ERR)
    exit: Optional[Location] = persisted(None, on_fail=FailurePolicy.CONSOLE_ERR)

    # Runtime state, never saved
    users: List[str] = field(default_factory=list, compare=False)
    state: ArenaState = field(default=ArenaState.WAITING, compare=False)
    score_blue: int = field(default=0, compare=False)
    score_red: int = field(default=0, compare=False)

    def on_deserialize(self) -> None:
        if self.max_players < self.min_players:
            self.max_players = self.min_players

    def is_valid(self) -> bool:
        """Whether every region and spawn point has been set up."""
        spawns = (self.arena_blue_spawn, self.arena_red_spawn, self.lobby_spawn, self.death_box_spawn, self.exit)
        regions = (self.arena_region, self.lobby_region, self.death_box)
        if any(s is None for s in spawns):
            return False
        return all(r is not None and r.is_valid() for r in regions)

    def get_spawn(self, team: int) -> Optional[Location]:
        return self.arena_blue_spawn if team == BLUE_TEAM else self.arena_red_spawn

    def is_in_arena(self, location: Location) -> bool:
        regions = (self.arena_region, self.lobby_region, self.death_box)
        return any(r is not None and r.contains(location) for r in regions)

    def winning_team(self) -> int:
        if self.score_blue == self.score_red:
            return NO_TEAM
        return BLUE_TEAM if self.score_blue > self.score_red else RED_TEAM


def _arena_section(name: str) -> str:
    if not name or SECTION_SEP in name:
        raise ValueError(f"Invalid arena name {name!r}: names must be non-empty and contain no '{SECTION_SEP}'")
    return f"{ARENAS_SECTION}{SECTION_SEP}{name}"


def save_arena(manager: ConfigManager, arena: Arena) -> bool:
    """Store ``arena`` under its name in the arenas file."""
    return manager.save(arena, ARENAS_FILE, section=_arena_section(arena.name))


def load_arena(manager: ConfigManager, name: str) -> Optional[Arena]:
    return manager.load(Arena, ARENAS_FILE, section=_arena_section(name))


def load_arenas(manager: ConfigManager) -> List[Arena]:
    """Load every stored arena, skipping (and logging) the ones that fail."""
    stored = manager.load_tree(ARENAS_FILE).get(ARENAS_SECTION)
    if not isinstance(stored, dict):
        return []
    arenas = []
    for name in stored:
        arena = load_arena(manager, name)
        if arena is None:
            logger.warning("Skipping arena '%s': it could not be loaded", name)
            continue
        arenas.append(arena)
    return arenas


def delete_arena(manager: ConfigManager, name: str) -> bool:
    """Remove an arena from the arenas file. Returns whether it was there."""
    removed = manager.delete_section(ARENAS_FILE, _arena_section(name))
    if removed:
        logger.info("Deleted arena '%s'", name)
    return removed
