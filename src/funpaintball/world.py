"""Host-world value types.

The live server owns worlds, entities and block data. The plugin only needs
plain value types it can compare, do arithmetic on and persist, so these
mirror the shape of the host primitives without any behaviour tied to a
running world.
"""
from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class Vector:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: "Vector") -> "Vector":
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector") -> "Vector":
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    @staticmethod
    def min_of(a: "Vector", b: "Vector") -> "Vector":
        return Vector(min(a.x, b.x), min(a.y, b.y), min(a.z, b.z))

    @staticmethod
    def max_of(a: "Vector", b: "Vector") -> "Vector":
        return Vector(max(a.x, b.x), max(a.y, b.y), max(a.z, b.z))


@dataclass(frozen=True)
class World:
    """Handle to a world, identified by name only."""

    name: str


@dataclass
class Location:
    """A position anchored in a world, with a facing direction."""

    world: World
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    yaw: float = 0.0
    pitch: float = 0.0

    def to_vector(self) -> Vector:
        return Vector(self.x, self.y, self.z)

    def distance(self, other: "Location") -> float:
        if other.world != self.world:
            raise ValueError(
                f"Cannot measure distance between worlds '{self.world.name}' and '{other.world.name}'"
            )
        return (self.to_vector() - other.to_vector()).length()
