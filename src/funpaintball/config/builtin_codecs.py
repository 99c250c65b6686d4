"""Codecs for the host-world primitives.

Leaf names are part of the on-disk format:

- ``Vector``   -> ``{x, y, z}``
- ``World``    -> ``{name}``
- ``Location`` -> ``{world, x, y, z, yaw, pitch}`` where ``world`` is the world name
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Mapping

from ..world import Location, Vector, World
from .codec import require_keys
from .errors import CodecError

if TYPE_CHECKING:  # pragma: no cover
    from .registry import CodecRegistry


def _number(data: Mapping[str, Any], key: str) -> float:
    value = data[key]
    # bool is an int subclass; "true" is never a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CodecError(f"Expected a number for '{key}', got {type(value).__name__}")
    return float(value)


def _world_name(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise CodecError(f"World name must be a non-empty string, got {value!r}")
    return value


class VectorCodec:
    def encode(self, value: Vector) -> Dict[str, Any]:
        return {"x": value.x, "y": value.y, "z": value.z}

    def decode(self, data: Mapping[str, Any]) -> Vector:
        require_keys(data, "x", "y", "z")
        return Vector(_number(data, "x"), _number(data, "y"), _number(data, "z"))


class WorldCodec:
    def encode(self, value: World) -> Dict[str, Any]:
        return {"name": value.name}

    def decode(self, data: Mapping[str, Any]) -> World:
        return World(_world_name(data["name"]))


class LocationCodec:
    def encode(self, value: Location) -> Dict[str, Any]:
        return {
            "world": value.world.name,
            "x": value.x,
            "y": value.y,
            "z": value.z,
            "yaw": value.yaw,
            "pitch": value.pitch,
        }

    def decode(self, data: Mapping[str, Any]) -> Location:
        require_keys(data, "world", "x", "y", "z", "yaw", "pitch")
        return Location(
            world=World(_world_name(data["world"])),
            x=_number(data, "x"),
            y=_number(data, "y"),
            z=_number(data, "z"),
            yaw=_number(data, "yaw"),
            pitch=_number(data, "pitch"),
        )


def install_builtin_codecs(registry: "CodecRegistry") -> "CodecRegistry":
    registry.register(Vector, VectorCodec())
    registry.register(World, WorldCodec())
    registry.register(Location, LocationCodec())
    return registry
