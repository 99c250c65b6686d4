from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Protocol, runtime_checkable


@runtime_checkable
class Codec(Protocol):
    """Adapter between a non-persistable type and a document subtree.

    ``encode`` must always return a mapping (never a scalar) so the
    deserializer can tell codec-backed entries from raw values by shape.
    ``decode`` may raise; the deserializer applies the field's failure policy.
    Codecs must not call back into the serializer or deserializer.
    """

    def encode(self, value: Any) -> Mapping[str, Any]:
        ...

    def decode(self, data: Mapping[str, Any]) -> Any:
        ...


@dataclass(frozen=True)
class FunctionCodec:
    """Codec built from a pair of plain functions."""

    encoder: Callable[[Any], Mapping[str, Any]]
    decoder: Callable[[Mapping[str, Any]], Any]

    def encode(self, value: Any) -> Mapping[str, Any]:
        return self.encoder(value)

    def decode(self, data: Mapping[str, Any]) -> Any:
        return self.decoder(data)


def require_keys(data: Mapping[str, Any], *keys: str) -> Dict[str, Any]:
    """Return the requested entries of ``data``, raising KeyError on the first missing one."""
    return {k: data[k] for k in keys}
