"""Type-keyed codec registry.

Maps a declared type to the :class:`~funpaintball.config.codec.Codec` that
turns its values into document subtrees and back. Lookup is by exact type
identity: a codec registered for a base class is not used for subclasses.

Registration is expected to finish during start-up; writes are serialized
with a lock so late registration is still safe, reads take no lock.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List, Mapping, Optional

from .builtin_codecs import install_builtin_codecs
from .codec import Codec, FunctionCodec

logger = logging.getLogger(__name__)


class CodecRegistry:
    def __init__(self) -> None:
        self._codecs: dict[type, Codec] = {}
        self._lock = threading.RLock()

    def register(self, cls: type, codec: Codec) -> None:
        """Register ``codec`` for ``cls``, replacing (with a warning) any existing one."""
        if not isinstance(codec, Codec):
            raise TypeError(f"{codec!r} does not provide encode() and decode()")
        with self._lock:
            previous = self._codecs.get(cls)
            if previous is not None:
                logger.warning(
                    "Registering codec %s for '%s', replacing existing codec %s",
                    type(codec).__name__,
                    cls.__qualname__,
                    type(previous).__name__,
                )
            # Copy-on-write so lock-free readers always see a complete dict
            codecs = dict(self._codecs)
            codecs[cls] = codec
            self._codecs = codecs

    def unregister(self, cls: type) -> Optional[Codec]:
        with self._lock:
            codecs = dict(self._codecs)
            removed = codecs.pop(cls, None)
            self._codecs = codecs
        return removed

    def lookup(self, cls: Any) -> Optional[Codec]:
        try:
            return self._codecs.get(cls)
        except TypeError:
            # unhashable typing constructs are never registered
            return None

    def registered_types(self) -> List[type]:
        return list(self._codecs)

    def __contains__(self, cls: object) -> bool:
        return self.lookup(cls) is not None

    @classmethod
    def with_builtins(cls) -> "CodecRegistry":
        registry = cls()
        install_builtin_codecs(registry)
        return registry


_DEFAULT_REGISTRY = CodecRegistry.with_builtins()


def get_registry() -> CodecRegistry:
    """Return the process-wide registry, pre-populated with the built-in codecs."""
    return _DEFAULT_REGISTRY


def register_codec(
    cls: type,
    codec: Optional[Codec] = None,
    *,
    encode: Optional[Callable[[Any], Mapping[str, Any]]] = None,
    decode: Optional[Callable[[Mapping[str, Any]], Any]] = None,
) -> None:
    """Register a codec for ``cls`` on the process-wide registry.

    Either pass a codec object, or both ``encode`` and ``decode`` functions.
    """
    if codec is None:
        if encode is None or decode is None:
            raise TypeError("register_codec() needs a codec or both encode= and decode=")
        codec = FunctionCodec(encode, decode)
    elif encode is not None or decode is not None:
        raise TypeError("register_codec() takes a codec or encode=/decode=, not both")
    _DEFAULT_REGISTRY.register(cls, codec)


def lookup_codec(cls: type) -> Optional[Codec]:
    return _DEFAULT_REGISTRY.lookup(cls)


def codec_for(cls: type) -> Callable[[type], type]:
    """Class decorator registering an instance of the decorated codec class for ``cls``."""

    def decorator(codec_cls: type) -> type:
        register_codec(cls, codec_cls())
        return codec_cls

    return decorator
