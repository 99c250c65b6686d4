from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Mapping, Optional, Type, TypeVar

from pydantic import ConfigDict, PydanticUserError, TypeAdapter, ValidationError

from .descriptor import (
    POST_DESERIALIZE_HOOK,
    FailurePolicy,
    FieldDescriptor,
    call_hook,
    describe,
    is_persistable,
)
from .errors import DocumentTreeError
from .registry import CodecRegistry, get_registry
from .serializer import DEFAULT_MAX_DEPTH
from .tree import is_subtree

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Raw entries are assigned as-is, so they must already have the declared type:
# no "7" -> 7 coercion, no True for an int.
_RAW_CONFIG = ConfigDict(strict=True, arbitrary_types_allowed=True)


class _NestedLoadFailed(Exception):
    """A nested persistable could not be loaded; fatal to its parent."""


@lru_cache(maxsize=None)
def _raw_adapter(declared_type: Any) -> TypeAdapter:
    try:
        return TypeAdapter(declared_type, config=_RAW_CONFIG)
    except PydanticUserError:
        # dataclasses, TypedDicts and models refuse an outside config
        return TypeAdapter(declared_type)


def deserialize(
    cls: Type[T],
    tree: Mapping[str, Any],
    *,
    registry: Optional[CodecRegistry] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Optional[T]:
    """Build a fresh ``cls`` instance from a document tree.

    Fields missing from the tree keep their constructor defaults. A field that
    cannot be decoded is handled by its failure policy; a nested persistable
    that cannot be decoded at all makes this call return None whatever the
    policy. None is also returned (and logged) if ``cls`` is not persistable
    or has no zero-argument constructor.

    The returned instance's own ``on_deserialize`` hook is left to the caller.
    """
    return _deserialize(cls, tree, registry or get_registry(), 0, max_depth)


def _deserialize(
    cls: Any,
    tree: Mapping[str, Any],
    registry: CodecRegistry,
    depth: int,
    max_depth: int,
) -> Any:
    type_name = getattr(cls, "__qualname__", repr(cls))
    if not is_persistable(cls):
        logger.error("Attempted to deserialize to '%s', which is not persistable", type_name)
        return None
    if not is_subtree(tree):
        logger.error("Cannot deserialize '%s' from a '%s'; a section is required", type_name, type(tree).__name__)
        return None
    if depth >= max_depth:
        logger.error("Nesting deeper than %d levels while deserializing '%s'", max_depth, type_name)
        return None

    descriptor = describe(cls)
    try:
        instance = descriptor.make_default()
    except Exception:
        logger.exception(
            "Could not instantiate an object of type '%s'. Persistable types need a zero-argument "
            "constructor (give every field a default) and should do their set-up in on_deserialize().",
            type_name,
        )
        return None

    for field in descriptor.fields:
        if field.name not in tree:
            continue
        try:
            value = _decode_field(field, tree[field.name], registry, depth, max_depth)
            # bypasses frozen dataclasses and custom __setattr__
            object.__setattr__(instance, field.name, value)
        except _NestedLoadFailed:
            logger.debug("Cancelling load of '%s': nested field '%s' could not be loaded", type_name, field.name)
            return None
        except Exception as exc:
            if not _handle_field_failure(field, type_name, exc):
                return None
    return instance


def _decode_field(
    field: FieldDescriptor,
    entry: Any,
    registry: CodecRegistry,
    depth: int,
    max_depth: int,
) -> Any:
    if entry is None and field.optional:
        return None

    declared = field.declared_type
    if is_persistable(declared):
        if not is_subtree(entry):
            raise DocumentTreeError(f"expected a section, found '{type(entry).__name__}'")
        child = _deserialize(declared, entry, registry, depth + 1, max_depth)
        if child is None:
            raise _NestedLoadFailed(field.name)
        call_hook(child, POST_DESERIALIZE_HOOK)
        return child

    codec = registry.lookup(declared)
    if codec is not None:
        if not is_subtree(entry):
            raise DocumentTreeError(f"expected a section for codec {type(codec).__name__}, found '{type(entry).__name__}'")
        return codec.decode(entry)

    _raw_adapter(declared).validate_python(entry)
    return entry


def _handle_field_failure(field: FieldDescriptor, type_name: str, exc: Exception) -> bool:
    """Apply the field's failure policy. Returns False if the load must be cancelled."""
    reason = _describe_error(exc)
    policy = field.effective_policy
    if policy is FailurePolicy.CANCEL_LOAD:
        logger.error(
            "Failed to load field '%s' in '%s' (%s); on_fail=CANCEL_LOAD, cancelling load",
            field.name,
            type_name,
            reason,
        )
        return False
    if policy is FailurePolicy.CONSOLE_ERR:
        logger.error("Failed to load field '%s' in '%s': %s", field.name, type_name, reason)
    else:
        logger.debug("Failed to load field '%s' in '%s', keeping default: %s", field.name, type_name, reason)
    return True


def _describe_error(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(err["msg"] for err in exc.errors())
    return f"{type(exc).__name__}: {exc}"
