from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any, Optional

from .descriptor import PRE_SERIALIZE_HOOK, FieldDescriptor, call_hook, describe, is_persistable
from .errors import SerializationDepthError
from .registry import CodecRegistry, get_registry
from .tree import DocumentTree, is_tree_value

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64

# Codec failures that mean "this codec was handed a value it does not understand"
_CODEC_CAST_ERRORS = (TypeError, AttributeError, ValueError)


def serialize(
    value: Any,
    *,
    registry: Optional[CodecRegistry] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Optional[DocumentTree]:
    """Encode a persistable value into a document tree.

    Returns None (and logs why) if ``value`` is not persistable or if its
    object graph nests deeper than ``max_depth``, which in practice means it
    contains a cycle. Nothing partial is returned in either case. Fields that
    fail on their own are left out of the tree and logged.

    The root's ``on_pre_serialize`` hook is not called here; nested
    persistable values have theirs called right before they are encoded.
    """
    type_name = type(value).__qualname__
    if not is_persistable(value):
        logger.error(
            "Attempted to serialize '%s', which is not persistable (decorate it with @persistable)",
            type_name,
        )
        return None
    try:
        return _serialize(value, registry or get_registry(), 0, max_depth)
    except (SerializationDepthError, RecursionError) as exc:
        logger.error(
            "Serializer caught in an infinite loop while serializing an object of type '%s': %s",
            type_name,
            exc,
        )
        return None


def _serialize(value: Any, registry: CodecRegistry, depth: int, max_depth: int) -> DocumentTree:
    if depth >= max_depth:
        raise SerializationDepthError(type(value).__qualname__, max_depth)
    descriptor = describe(type(value))
    tree: DocumentTree = {}
    for field in descriptor.fields:
        try:
            _serialize_field(tree, value, field, registry, depth, max_depth)
        except (SerializationDepthError, RecursionError):
            raise
        except Exception:
            logger.exception(
                "Failed to serialize field '%s' of '%s'; leaving it out",
                field.name,
                descriptor.cls.__qualname__,
            )
    return tree


def _serialize_field(
    tree: DocumentTree,
    owner: Any,
    field: FieldDescriptor,
    registry: CodecRegistry,
    depth: int,
    max_depth: int,
) -> None:
    current = getattr(owner, field.name)

    if is_persistable(field.declared_type):
        if current is None:
            tree[field.name] = None
            return
        call_hook(current, PRE_SERIALIZE_HOOK)
        tree[field.name] = _serialize(current, registry, depth + 1, max_depth)
        return

    codec = registry.lookup(field.declared_type)
    if codec is not None:
        if current is None:
            tree[field.name] = None
            return
        try:
            encoded = codec.encode(current)
        except _CODEC_CAST_ERRORS:
            logger.exception(
                "Codec %s could not encode field '%s' of '%s' (value of type '%s')",
                type(codec).__name__,
                field.name,
                type(owner).__qualname__,
                type(current).__qualname__,
            )
            return
        if not isinstance(encoded, Mapping):
            logger.error(
                "Codec %s returned '%s' for field '%s' instead of a mapping; leaving it out",
                type(codec).__name__,
                type(encoded).__name__,
                field.name,
            )
            return
        tree[field.name] = dict(encoded)
        return

    # Raw value. Containers are copied so the tree never aliases the input.
    if not is_tree_value(current):
        logger.error(
            "Field '%s' of '%s' holds a '%s', which cannot be stored in a config file; "
            "leaving it out (register a codec for the type)",
            field.name,
            type(owner).__qualname__,
            type(current).__qualname__,
        )
        return
    if isinstance(current, (list, dict)):
        current = copy.deepcopy(current)
    tree[field.name] = current
