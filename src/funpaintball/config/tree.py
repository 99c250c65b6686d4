"""Document tree helpers.

A document tree is the engine's backend-agnostic data model: a ``dict`` of
string keys whose entries are either scalars (``int``, ``float``, ``bool``,
``str``, ``None``) or nested trees. Backends read and write trees; the
serializer and deserializer only ever see trees.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Dict, Optional, Union

from jsonschema import Draft202012Validator

from .errors import DocumentTreeError

logger = logging.getLogger(__name__)

Scalar = Union[int, float, bool, str, None]
DocumentTree = Dict[str, Any]

SECTION_SEP = "."

# Lists are tolerated as leaves: the engine never interprets them, but raw
# fields may hold them and YAML round-trips them.
TREE_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$defs": {
        "entry": {
            "anyOf": [
                {"type": ["integer", "number", "boolean", "string", "null"]},
                {"$ref": "#"},
                {"type": "array", "items": {"$ref": "#/$defs/entry"}},
            ]
        }
    },
    "type": "object",
    "additionalProperties": {"$ref": "#/$defs/entry"},
}


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    return Draft202012Validator(TREE_SCHEMA)


def is_subtree(entry: Any) -> bool:
    return isinstance(entry, Mapping)


def is_scalar(entry: Any) -> bool:
    return entry is None or isinstance(entry, (bool, int, float, str))


def is_tree_value(entry: Any) -> bool:
    """Whether a backend can store ``entry``: a scalar, a list of such, or a nested tree."""
    if is_scalar(entry):
        return True
    if isinstance(entry, list):
        return all(is_tree_value(e) for e in entry)
    if is_subtree(entry):
        return all(isinstance(k, str) and is_tree_value(v) for k, v in entry.items())
    return False


def validate_tree(tree: Any) -> None:
    """Check that ``tree`` has the document tree wire shape.

    Raises:
        DocumentTreeError: if the root is not a mapping, a key is not a string,
            or a leaf is not a supported scalar.
    """
    if not is_subtree(tree):
        raise DocumentTreeError(f"Document root must be a mapping, got '{type(tree).__name__}'")
    _check_keys(tree, "")
    errors = sorted(_validator().iter_errors(tree), key=lambda e: list(e.path))
    if errors:
        for err in errors:
            logger.error("Document tree error at %s: %s", _dotted(err.path), err.message)
        first = errors[0]
        raise DocumentTreeError(f"Invalid entry at '{_dotted(first.path)}': {first.message}")


def _check_keys(tree: Mapping, prefix: str) -> None:
    # JSON Schema cannot see non-string keys, YAML happily produces them.
    for key, entry in tree.items():
        if not isinstance(key, str):
            raise DocumentTreeError(f"Non-string key {key!r} under '{prefix or '<root>'}'")
        if is_subtree(entry):
            _check_keys(entry, f"{prefix}{SECTION_SEP}{key}" if prefix else key)


def _dotted(path: Any) -> str:
    return SECTION_SEP.join(str(p) for p in path) or "<root>"


def get_section(tree: Mapping, path: Optional[str]) -> Optional[DocumentTree]:
    """Return the nested tree at a dotted ``path``, or None if it is absent.

    An empty or None path returns the tree itself. A path that runs into a
    scalar is treated as absent.
    """
    if not path:
        return dict(tree)
    node: Any = tree
    for part in path.split(SECTION_SEP):
        if not is_subtree(node) or part not in node:
            return None
        node = node[part]
    return dict(node) if is_subtree(node) else None


def set_section(tree: DocumentTree, path: Optional[str], subtree: Mapping) -> DocumentTree:
    """Place ``subtree`` at a dotted ``path`` inside ``tree``.

    Intermediate sections are created as needed; a scalar in the way is
    replaced by a section. At the root (no path) the keys of ``subtree`` are
    merged into ``tree``, replacing entries with the same key.
    """
    if not path:
        tree.update(subtree)
        return tree
    parts = path.split(SECTION_SEP)
    node = tree
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = dict(subtree)
    return tree
