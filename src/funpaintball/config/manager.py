from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Type, TypeVar

from ..paths import ensure_dir, resolve_data_dir
from .backend import PathLike, TreeBackend, backend_for
from .descriptor import POST_DESERIALIZE_HOOK, PRE_SERIALIZE_HOOK, call_hook
from .deserializer import deserialize
from .registry import CodecRegistry
from .serializer import serialize
from .tree import SECTION_SEP, DocumentTree, get_section, set_section

logger = logging.getLogger(__name__)

T = TypeVar("T")


def load(cls: Type[T], path: PathLike, backend: Optional[TreeBackend] = None) -> Optional[T]:
    """Read ``path`` and deserialize it into ``cls``.

    A missing file reads as an empty tree, so this returns a default instance.
    """
    backend = backend or backend_for(path)
    return deserialize(cls, backend.load_tree(path))


def save(value: Any, path: PathLike, backend: Optional[TreeBackend] = None) -> bool:
    """Serialize ``value`` and write it to ``path``, replacing the file.

    Returns False, leaving the file untouched, if serialization fails.
    """
    tree = serialize(value)
    if tree is None:
        return False
    backend = backend or backend_for(path)
    backend.save_tree(tree, path)
    return True


class ConfigManager:
    """Loads and saves persistable objects under the plugin data folder.

    - Files are addressed by name relative to ``data_dir``
    - ``section`` is a dotted path into the file, so several objects (one per
      arena, say) can share a file
    - Saving merges into what is already on disk instead of truncating it
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        backend: Optional[TreeBackend] = None,
        registry: Optional[CodecRegistry] = None,
    ) -> None:
        self.data_dir = resolve_data_dir(data_dir)
        self._backend = backend
        self.registry = registry
        ensure_dir(self.data_dir)

    def get_file(self, name: str) -> Path:
        return self.data_dir / name

    def backend_for(self, name: str) -> TreeBackend:
        return self._backend or backend_for(name)

    def ensure_file(self, name: str) -> bool:
        """Create an empty file if it is missing. Returns whether it already existed."""
        path = self.get_file(name)
        if path.exists():
            return True
        ensure_dir(path.parent)
        path.touch()
        logger.debug("Created empty config file %s", path)
        return False

    def load_tree(self, name: str) -> DocumentTree:
        return self.backend_for(name).load_tree(self.get_file(name))

    def save_tree(self, tree: DocumentTree, name: str) -> None:
        self.backend_for(name).save_tree(tree, self.get_file(name))

    def load(self, cls: Type[T], name: str, section: Optional[str] = None) -> Optional[T]:
        """Load ``cls`` from a file (or a section of it).

        Returns None if the file or section does not exist, or if the object
        could not be loaded. On success the object's ``on_deserialize`` hook
        has been called.
        """
        if not self.get_file(name).exists():
            logger.debug("Not loading %s: %s does not exist", cls.__qualname__, name)
            return None
        tree = get_section(self.load_tree(name), section)
        if tree is None:
            logger.debug("Not loading %s: no section '%s' in %s", cls.__qualname__, section, name)
            return None
        obj = deserialize(cls, tree, registry=self.registry)
        if obj is not None:
            call_hook(obj, POST_DESERIALIZE_HOOK)
        return obj

    def save(self, value: Any, name: str, section: Optional[str] = None) -> bool:
        """Save ``value`` into a file (or a section of it).

        Calls the value's ``on_pre_serialize`` hook first. Keys already in the
        file are kept unless the value writes the same key; with ``section``
        the whole section is replaced. Returns False, writing nothing, if the
        value could not be serialized.
        """
        call_hook(value, PRE_SERIALIZE_HOOK)
        data = serialize(value, registry=self.registry)
        if data is None:
            logger.error("Failed to save %s to %s", type(value).__qualname__, name)
            return False
        tree = self.load_tree(name)
        set_section(tree, section, data)
        self.save_tree(tree, name)
        logger.info("Saved %s to %s", type(value).__qualname__, self.get_file(name))
        return True

    def delete_section(self, name: str, section: str) -> bool:
        """Remove a dotted section from a file. Returns whether anything was removed."""
        tree = self.load_tree(name)
        *parents, leaf = section.split(SECTION_SEP)
        node: Any = tree
        for part in parents:
            node = node.get(part) if isinstance(node, dict) else None
        if not isinstance(node, dict) or leaf not in node:
            return False
        del node[leaf]
        self.save_tree(tree, name)
        return True


__all__ = ["ConfigManager", "load", "save"]
