"""Document tree storage backends.

A backend turns a file into a document tree and back. The engine only needs
nested trees to come back as nested trees and scalars as scalars; the
on-disk encoding is the backend's business.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping, Protocol, Union

import yaml

from .errors import BackendError, CorruptConfigError, DocumentTreeError
from .tree import DocumentTree, validate_tree

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class TreeBackend(Protocol):
    def load_tree(self, path: PathLike) -> DocumentTree:
        """Read a tree; a missing file yields an empty tree."""
        ...

    def save_tree(self, tree: Mapping[str, Any], path: PathLike) -> None:
        """Write a tree, creating the file (and parent dirs) if absent."""
        ...


class FileBackend:
    """Shared file handling: missing files, shape checks, atomic writes."""

    suffix = ""

    def load_tree(self, path: PathLike) -> DocumentTree:
        path = Path(path)
        if not path.exists():
            logger.debug("Config file %s does not exist; using an empty tree", path)
            return {}
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise BackendError(f"Could not read {path}: {exc}") from exc
        if not text.strip():
            return {}
        data = self.parse(text, path)
        if data is None:
            return {}
        try:
            validate_tree(data)
        except DocumentTreeError as exc:
            raise CorruptConfigError(f"{path} is not a valid config document: {exc}") from exc
        return data

    def save_tree(self, tree: Mapping[str, Any], path: PathLike) -> None:
        path = Path(path)
        validate_tree(tree)
        text = self.dump(tree)
        try:
            _atomic_write(path, text)
        except OSError as exc:
            raise BackendError(f"Could not write {path}: {exc}") from exc
        logger.debug("Saved config tree to %s", path)

    def parse(self, text: str, path: Path) -> Any:
        raise NotImplementedError

    def dump(self, tree: Mapping[str, Any]) -> str:
        raise NotImplementedError


class YamlBackend(FileBackend):
    """YAML files, the plugin's native config format."""

    suffix = ".yml"

    def parse(self, text: str, path: Path) -> Any:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise CorruptConfigError(f"Invalid YAML in {path}: {exc}") from exc

    def dump(self, tree: Mapping[str, Any]) -> str:
        return yaml.safe_dump(dict(tree), sort_keys=False, default_flow_style=False, allow_unicode=True)


class JsonBackend(FileBackend):
    suffix = ".json"

    def parse(self, text: str, path: Path) -> Any:
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise CorruptConfigError(f"Invalid JSON in {path}: {exc}") from exc

    def dump(self, tree: Mapping[str, Any]) -> str:
        return json.dumps(tree, ensure_ascii=False, indent=2)


def backend_for(path: PathLike) -> FileBackend:
    """Pick a backend from the file extension, defaulting to YAML."""
    if Path(path).suffix.lower() == JsonBackend.suffix:
        return JsonBackend()
    return YamlBackend()


def _atomic_write(path: Path, text: str) -> None:
    """Write to a temp file next to ``path``, fsync, then replace ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, path)
