"""Configuration persistence for FunPaintball.

Maps persistable dataclasses to and from document trees (nested dicts of
scalars) and stores those trees as YAML or JSON files:

- ``@persistable`` / ``persisted()`` declare what gets saved
- ``serialize`` / ``deserialize`` convert between objects and trees
- codecs, registered per type, handle values that are not persistable
  themselves (vectors, worlds, locations)
- each field may carry a ``FailurePolicy`` deciding what a bad value does
- ``ConfigManager`` ties it to the plugin data folder
"""

from .backend import FileBackend, JsonBackend, TreeBackend, YamlBackend, backend_for
from .codec import Codec, FunctionCodec
from .descriptor import (
    FailurePolicy,
    FieldDescriptor,
    TypeDescriptor,
    describe,
    is_persistable,
    persistable,
    persisted,
)
from .deserializer import deserialize
from .errors import (
    BackendError,
    CodecError,
    ConfigError,
    CorruptConfigError,
    DocumentTreeError,
    SerializationDepthError,
)
from .manager import ConfigManager, load, save
from .registry import CodecRegistry, codec_for, get_registry, lookup_codec, register_codec
from .serializer import DEFAULT_MAX_DEPTH, serialize
from .tree import DocumentTree, get_section, is_subtree, set_section, validate_tree

__all__ = [
    "FileBackend",
    "JsonBackend",
    "TreeBackend",
    "YamlBackend",
    "backend_for",
    "Codec",
    "FunctionCodec",
    "FailurePolicy",
    "FieldDescriptor",
    "TypeDescriptor",
    "describe",
    "is_persistable",
    "persistable",
    "persisted",
    "deserialize",
    "BackendError",
    "CodecError",
    "ConfigError",
    "CorruptConfigError",
    "DocumentTreeError",
    "SerializationDepthError",
    "ConfigManager",
    "load",
    "save",
    "CodecRegistry",
    "codec_for",
    "get_registry",
    "lookup_codec",
    "register_codec",
    "DEFAULT_MAX_DEPTH",
    "serialize",
    "DocumentTree",
    "get_section",
    "is_subtree",
    "set_section",
    "validate_tree",
]
