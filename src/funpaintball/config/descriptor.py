"""Persistable types and their field descriptors.

A persistable type is a dataclass decorated with :func:`persistable`. Only
fields declared with :func:`persisted` take part in saving and loading; other
fields (runtime state, caches) are left alone::

    @persistable
    @dataclass
    class Region:
        min: Vector = persisted(default_factory=Vector)
        max: Vector = persisted(default_factory=Vector)
        selected: bool = False  # not persisted

Two optional hooks are honoured: ``on_pre_serialize(self)`` runs right before
an instance is written and ``on_deserialize(self)`` runs once a freshly
loaded instance has all its fields filled.
"""
from __future__ import annotations

import dataclasses
import logging
import types
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, Optional, Tuple, Union, get_args, get_origin, get_type_hints

logger = logging.getLogger(__name__)

PERSISTABLE_ATTR = "__persistable__"
PERSISTED_KEY = "funpaintball.persisted"

PRE_SERIALIZE_HOOK = "on_pre_serialize"
POST_DESERIALIZE_HOOK = "on_deserialize"


class FailurePolicy(Enum):
    """What to do when a single field cannot be loaded."""

    USE_DEFAULT = "use_default"  # keep the constructor default, quietly
    CONSOLE_ERR = "console_err"  # keep the default and log an error
    CANCEL_LOAD = "cancel_load"  # give up on the enclosing instance


@dataclass(frozen=True)
class PersistedOptions:
    on_fail: Optional[FailurePolicy] = None


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    declared_type: Any
    optional: bool = False
    failure_policy: Optional[FailurePolicy] = None

    @property
    def effective_policy(self) -> FailurePolicy:
        return self.failure_policy or FailurePolicy.USE_DEFAULT


@dataclass(frozen=True)
class TypeDescriptor:
    cls: type
    fields: Tuple[FieldDescriptor, ...]

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def make_default(self) -> Any:
        """Build a default instance. Raises whatever the constructor raises."""
        return self.cls()


def persisted(
    default: Any = dataclasses.MISSING,
    *,
    default_factory: Any = dataclasses.MISSING,
    on_fail: Optional[FailurePolicy] = None,
    **kwargs: Any,
) -> Any:
    """Declare a dataclass field that is saved and loaded.

    Accepts the same ``default``/``default_factory`` as ``dataclasses.field``
    (extra keyword arguments are passed through) plus the field's failure
    policy. A field without a default still describes fine, but the type can
    then not be loaded since it has no zero-argument constructor.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[PERSISTED_KEY] = PersistedOptions(on_fail=on_fail)
    return dataclasses.field(default=default, default_factory=default_factory, metadata=metadata, **kwargs)


def persistable(cls: Optional[type] = None) -> Any:
    """Mark a class as persistable, turning it into a dataclass if it is not one."""

    def wrap(c: type) -> type:
        if not dataclasses.is_dataclass(c):
            c = dataclass(c)
        setattr(c, PERSISTABLE_ATTR, True)
        return c

    if cls is None:
        return wrap
    return wrap(cls)


def is_persistable(obj: Any) -> bool:
    cls = obj if isinstance(obj, type) else type(obj)
    return bool(getattr(cls, PERSISTABLE_ATTR, False)) and dataclasses.is_dataclass(cls)


def unwrap_optional(tp: Any) -> Tuple[Any, bool]:
    """Split ``Optional[X]`` / ``X | None`` into ``(X, True)``; other types pass through."""
    origin = get_origin(tp)
    if origin is Union or (hasattr(types, "UnionType") and origin is types.UnionType):
        args = [a for a in get_args(tp) if a is not type(None)]
        if len(args) != len(get_args(tp)):
            if len(args) == 1:
                return args[0], True
            return Union[tuple(args)], True
    return tp, False


def _resolve_field_hint(cls: type, f: dataclasses.Field) -> Any:
    # Evaluate one annotation in the namespace of the class that declares it
    owner = next((b for b in cls.__mro__ if f.name in vars(b).get("__annotations__", {})), cls)
    holder = type(owner.__name__, (), {"__annotations__": {f.name: f.type}, "__module__": owner.__module__})
    return get_type_hints(holder, localns={owner.__name__: owner})[f.name]


def _resolve_hints(cls: type) -> dict:
    try:
        return get_type_hints(cls)
    except (NameError, TypeError):
        pass
    hints = {}
    for f in dataclasses.fields(cls):
        try:
            hints[f.name] = _resolve_field_hint(cls, f)
        except (NameError, TypeError) as exc:
            logger.warning(
                "Could not resolve the type of field '%s' of '%s' (%s); treating it as Any",
                f.name,
                cls.__qualname__,
                exc,
            )
    return hints


@lru_cache(maxsize=None)
def describe(cls: type) -> TypeDescriptor:
    """Return the cached descriptor listing the persisted fields of ``cls``.

    Raises:
        TypeError: if ``cls`` is not a dataclass.
    """
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"'{cls.__qualname__}' is not a dataclass and cannot be described")
    hints = _resolve_hints(cls)
    fields = []
    for f in dataclasses.fields(cls):
        options = f.metadata.get(PERSISTED_KEY)
        if options is None:
            continue
        declared, optional = unwrap_optional(hints.get(f.name, Any))
        fields.append(
            FieldDescriptor(
                name=f.name,
                declared_type=declared,
                optional=optional,
                failure_policy=options.on_fail,
            )
        )
    return TypeDescriptor(cls=cls, fields=tuple(fields))


def call_hook(obj: Any, hook: str) -> None:
    fn: Optional[Callable[[], Any]] = getattr(obj, hook, None)
    if callable(fn):
        fn()
