"""IntrospectingModel: shared accessor enumeration for configuration models.

Concrete models only decide *which* types are configuration nodes; how the
children of a node are found is common to all of them:

1. dataclass fields, in declaration order;
2. walking the MRO base-first (``object`` excluded): properties and
   ``functools.cached_property`` members, then, when ``include_methods`` is
   set, plain functions whose only parameter is ``self``;
3. public instance attributes from ``vars(value)``, in insertion order.

Names starting with ``_`` are never accessors, which rules out the identity
members ``__str__``, ``__repr__`` and ``__hash__`` along with every other
dunder.  Each name appears once, at its first position.  Steps 1 and 2 depend
only on the runtime type and are cached per model instance in an
``LRUCache``; step 3 is evaluated per value.

Example::

    from config_normalizer.models import NamespaceModel

    model = NamespaceModel(["myapp.config"])
    for accessor in model.accessors(cfg):
        result = model.read(cfg, accessor)
"""

from __future__ import annotations

import dataclasses
import enum
import functools
import inspect
import threading
from abc import ABC, abstractmethod
from typing import Any

from cachetools import LRUCache

from config_normalizer.tree.nodes import (
    Accessor,
    AccessorKind,
    AccessorResult,
    qualified_name,
)

__all__ = ["IntrospectingModel", "qualified_name"]

_SELF_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def _is_public(name: str) -> bool:
    return not name.startswith("_")


def _takes_only_self(func: Any) -> bool:
    try:
        params = list(inspect.signature(func).parameters.values())
    except (TypeError, ValueError):
        return False
    return len(params) == 1 and params[0].kind in _SELF_KINDS


def _instance_attributes(value: Any) -> list[str]:
    try:
        attributes = vars(value)
    except TypeError:
        # __slots__ classes have no instance __dict__
        return []
    return [name for name in attributes if isinstance(name, str) and _is_public(name)]


class IntrospectingModel(ABC):
    """Base class for the bundled ``ConfigModel`` implementations.

    Satisfies the ``ConfigModel`` Protocol.  Subclasses implement
    ``_is_model_type``; enumerated types are rejected before it is consulted.

    Args:
        include_methods: Treat public zero-argument methods as accessors and
            invoke them on read.  Only safe for models whose methods are pure
            getters.
        max_cache_size: Maximum number of types whose accessor lists are kept
            in the per-instance LRU cache.  Defaults to 256.
    """

    def __init__(self, *, include_methods: bool = False, max_cache_size: int = 256) -> None:
        self._include_methods = include_methods
        self._members: LRUCache[type, tuple[Accessor, ...]] = LRUCache(
            maxsize=max_cache_size
        )
        self._lock = threading.Lock()

    @property
    def include_methods(self) -> bool:
        return self._include_methods

    @abstractmethod
    def _is_model_type(self, cls: type) -> bool:
        """Return True when instances of ``cls`` are configuration nodes."""

    # ------------------------------------------------------------------
    # ConfigModel Protocol surface
    # ------------------------------------------------------------------

    def is_configuration(self, value: Any) -> bool:
        cls = type(value)
        if issubclass(cls, enum.Enum):
            return False
        return self._is_model_type(cls)

    def accessors(self, value: Any) -> tuple[Accessor, ...]:
        """Return the accessors of ``value`` in stable enumeration order."""
        members = self._type_accessors(type(value))
        seen = {accessor.name for accessor in members}
        extra = tuple(
            Accessor(name, AccessorKind.ATTRIBUTE)
            for name in _instance_attributes(value)
            if name not in seen
        )
        return members + extra

    def read(self, value: Any, accessor: Accessor) -> AccessorResult:
        """Read one accessor; any ``Exception`` is returned, never raised."""
        try:
            child = getattr(value, accessor.name)
            if accessor.kind is AccessorKind.METHOD:
                child = child()
        except Exception as exc:  # noqa: BLE001 - a failure skips only this child
            return AccessorResult(accessor, error=exc)
        return AccessorResult(accessor, value=child)

    # ------------------------------------------------------------------
    # Type-level enumeration (cached)
    # ------------------------------------------------------------------

    def _type_accessors(self, cls: type) -> tuple[Accessor, ...]:
        with self._lock:
            cached = self._members.get(cls)
        if cached is not None:
            return cached
        members = self._enumerate(cls)
        with self._lock:
            self._members[cls] = members
        return members

    def _enumerate(self, cls: type) -> tuple[Accessor, ...]:
        found: dict[str, Accessor] = {}

        if dataclasses.is_dataclass(cls):
            for field in dataclasses.fields(cls):
                if _is_public(field.name):
                    found[field.name] = Accessor(field.name, AccessorKind.FIELD)

        for klass in reversed(cls.__mro__):
            if klass is object:
                continue
            for name, member in vars(klass).items():
                if not _is_public(name) or name in found:
                    continue
                if isinstance(member, (property, functools.cached_property)):
                    found[name] = Accessor(name, AccessorKind.PROPERTY)
                elif (
                    self._include_methods
                    and inspect.isfunction(member)
                    and _takes_only_self(member)
                ):
                    found[name] = Accessor(name, AccessorKind.METHOD)

        return tuple(found.values())
