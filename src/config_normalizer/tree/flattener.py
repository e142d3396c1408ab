"""Flattener: walks a configuration object graph into a flat path -> string mapping.

Every visited value is classified into one ``NodeKind``, checked in this order:

1. ``None``                       -> NULL:          emit ``"null"``
2. ``model.is_configuration(v)``  -> CONFIGURATION: recurse into each accessor
3. sequence or set                -> SEQUENCE:      recurse into each element
4. address in textual form        -> OPAQUE:        emit the qualified type name
5. anything else                  -> LEAF:          emit the textual form

Paths are built with ``extend``: accessors add ``.name`` segments and elements
add ``[i]`` segments, so the keys come out as ``cache.default.eviction.strategy``
and ``global.listeners[0].class``.

The flattener never reorders anything.  Accessor order comes from the model and
element order from the container's own iteration, so a graph whose
containers iterate stably always flattens to the same mapping.

Example::

    from config_normalizer.models import DataclassModel
    from config_normalizer.tree.flattener import Flattener

    mapping: dict[str, str] = {}
    Flattener(DataclassModel()).flatten(cfg, "global", mapping)
"""

from __future__ import annotations

import array
import logging
import re
from collections.abc import MutableMapping, Sequence, Set
from dataclasses import dataclass, field
from typing import Any

from config_normalizer.errors import CyclicGraphError, DepthLimitExceededError
from config_normalizer.protocols import ConfigModel
from config_normalizer.tree.nodes import NodeKind, SkippedAccessor, qualified_name
from config_normalizer.tree.path import Index, extend, normalize_prefix

__all__ = ["NULL_TEXT", "Flattener", "render_leaf"]

logger = logging.getLogger(__name__)

NULL_TEXT = "null"

# Containers of primitive elements: rendered as leaves, never expanded.
_PRIMITIVE_CONTAINERS = (str, bytes, bytearray, memoryview, array.array)

# A memory address as embedded by default reprs, e.g.
# "<acme.Pool object at 0x7f3a2c1d0e50>" or "<function <lambda> at 0x7f3a...>".
# Text carrying one differs between runs.
_IDENTITY_TEXT = re.compile(r" at 0x[0-9a-fA-F]+>")


def render_leaf(value: Any) -> str:
    """Return the textual form of a terminal value.

    ``None`` renders as ``"null"`` and booleans as ``"true"``/``"false"``;
    everything else uses ``str()``.
    """
    # bool MUST be checked before falling through to str(): str(True) == "True"
    if value is None:
        return NULL_TEXT
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _has_identity_text(value: Any) -> bool:
    if isinstance(value, str):
        return False
    cls = type(value)
    if cls.__str__ is object.__str__ and cls.__repr__ is object.__repr__:
        return True
    try:
        text = str(value)
    except Exception:  # noqa: BLE001 - the leaf branch re-raises on render
        return False
    return text == object.__repr__(value) or _IDENTITY_TEXT.search(text) is not None


def _is_sequence(value: Any) -> bool:
    if isinstance(value, _PRIMITIVE_CONTAINERS):
        return False
    return isinstance(value, (Sequence, Set))


@dataclass
class _Walk:
    """Mutable state owned by a single ``flatten()`` call."""

    mapping: MutableMapping[str, str]
    skipped: list[SkippedAccessor] = field(default_factory=list)
    visiting: set[int] = field(default_factory=set)


@dataclass
class Flattener:
    """Flattens a heterogeneous object graph into ``(path, text)`` pairs.

    Attributes:
        model:         Decides which values are configuration nodes and how
                       their accessors are enumerated and read.
        max_depth:     Maximum number of segments below the root prefix, or
                       None for no limit.  Exceeding it raises
                       ``DepthLimitExceededError``.
        detect_cycles: When True, revisiting a configuration or sequence node
                       that is still on the traversal stack raises
                       ``CyclicGraphError``.  Shared acyclic sub-objects are
                       allowed.  When False, a cyclic graph recurses until
                       Python's recursion limit.

    A ``Flattener`` holds no per-call state and may be reused across calls and
    threads, provided each call gets its own mapping.
    """

    model: ConfigModel
    max_depth: int | None = None
    detect_cycles: bool = True

    def __post_init__(self) -> None:
        if self.max_depth is not None and self.max_depth < 1:
            msg = f"max_depth must be >= 1, got {self.max_depth}"
            raise ValueError(msg)

    def classify(self, value: Any) -> NodeKind:
        """Return the node kind the flattener would assign to ``value``."""
        if value is None:
            return NodeKind.NULL
        if self.model.is_configuration(value):
            return NodeKind.CONFIGURATION
        if _is_sequence(value):
            return NodeKind.SEQUENCE
        if _has_identity_text(value):
            return NodeKind.OPAQUE
        return NodeKind.LEAF

    def flatten(
        self,
        value: Any,
        prefix: str | None,
        mapping: MutableMapping[str, str],
    ) -> list[SkippedAccessor]:
        """Insert the flattened entries of ``value`` rooted at ``prefix`` into ``mapping``.

        Args:
            value:   Root of the object graph.
            prefix:  Root path supplied by a caller; ``None`` and ``""`` both
                     mean no prefix.  It goes through ``normalize_prefix``.
            mapping: Destination mapping, mutated in place.

        Returns:
            Accessors that failed to read and were left out of ``mapping``.

        Raises:
            CyclicGraphError: A cycle was found and ``detect_cycles`` is on.
            DepthLimitExceededError: The graph is deeper than ``max_depth``.
        """
        return self.flatten_at(value, normalize_prefix(prefix), mapping)

    def flatten_at(
        self,
        value: Any,
        path: str,
        mapping: MutableMapping[str, str],
    ) -> list[SkippedAccessor]:
        """Like ``flatten``, but ``path`` is an already rendered key used verbatim.

        Section roots built with ``extend`` are passed here so that member
        names ending in ``.`` or carrying whitespace keep their own keys.
        """
        walk = _Walk(mapping=mapping)
        self._visit(value, path, 0, walk)
        return walk.skipped

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _visit(self, value: Any, path: str, depth: int, walk: _Walk) -> None:
        if self.max_depth is not None and depth > self.max_depth:
            raise DepthLimitExceededError(path, self.max_depth)

        kind = self.classify(value)

        if kind is NodeKind.CONFIGURATION:
            with _Entered(self.detect_cycles, walk, value, path):
                self._visit_configuration(value, path, depth, walk)
        elif kind is NodeKind.SEQUENCE:
            with _Entered(self.detect_cycles, walk, value, path):
                for idx, item in enumerate(value):
                    self._visit(item, extend(path, Index(idx)), depth + 1, walk)
        elif kind is NodeKind.OPAQUE:
            walk.mapping[path] = qualified_name(type(value))
        else:
            walk.mapping[path] = render_leaf(value)

    def _visit_configuration(self, value: Any, path: str, depth: int, walk: _Walk) -> None:
        for accessor in self.model.accessors(value):
            child_path = extend(path, accessor.name)
            result = self.model.read(value, accessor)
            if result.error is not None:
                logger.debug(
                    "Skipping %s: %s raised %r",
                    child_path,
                    accessor.kind,
                    result.error,
                )
                walk.skipped.append(SkippedAccessor(child_path, accessor, result.error))
                continue
            self._visit(result.value, child_path, depth + 1, walk)


class _Entered:
    """Context manager tracking a container on the traversal stack."""

    __slots__ = ("_active", "_key", "_path", "_value", "_walk")

    def __init__(self, active: bool, walk: _Walk, value: Any, path: str) -> None:
        self._active = active
        self._walk = walk
        self._value = value
        self._path = path
        self._key = id(value)

    def __enter__(self) -> None:
        if not self._active:
            return
        if self._key in self._walk.visiting:
            raise CyclicGraphError(self._path, qualified_name(type(self._value)))
        self._walk.visiting.add(self._key)

    def __exit__(self, *exc_info: object) -> None:
        if self._active:
            self._walk.visiting.discard(self._key)
