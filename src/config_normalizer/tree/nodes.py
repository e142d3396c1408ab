"""Node kinds and accessor records used while flattening a configuration graph.

The flattener classifies every visited value into one ``NodeKind``; the
configuration model describes the children of a configuration node as a
sequence of ``Accessor`` records and reports each read as an
``AccessorResult`` (success or skip).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any

__all__ = [
    "Accessor",
    "AccessorKind",
    "AccessorResult",
    "NodeKind",
    "SkippedAccessor",
    "qualified_name",
]


class NodeKind(StrEnum):
    """Closed set of node kinds the flattener distinguishes.

    - NULL          -> "null"          : absent value, emits ``"null"``
    - CONFIGURATION -> "configuration" : recursed into via its accessors
    - SEQUENCE      -> "sequence"      : expanded element by element
    - OPAQUE        -> "opaque"        : no textual form, emits its type name
    - LEAF          -> "leaf"          : emits ``str(value)``
    - TAGGED        -> "tagged"        : explicitly tagged transport field
    """

    NULL = auto()
    CONFIGURATION = auto()
    SEQUENCE = auto()
    OPAQUE = auto()
    LEAF = auto()
    TAGGED = auto()


class AccessorKind(StrEnum):
    """How an accessor obtains its child value."""

    FIELD = auto()
    PROPERTY = auto()
    METHOD = auto()
    ATTRIBUTE = auto()


@dataclass(frozen=True, slots=True)
class Accessor:
    """A zero-argument member of a configuration node.

    Attributes:
        name: Member name; becomes the child path segment.
        kind: Whether the member is a dataclass field, property, zero-argument
              method (invoked on read) or plain instance attribute.
    """

    name: str
    kind: AccessorKind


@dataclass(frozen=True, slots=True)
class AccessorResult:
    """Outcome of reading one accessor: a value, or the error that skipped it."""

    accessor: Accessor
    value: Any = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class SkippedAccessor:
    """Record of a child omitted from the flattened mapping.

    Attributes:
        path:     Path the child would have been emitted at.
        accessor: The accessor that failed.
        error:    The exception raised while reading it.
    """

    path: str
    accessor: Accessor
    error: Exception


def qualified_name(cls: type) -> str:
    """Return the fully qualified ``module.QualName`` of a type."""
    return f"{cls.__module__}.{cls.__qualname__}"
