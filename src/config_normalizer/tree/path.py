"""Path building for flattened configuration keys.

A flattened key is a rendered sequence of segments:

- ``Member("eviction")`` renders as ``.eviction``
- ``Index(0)`` renders as ``[0]``

Member segments are joined with ``.``; index segments are appended directly,
so ``cache.default.eviction.strategy`` and ``global.listeners[0].class`` are
both valid keys.  An empty prefix never produces a leading separator:
``extend("", "a") == "a"`` and ``extend("", Index(0)) == "[0]"``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

__all__ = ["Index", "Member", "Segment", "extend", "join_path", "normalize_prefix"]

# A string segment of the form "[12]" denotes a sequence index.
_INDEX_TOKEN = re.compile(r"\[(\d+)\]")


@dataclass(frozen=True, slots=True)
class Member:
    """Named member access segment (``.name``)."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Index:
    """Sequence index segment (``[position]``)."""

    position: int

    def __post_init__(self) -> None:
        if self.position < 0:
            msg = f"Index position must be >= 0, got {self.position}"
            raise ValueError(msg)

    def __str__(self) -> str:
        return f"[{self.position}]"


Segment = Member | Index


def _as_segment(segment: Segment | str | int) -> Segment:
    # bool is an int subclass but never a meaningful index
    if isinstance(segment, (Member, Index)):
        return segment
    if isinstance(segment, int) and not isinstance(segment, bool):
        return Index(segment)
    if isinstance(segment, str):
        match = _INDEX_TOKEN.fullmatch(segment)
        if match is not None:
            return Index(int(match.group(1)))
        return Member(segment)
    msg = f"Unsupported path segment type: {type(segment)!r}"
    raise TypeError(msg)


def extend(prefix: str, segment: Segment | str | int) -> str:
    """Return ``prefix`` extended by one segment.

    Args:
        prefix:  Already rendered path.  May be empty.
        segment: A ``Member``, an ``Index``, a bare ``int`` (index), or a
                 ``str``.  Strings shaped like ``"[3]"`` are indices; any other
                 string is a member name.

    Returns:
        The rendered child path.
    """
    seg = _as_segment(segment)
    if not prefix:
        return str(seg)
    if isinstance(seg, Index):
        return f"{prefix}{seg}"
    return f"{prefix}.{seg}"


def join_path(segments: Iterable[Segment | str | int]) -> str:
    """Render a full segment sequence, starting from the empty path."""
    path = ""
    for segment in segments:
        path = extend(path, segment)
    return path


def normalize_prefix(prefix: str | None) -> str:
    """Normalize a caller-supplied root prefix.

    ``None`` becomes ``""``; surrounding whitespace and trailing ``.``
    separators are dropped so ``"global."`` and ``"global"`` root the same keys.
    """
    if prefix is None:
        return ""
    return prefix.strip().rstrip(".")
