"""NormalizerConfig plus the OutputFormat and OutputType selectors.

NormalizerConfig is a frozen (immutable) dataclass holding the traversal
options and the root prefixes of the three configuration sections.
OutputFormat picks the serialized encoding; OutputType picks which sections
end up in the output.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto

__all__ = ["NormalizerConfig", "OutputFormat", "OutputType"]


class OutputFormat(StrEnum):
    """Serialized form of a flattened mapping.

    - XML:      properties XML document with one ``<entry>`` per key
    - STANDARD: ``key=value`` lines
    """

    XML = auto()
    STANDARD = auto()


class OutputType(StrEnum):
    """Which sections of a manager's configuration to normalize.

    - ALL:     global section, every cache and the transport stack
    - CACHE:   one cache configuration
    - GLOBAL:  the global configuration alone
    - JGROUPS: the transport protocol stack alone
    """

    ALL = auto()
    CACHE = auto()
    GLOBAL = auto()
    JGROUPS = auto()


def _check_prefix(field_name: str, value: str) -> None:
    if not value:
        msg = f"{field_name} must be non-empty"
        raise ValueError(msg)
    if any(ch.isspace() for ch in value):
        msg = f"{field_name} must not contain whitespace, got {value!r}"
        raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class NormalizerConfig:
    """Immutable options for ``ConfigNormalizer``.

    Attributes:
        detect_cycles: Raise ``CyclicGraphError`` when a node is revisited while
            still on the traversal stack.  Default True.
        max_depth: Maximum number of path segments below a section root, or
            None for no limit.  Must be >= 1 when set.
        include_inherited_tagged: Also extract tagged transport fields declared
            on base classes.  Default False.
        global_prefix: Root of the global section.  Default ``"global"``.
        cache_prefix: Root of the cache sections; each cache lives under
            ``<cache_prefix>.<cache name>``.  Default ``"cache"``.
        transport_prefix: Root of the transport section.  Default ``"jgroups"``.
    """

    detect_cycles: bool = True
    max_depth: int | None = None
    include_inherited_tagged: bool = False
    global_prefix: str = "global"
    cache_prefix: str = "cache"
    transport_prefix: str = "jgroups"

    def __post_init__(self) -> None:
        if self.max_depth is not None and self.max_depth < 1:
            msg = f"max_depth must be >= 1, got {self.max_depth}"
            raise ValueError(msg)
        _check_prefix("global_prefix", self.global_prefix)
        _check_prefix("cache_prefix", self.cache_prefix)
        _check_prefix("transport_prefix", self.transport_prefix)
