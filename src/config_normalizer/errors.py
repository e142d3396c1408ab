"""Exception hierarchy for config-normalizer.

All errors raised deliberately by the package derive from ``NormalizerError``.
Invalid arguments raise ``ValueError``/``TypeError`` and I/O failures
propagate as ``OSError``; neither is wrapped.
"""

from __future__ import annotations

__all__ = [
    "CacheNotFoundError",
    "CyclicGraphError",
    "DepthLimitExceededError",
    "FlatteningError",
    "ManagerNotFoundError",
    "NormalizerError",
    "SourceLoadError",
    "TransportUnavailableError",
]


class NormalizerError(Exception):
    """Base class for config-normalizer errors."""


class FlatteningError(NormalizerError):
    """A configuration graph could not be flattened."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class CyclicGraphError(FlatteningError):
    """A node was reached again while it was still being visited."""

    def __init__(self, path: str, type_name: str) -> None:
        super().__init__(
            f"Cyclic configuration graph: {type_name} revisited at {path!r}", path
        )
        self.type_name = type_name


class DepthLimitExceededError(FlatteningError):
    """Traversal went deeper than the configured ``max_depth``."""

    def __init__(self, path: str, max_depth: int) -> None:
        super().__init__(
            f"Maximum flattening depth {max_depth} exceeded at {path!r}", path
        )
        self.max_depth = max_depth


class CacheNotFoundError(NormalizerError):
    """The requested named cache configuration does not exist."""

    def __init__(self, cache_name: str) -> None:
        super().__init__(f"Cache {cache_name!r} not found")
        self.cache_name = cache_name


class TransportUnavailableError(NormalizerError):
    """No transport protocol stack is available for normalization."""


class ManagerNotFoundError(NormalizerError):
    """No manager is registered under the given handle."""


class SourceLoadError(NormalizerError):
    """A configuration source could not be imported, built or read."""
