"""NamespaceModel: configuration nodes identified by their module namespace.

A value is a configuration node when the fully qualified name of its type
(``module.QualName``) starts with one of the configured namespaces.  The match
is a plain string prefix, so ``"acme.config"`` also matches
``acme.configuration.CacheConfig``.  Zero-argument methods are accessors by
default, which suits immutable configuration objects exposing getter methods.
"""

from __future__ import annotations

from collections.abc import Iterable

from config_normalizer.models.base import IntrospectingModel, qualified_name

__all__ = ["NamespaceModel"]


class NamespaceModel(IntrospectingModel):
    """Configuration model keyed on type-namespace membership.

    Args:
        namespaces: One or more module-path prefixes.  Must not be empty.
        include_methods: Treat zero-argument methods as accessors.  Defaults
            to True.
        max_cache_size: Size of the per-instance accessor cache.

    Raises:
        ValueError: If ``namespaces`` is empty or contains a blank entry.
    """

    def __init__(
        self,
        namespaces: Iterable[str],
        *,
        include_methods: bool = True,
        max_cache_size: int = 256,
    ) -> None:
        super().__init__(include_methods=include_methods, max_cache_size=max_cache_size)
        self._namespaces = tuple(namespaces)
        if not self._namespaces:
            msg = "NamespaceModel requires at least one namespace"
            raise ValueError(msg)
        if any(not ns.strip() for ns in self._namespaces):
            msg = f"Namespaces must be non-blank, got {self._namespaces!r}"
            raise ValueError(msg)

    def __repr__(self) -> str:
        return f"NamespaceModel(namespaces={self._namespaces!r})"

    @property
    def namespaces(self) -> tuple[str, ...]:
        return self._namespaces

    def _is_model_type(self, cls: type) -> bool:
        return qualified_name(cls).startswith(self._namespaces)
