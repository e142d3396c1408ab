"""MarkerModel: configuration nodes identified by an explicit marker.

Types opt in either by subclassing ``ConfigurationNode`` or by being decorated
with ``@configuration_node``, which registers the class as a virtual subclass
of ``ConfigurationNode``.  Decorated classes are therefore accepted exactly by
the models whose markers include ``ConfigurationNode``, the default marker set.

Example::

    from config_normalizer.models import MarkerModel, configuration_node

    @configuration_node
    class EvictionConfig:
        def __init__(self, strategy: str) -> None:
            self.strategy = strategy

    MarkerModel().is_configuration(EvictionConfig("LRU"))  # True
"""

from __future__ import annotations

from abc import ABC
from collections.abc import Iterable
from typing import TypeVar

from config_normalizer.models.base import IntrospectingModel

__all__ = ["ConfigurationNode", "MarkerModel", "configuration_node"]

T = TypeVar("T", bound=type)


class ConfigurationNode(ABC):
    """Marker base class for configuration-model types."""

    __slots__ = ()


def configuration_node(cls: T) -> T:
    """Class decorator registering ``cls`` (and its subclasses) on ``ConfigurationNode``."""
    ConfigurationNode.register(cls)
    return cls


class MarkerModel(IntrospectingModel):
    """Configuration model keyed on marker types.

    Args:
        markers: Types whose instances are configuration nodes.  Defaults to
            ``(ConfigurationNode,)``, which also covers classes decorated
            with ``@configuration_node``.
        include_methods: Treat zero-argument methods as accessors.  Defaults
            to False.
        max_cache_size: Size of the per-instance accessor cache.
    """

    def __init__(
        self,
        markers: Iterable[type] = (ConfigurationNode,),
        *,
        include_methods: bool = False,
        max_cache_size: int = 256,
    ) -> None:
        super().__init__(include_methods=include_methods, max_cache_size=max_cache_size)
        self._markers = tuple(markers)

    def __repr__(self) -> str:
        return f"MarkerModel(markers={self._markers!r})"

    def _is_model_type(self, cls: type) -> bool:
        return issubclass(cls, self._markers)
