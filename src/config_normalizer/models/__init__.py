"""Configuration-model providers for config-normalizer.

A model answers three questions about a value in the object graph: is it a
configuration node, what are its accessors, and what does each accessor
return.  Three providers ship with the package:

- ``DataclassModel``: any dataclass instance (the API default)
- ``NamespaceModel``: types under one or more module namespaces
- ``MarkerModel``: ``ConfigurationNode`` subclasses and
  ``@configuration_node`` classes

All of them satisfy the ``ConfigModel`` Protocol structurally.
"""

from config_normalizer.models.base import IntrospectingModel, qualified_name
from config_normalizer.models.dataclass import DataclassModel
from config_normalizer.models.marker import (
    ConfigurationNode,
    MarkerModel,
    configuration_node,
)
from config_normalizer.models.namespace import NamespaceModel

__all__ = [
    "ConfigurationNode",
    "DataclassModel",
    "IntrospectingModel",
    "MarkerModel",
    "NamespaceModel",
    "configuration_node",
    "qualified_name",
]
