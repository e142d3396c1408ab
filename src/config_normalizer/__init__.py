"""Config normalizer - deterministic flat properties from configuration object graphs."""

from __future__ import annotations

from config_normalizer.api import (
    dumps,
    extract_tagged,
    flatten,
    loads,
    normalize,
    save,
)
from config_normalizer.config import NormalizerConfig, OutputFormat, OutputType
from config_normalizer.diff import PropertiesDiff, diff_properties
from config_normalizer.errors import (
    CacheNotFoundError,
    CyclicGraphError,
    DepthLimitExceededError,
    FlatteningError,
    ManagerNotFoundError,
    NormalizerError,
    SourceLoadError,
    TransportUnavailableError,
)
from config_normalizer.models import (
    ConfigurationNode,
    DataclassModel,
    MarkerModel,
    NamespaceModel,
    configuration_node,
)
from config_normalizer.normalizer import DEFAULT_CACHE_NAME, ConfigNormalizer
from config_normalizer.registry import NormalizerRegistry
from config_normalizer.result import NormalizationResult
from config_normalizer.tree import Configurable, Index, Member, configurable, extend

__version__: str = "0.1.0"
__all__: list[str] = [
    "DEFAULT_CACHE_NAME",
    "CacheNotFoundError",
    "ConfigNormalizer",
    "Configurable",
    "ConfigurationNode",
    "CyclicGraphError",
    "DataclassModel",
    "DepthLimitExceededError",
    "FlatteningError",
    "Index",
    "ManagerNotFoundError",
    "MarkerModel",
    "Member",
    "NamespaceModel",
    "NormalizationResult",
    "NormalizerConfig",
    "NormalizerError",
    "NormalizerRegistry",
    "OutputFormat",
    "OutputType",
    "PropertiesDiff",
    "SourceLoadError",
    "TransportUnavailableError",
    "configurable",
    "configuration_node",
    "diff_properties",
    "dumps",
    "extend",
    "extract_tagged",
    "flatten",
    "loads",
    "normalize",
    "save",
]
