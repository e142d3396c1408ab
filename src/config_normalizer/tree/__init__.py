"""Tree subpackage: path building and graph traversal primitives.

Re-exports the public API for the tree module:
- Member, Index, extend, join_path, normalize_prefix: path building
- NodeKind, AccessorKind, Accessor, AccessorResult, SkippedAccessor: node records
- Flattener: walks a configuration object graph into a flat mapping
- TaggedFieldExtractor, Configurable, configurable: transport field extraction
"""

from config_normalizer.tree.flattener import NULL_TEXT, Flattener, render_leaf
from config_normalizer.tree.nodes import (
    Accessor,
    AccessorKind,
    AccessorResult,
    NodeKind,
    SkippedAccessor,
)
from config_normalizer.tree.path import (
    Index,
    Member,
    extend,
    join_path,
    normalize_prefix,
)
from config_normalizer.tree.tagged import (
    Configurable,
    TaggedFieldExtractor,
    component_name,
    configurable,
)

__all__ = [
    "NULL_TEXT",
    "Accessor",
    "AccessorKind",
    "AccessorResult",
    "Configurable",
    "Flattener",
    "Index",
    "Member",
    "NodeKind",
    "SkippedAccessor",
    "TaggedFieldExtractor",
    "component_name",
    "configurable",
    "extend",
    "join_path",
    "normalize_prefix",
    "render_leaf",
]
