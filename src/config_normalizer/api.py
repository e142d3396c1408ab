"""Public API functions for config-normalizer.

This module provides the user-facing functions: flatten, extract_tagged,
normalize, dumps, loads and save.  Each call creates a fresh
``ConfigNormalizer`` (or extractor, or encoding) so that calls never share
state.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from config_normalizer.config import NormalizerConfig, OutputFormat
from config_normalizer.encodings import get_encoding
from config_normalizer.export import Target, write_mapping
from config_normalizer.normalizer import ConfigNormalizer
from config_normalizer.protocols import ConfigModel
from config_normalizer.tree.tagged import TaggedFieldExtractor

__all__ = ["dumps", "extract_tagged", "flatten", "loads", "normalize", "save"]


def flatten(
    value: Any,
    prefix: str | None = "",
    model: ConfigModel | None = None,
    config: NormalizerConfig | None = None,
) -> dict[str, str]:
    """Flatten an object graph into a ``path -> text`` mapping.

    Accessors that raise while being read are left out silently; use
    ``ConfigNormalizer.flatten`` to get the list of skipped paths.

    Args:
        value:  Root of the object graph.
        prefix: Root path of every key.  Defaults to no prefix.
        model:  Configuration model.  Defaults to ``DataclassModel()``, which
                treats every dataclass instance as a configuration node.
        config: Traversal options.  Defaults to ``NormalizerConfig()``.

    Returns:
        A fresh ``dict[str, str]``.

    Raises:
        CyclicGraphError: The graph contains a cycle and cycle detection is on.
        DepthLimitExceededError: The graph is deeper than ``config.max_depth``.
    """
    return ConfigNormalizer(model=model, config=config).flatten(value, prefix).properties


def extract_tagged(
    component: Any,
    prefix: str | None = "",
    mapping: dict[str, str] | None = None,
    *,
    include_inherited: bool = False,
) -> dict[str, str]:
    """Extract the configurable-tagged fields of one transport component.

    When ``mapping`` is given it is updated in place and returned.
    """
    target: dict[str, str] = {} if mapping is None else mapping
    TaggedFieldExtractor(include_inherited=include_inherited).extract(
        component, prefix, target
    )
    return target


def normalize(
    global_configuration: Any,
    caches: Mapping[str, Any],
    transport: Iterable[Any] | None = None,
    prefix: str | None = "",
    model: ConfigModel | None = None,
    config: NormalizerConfig | None = None,
) -> dict[str, str]:
    """Flatten the global, cache and transport sections into one mapping.

    See ``ConfigNormalizer.normalize`` for the section layout.
    """
    normalizer = ConfigNormalizer(model=model, config=config)
    return normalizer.normalize(global_configuration, caches, transport, prefix).properties


def dumps(
    mapping: Mapping[str, str],
    fmt: OutputFormat | str = OutputFormat.STANDARD,
) -> bytes:
    """Encode ``mapping`` deterministically: sorted keys, UTF-8."""
    return get_encoding(fmt).encode(mapping)


def loads(data: bytes, fmt: OutputFormat | str = OutputFormat.STANDARD) -> dict[str, str]:
    """Decode bytes produced by ``dumps`` back into a mapping."""
    return get_encoding(fmt).decode(data)


def save(
    mapping: Mapping[str, str],
    target: Target,
    fmt: OutputFormat | str = OutputFormat.STANDARD,
    attempts: int = 1,
) -> None:
    """Write ``mapping`` to a path or binary stream.

    Path writes are retried up to ``attempts`` times on ``OSError``.
    """
    write_mapping(mapping, target, fmt, attempts=attempts)
