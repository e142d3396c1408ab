"""ConfigNormalizer: turns a manager's configuration roots into flat properties.

A manager's effective configuration has three sections, each flattened under
its own root (all roots sit below an optional caller prefix):

- ``global``:        the global configuration object graph
- ``cache.<name>``:  one graph per cache, the default cache included
- ``jgroups``:       the transport protocol stack, via tagged fields only

``normalize_source`` selects sections from a ``ConfigurationSource`` the way
the command line ``--type`` option does.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from config_normalizer.config import NormalizerConfig, OutputType
from config_normalizer.errors import (
    CacheNotFoundError,
    SourceLoadError,
    TransportUnavailableError,
)
from config_normalizer.models import DataclassModel
from config_normalizer.protocols import ConfigModel, ConfigurationSource
from config_normalizer.result import NormalizationResult
from config_normalizer.tree.flattener import Flattener
from config_normalizer.tree.nodes import SkippedAccessor
from config_normalizer.tree.path import Member, extend, normalize_prefix
from config_normalizer.tree.tagged import TaggedFieldExtractor

__all__ = ["DEFAULT_CACHE_NAME", "ConfigNormalizer"]

logger = logging.getLogger(__name__)

# Name under which the default cache configuration is reported.
DEFAULT_CACHE_NAME = "___defaultcache"


class ConfigNormalizer:
    """Flattens configuration sections into a single property mapping.

    Each call builds a fresh ``Flattener``, so one normalizer may be shared
    between threads.  The model's accessor cache is the only state kept
    across calls.

    Args:
        model:  Configuration model deciding which values are configuration
                nodes.  Defaults to ``DataclassModel()``.
        config: Traversal options and section prefixes.  Defaults to
                ``NormalizerConfig()``.
    """

    def __init__(
        self,
        model: ConfigModel | None = None,
        config: NormalizerConfig | None = None,
    ) -> None:
        self._model: ConfigModel = model if model is not None else DataclassModel()
        self._config = config if config is not None else NormalizerConfig()
        self._extractor = TaggedFieldExtractor(
            include_inherited=self._config.include_inherited_tagged
        )

    @property
    def model(self) -> ConfigModel:
        return self._model

    @property
    def config(self) -> NormalizerConfig:
        return self._config

    def _flattener(self) -> Flattener:
        return Flattener(
            self._model,
            max_depth=self._config.max_depth,
            detect_cycles=self._config.detect_cycles,
        )

    # ------------------------------------------------------------------
    # Single sections
    # ------------------------------------------------------------------

    def flatten(self, value: Any, prefix: str | None = "") -> NormalizationResult:
        """Flatten one object graph rooted at ``prefix``."""
        mapping: dict[str, str] = {}
        skipped = self._flattener().flatten(value, prefix, mapping)
        return NormalizationResult(mapping, tuple(skipped))

    def normalize_transport(
        self,
        components: Iterable[Any],
        prefix: str | None = "",
    ) -> NormalizationResult:
        """Extract the tagged fields of every transport component under ``prefix``."""
        mapping: dict[str, str] = {}
        self._extractor.extract_stack(components, prefix, mapping)
        return NormalizationResult(mapping)

    # ------------------------------------------------------------------
    # Whole manager
    # ------------------------------------------------------------------

    def normalize(
        self,
        global_configuration: Any,
        caches: Mapping[str, Any],
        transport: Iterable[Any] | None = None,
        prefix: str | None = "",
    ) -> NormalizationResult:
        """Flatten every section of a manager into one mapping.

        Args:
            global_configuration: Root of the global section.
            caches:    Cache configurations keyed by cache name.
            transport: Transport protocol stack, or None to leave the section out.
            prefix:    Prepended to every section root.

        Returns:
            A ``NormalizationResult`` with keys under ``global``,
            ``cache.<name>`` and ``jgroups`` (or the configured prefixes).
        """
        root = normalize_prefix(prefix)
        cfg = self._config
        flattener = self._flattener()
        mapping: dict[str, str] = {}
        skipped: list[SkippedAccessor] = []

        skipped += flattener.flatten_at(
            global_configuration, extend(root, cfg.global_prefix), mapping
        )
        logger.info("Normalized global configuration under %r", cfg.global_prefix)

        cache_root = extend(root, cfg.cache_prefix)
        for name, configuration in caches.items():
            # Member() keeps a name such as "[0]" from being read as an index
            skipped += flattener.flatten_at(
                configuration, extend(cache_root, Member(name)), mapping
            )
        logger.info("Normalized %d cache configuration(s)", len(caches))

        if transport is not None:
            self._extractor.extract_stack(
                transport, extend(root, cfg.transport_prefix), mapping
            )
            logger.info("Normalized transport stack under %r", cfg.transport_prefix)

        return NormalizationResult(mapping, tuple(skipped))

    def normalize_source(
        self,
        source: ConfigurationSource,
        output_type: OutputType | str = OutputType.ALL,
        cache_name: str | None = None,
        prefix: str | None = "",
    ) -> NormalizationResult:
        """Normalize the sections of ``source`` selected by ``output_type``.

        ``all`` roots each section under its configured prefix.  ``cache``,
        ``global`` and ``jgroups`` flatten the selected section alone, rooted
        directly at ``prefix``.

        Raises:
            CacheNotFoundError: ``cache_name`` names no configuration of
                ``source``.
            TransportUnavailableError: ``jgroups`` was requested but the
                source has no transport stack.
            SourceLoadError: A method of ``source`` raised.
            ValueError: ``output_type`` is not a known output type.
        """
        kind = OutputType(output_type)

        if kind is OutputType.ALL:
            caches = {DEFAULT_CACHE_NAME: _read(source, "default_configuration")}
            caches.update(_read(source, "named_configurations"))
            return self.normalize(
                _read(source, "global_configuration"),
                caches,
                _read(source, "transport_stack"),
                prefix,
            )

        if kind is OutputType.CACHE:
            return self.flatten(_select_cache(source, cache_name), prefix)

        if kind is OutputType.GLOBAL:
            return self.flatten(_read(source, "global_configuration"), prefix)

        transport = _read(source, "transport_stack")
        if transport is None:
            msg = "Configuration source has no transport protocol stack"
            raise TransportUnavailableError(msg)
        return self.normalize_transport(transport, prefix)


def _select_cache(source: ConfigurationSource, cache_name: str | None) -> Any:
    if cache_name is None or cache_name == DEFAULT_CACHE_NAME:
        return _read(source, "default_configuration")
    named = _read(source, "named_configurations")
    if cache_name not in named:
        raise CacheNotFoundError(cache_name)
    return named[cache_name]


def _read(source: ConfigurationSource, method: str) -> Any:
    try:
        return getattr(source, method)()
    except Exception as exc:
        msg = f"Configuration source {method}() failed: {exc}"
        raise SourceLoadError(msg) from exc
