"""pytest plugin for config-normalizer.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

from config_normalizer import (
    NormalizerConfig,
    OutputFormat,
    diff_properties,
    flatten,
)
from config_normalizer.export import read_mapping
from config_normalizer.protocols import ConfigModel


def _snapshot_format(path: Path, fmt: OutputFormat | str | None) -> OutputFormat | str:
    if fmt is not None:
        return fmt
    return OutputFormat.XML if path.suffix.lower() == ".xml" else OutputFormat.STANDARD


@pytest.fixture(scope="session")
def assert_config_matches() -> Any:
    """Fixture that returns a callable flattened-configuration asserter.

    The fixture is session-scoped because the returned callable is stateless
    (delegates to flatten() which creates a fresh ConfigNormalizer per call).

    Usage in tests::

        def test_defaults(assert_config_matches):
            assert_config_matches(CacheConfig(), {"eviction.size": "-1", ...})

        def test_snapshot(assert_config_matches):
            assert_config_matches(build_config(), SNAPSHOTS / "cache.properties")

    Args:
        No arguments -- the fixture is injected by pytest.

    Returns:
        A callable ``_assert(actual, expected, prefix="", model=None,
        config=None, fmt=None) -> None`` that raises ``AssertionError`` when
        the flattened properties differ.
    """

    def _assert(
        actual: Any,
        expected: Mapping[str, str] | str | os.PathLike[str],
        prefix: str = "",
        model: ConfigModel | None = None,
        config: NormalizerConfig | None = None,
        fmt: OutputFormat | str | None = None,
    ) -> None:
        """Assert that a configuration flattens to the expected properties.

        Args:
            actual:   A configuration object graph, or an already flattened
                      ``Mapping`` (used as is).
            expected: The expected mapping, or the path of a saved snapshot.
            prefix:   Root prefix used when flattening ``actual``.
            model:    Configuration model.  Defaults to ``DataclassModel()``.
            config:   Traversal options.
            fmt:      Snapshot format.  Inferred from the file suffix when
                      None: ``.xml`` is XML, anything else is ``standard``.

        Raises:
            AssertionError: When the two mappings differ, with a message
                listing added, removed and changed keys.
        """
        if isinstance(actual, Mapping):
            actual_props = dict(actual)
        else:
            actual_props = flatten(actual, prefix, model=model, config=config)

        if isinstance(expected, Mapping):
            expected_props = dict(expected)
        else:
            path = Path(expected)
            expected_props = read_mapping(path, _snapshot_format(path, fmt))

        diff = diff_properties(expected_props, actual_props)
        if not diff.is_empty:
            raise AssertionError(
                f"Flattened configuration does not match expected properties\n"
                f"{diff.summary()}"
            )

    return _assert
