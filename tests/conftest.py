"""Shared configuration graphs for the config-normalizer test suite.

The graphs mimic a small cache manager: a global section, a cache section
with nested eviction settings, and a two-protocol transport stack.  All of
them are plain dataclasses so the default ``DataclassModel`` walks them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import pytest

from config_normalizer import configurable


class EvictionStrategy(StrEnum):
    NONE = "NONE"
    LRU = "LRU"


@dataclass
class EvictionConfig:
    strategy: EvictionStrategy = EvictionStrategy.NONE
    max_entries: int = -1


@dataclass
class CacheConfig:
    owners: int = 2
    l1_enabled: bool = False
    eviction: EvictionConfig = field(default_factory=EvictionConfig)
    backup_sites: list[str] = field(default_factory=list)


@dataclass
class TransportConfig:
    cluster_name: str = "ISPN"
    node_name: str | None = None


@dataclass
class GlobalConfig:
    transport: TransportConfig = field(default_factory=TransportConfig)
    async_executor_threads: int = 10


@dataclass
class TCP:
    name: str = "TCP"
    bind_port: int = configurable(default=7800)
    recv_buf_size: int = configurable(default=8192)
    thread_naming: str = "cluster"


@dataclass
class MERGE3:
    name: str = "MERGE3"
    max_interval: int = configurable(default=30000)


class StaticSource:
    """In-memory ConfigurationSource."""

    def __init__(
        self,
        global_configuration: Any,
        default: Any,
        named: dict[str, Any] | None = None,
        transport: list[Any] | None = None,
    ) -> None:
        self._global = global_configuration
        self._default = default
        self._named = named or {}
        self._transport = transport

    def global_configuration(self) -> Any:
        return self._global

    def default_configuration(self) -> Any:
        return self._default

    def named_configurations(self) -> dict[str, Any]:
        return self._named

    def transport_stack(self) -> list[Any] | None:
        return self._transport


@pytest.fixture
def cache_config() -> CacheConfig:
    return CacheConfig(
        owners=3,
        eviction=EvictionConfig(strategy=EvictionStrategy.LRU, max_entries=1000),
        backup_sites=["NYC", "LON"],
    )


@pytest.fixture
def global_config() -> GlobalConfig:
    return GlobalConfig()


@pytest.fixture
def transport_stack() -> list[Any]:
    return [TCP(), MERGE3()]


@pytest.fixture
def source(
    global_config: GlobalConfig,
    cache_config: CacheConfig,
    transport_stack: list[Any],
) -> StaticSource:
    return StaticSource(
        global_config,
        CacheConfig(),
        named={"orders": cache_config},
        transport=transport_stack,
    )


@pytest.fixture
def source_factory() -> type[StaticSource]:
    return StaticSource
