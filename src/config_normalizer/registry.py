"""NormalizerRegistry: on-demand normalized views of running managers.

An application that owns several configuration managers registers each one
(with its global configuration, its caches as they are created, and a way to
reach its transport stack) and can then ask for the flattened configuration
of any of them, or save it to a file, at any time.

The registry is an ordinary object owned by the caller; nothing is kept at
module level.  Lookups that cannot be served (an unknown cache, a manager
without a transport, a graph that fails to flatten) are logged at ERROR and
produce an empty mapping, so that a diagnostic endpoint never takes the
application down.  Asking about a manager that was never registered is a
programming error and raises ``ManagerNotFoundError``.

Example::

    registry = NormalizerRegistry()
    registry.register_manager(manager, manager.global_config, name="node-a",
                              transport=lambda: manager.protocol_stack())
    registry.register_cache(manager, "orders", orders_config)
    registry.save(manager, "/tmp/node-a.properties")
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass, field
from typing import Any

from config_normalizer.config import NormalizerConfig, OutputFormat, OutputType
from config_normalizer.errors import FlatteningError, ManagerNotFoundError
from config_normalizer.export import Target, write_mapping
from config_normalizer.normalizer import ConfigNormalizer
from config_normalizer.protocols import ConfigModel

__all__ = ["NormalizerRegistry"]

logger = logging.getLogger(__name__)

TransportSource = Iterable[Any] | Callable[[], Iterable[Any] | None]


@dataclass
class _Manager:
    """Everything known about one registered manager."""

    name: str
    global_configuration: Any
    transport_source: TransportSource | None
    caches: dict[str, Any] = field(default_factory=dict)
    _transport: list[Any] | None = field(default=None, init=False, repr=False)

    def transport(self) -> list[Any] | None:
        """Return the transport stack, or None while it is not available.

        A callable source is called again on every request until it yields a
        stack; the first stack obtained is kept.  A source that raises is
        logged and treated as unavailable for that request.
        """
        if self._transport is not None:
            return self._transport
        try:
            source = self.transport_source
            if callable(source):
                source = source()
            stack = None if source is None else list(source)
        except Exception:
            logger.exception("Error while resolving transport stack of manager %s", self.name)
            return None
        if stack is None:
            logger.warning("No transport stack available for manager %s", self.name)
            return None
        self._transport = stack
        return stack


class NormalizerRegistry:
    """Registry mapping manager handles to their configuration sections.

    Args:
        model:  Configuration model used for every manager.  Defaults to
                ``DataclassModel()``.
        config: Traversal options and section prefixes.
    """

    def __init__(
        self,
        model: ConfigModel | None = None,
        config: NormalizerConfig | None = None,
    ) -> None:
        self._normalizer = ConfigNormalizer(model=model, config=config)
        self._managers: dict[Hashable, _Manager] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_manager(
        self,
        handle: Hashable,
        global_configuration: Any,
        *,
        name: str | None = None,
        transport: TransportSource | None = None,
    ) -> None:
        """Register a manager under ``handle``.

        Args:
            handle: Any hashable object identifying the manager.
            global_configuration: Root of the manager's global section.
            name: Name used in log records.  Defaults to ``manager@<hex id>``.
            transport: The transport protocol stack, or a zero-argument
                callable returning it.  A callable is invoked lazily and
                again on each request until it returns a stack.
        """
        manager_name = name if name else f"manager@{id(handle):x}"
        with self._lock:
            if handle in self._managers:
                logger.error("Manager already registered: %s", manager_name)
                return
            self._managers[handle] = _Manager(
                name=manager_name,
                global_configuration=global_configuration,
                transport_source=transport,
            )
        logger.debug("Registered manager %s", manager_name)

    def register_cache(self, handle: Hashable, cache_name: str, configuration: Any) -> None:
        """Attach a cache configuration to a registered manager."""
        with self._lock:
            manager = self._managers.get(handle)
            if manager is None:
                logger.warning("Couldn't find manager for cache %s", cache_name)
                return
            manager.caches[cache_name] = configuration
        logger.debug("Registered cache %s on manager %s", cache_name, manager.name)

    def unregister_manager(self, handle: Hashable) -> None:
        with self._lock:
            manager = self._managers.pop(handle, None)
        if manager is None:
            raise ManagerNotFoundError(_unknown(handle))
        logger.debug("Unregistered manager %s", manager.name)

    def managers(self) -> list[str]:
        """Return the names of all registered managers, sorted."""
        with self._lock:
            return sorted(manager.name for manager in self._managers.values())

    # ------------------------------------------------------------------
    # Normalized views
    # ------------------------------------------------------------------

    def normalized_config(self, handle: Hashable) -> dict[str, str]:
        """All sections of the manager: global, every cache and the transport."""
        manager = self._get(handle)
        try:
            result = self._normalizer.normalize(
                manager.global_configuration,
                dict(manager.caches),
                manager.transport(),
            )
        except FlatteningError:
            logger.exception("Error while flattening configuration of manager %s", manager.name)
            return {}
        return result.properties

    def normalized_global(self, handle: Hashable) -> dict[str, str]:
        manager = self._get(handle)
        return self._flatten_section(manager, manager.global_configuration)

    def normalized_transport(self, handle: Hashable) -> dict[str, str]:
        manager = self._get(handle)
        stack = manager.transport()
        if stack is None:
            logger.error(
                "Error while flattening configuration of manager %s: "
                "transport stack not available",
                manager.name,
            )
            return {}
        return self._normalizer.normalize_transport(stack).properties

    def normalized_cache(self, handle: Hashable, cache_name: str) -> dict[str, str]:
        manager = self._get(handle)
        if cache_name not in manager.caches:
            logger.error(
                "Error while flattening configuration of manager %s: cache %s not found",
                manager.name,
                cache_name,
            )
            return {}
        return self._flatten_section(manager, manager.caches[cache_name])

    def save(
        self,
        handle: Hashable,
        target: Target,
        fmt: OutputFormat | str = OutputFormat.STANDARD,
        output_type: OutputType | str = OutputType.ALL,
        cache_name: str | None = None,
        attempts: int = 1,
    ) -> None:
        """Write one normalized view of the manager to ``target``.

        Raises:
            ManagerNotFoundError: ``handle`` was never registered.
            ValueError: ``output_type`` is unknown, or ``cache`` was requested
                without a ``cache_name``.
            OSError: The write failed; the failure is logged first.
        """
        manager = self._get(handle)
        kind = OutputType(output_type)
        if kind is OutputType.ALL:
            mapping = self.normalized_config(handle)
        elif kind is OutputType.GLOBAL:
            mapping = self.normalized_global(handle)
        elif kind is OutputType.JGROUPS:
            mapping = self.normalized_transport(handle)
        else:
            if cache_name is None:
                msg = "cache_name is required when output_type is 'cache'"
                raise ValueError(msg)
            mapping = self.normalized_cache(handle, cache_name)

        try:
            write_mapping(mapping, target, fmt, attempts=attempts)
        except OSError:
            logger.exception(
                "Error saving configuration of manager %s to %s", manager.name, target
            )
            raise

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get(self, handle: Hashable) -> _Manager:
        with self._lock:
            manager = self._managers.get(handle)
        if manager is None:
            raise ManagerNotFoundError(_unknown(handle))
        return manager

    def _flatten_section(self, manager: _Manager, root: Any) -> dict[str, str]:
        try:
            return self._normalizer.flatten(root).properties
        except FlatteningError:
            logger.exception("Error while flattening configuration of manager %s", manager.name)
            return {}


def _unknown(handle: Hashable) -> str:
    return f"No manager registered for handle {handle!r}"
