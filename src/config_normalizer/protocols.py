"""Collaborator protocols for config-normalizer extension points.

The flattening core only talks to the outside world through these structural
interfaces.  Any object with conformant members passes ``isinstance`` checks;
no inheritance is required.

Example::

    from config_normalizer.protocols import TransportComponent

    class TCP:
        name = "TCP"
        recv_buf_size = 8192

    assert isinstance(TCP(), TransportComponent)  # True
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from config_normalizer.tree.nodes import Accessor, AccessorResult

__all__ = ["ConfigModel", "ConfigurationSource", "Encoding", "TransportComponent"]


@runtime_checkable
class ConfigModel(Protocol):
    """Capability check and introspection for configuration-model values.

    The model decides which values are configuration nodes, lists their
    zero-argument accessors in a stable order, and reads one accessor at a
    time.  ``read`` must not raise: failures are reported through
    ``AccessorResult.error``.
    """

    def is_configuration(self, value: Any) -> bool: ...

    def accessors(self, value: Any) -> Sequence[Accessor]: ...

    def read(self, value: Any, accessor: Accessor) -> AccessorResult: ...


@runtime_checkable
class TransportComponent(Protocol):
    """One named component of a transport protocol stack."""

    name: str


@runtime_checkable
class ConfigurationSource(Protocol):
    """Supplies the roots that make up one manager's effective configuration."""

    def global_configuration(self) -> Any: ...

    def default_configuration(self) -> Any: ...

    def named_configurations(self) -> Mapping[str, Any]: ...

    def transport_stack(self) -> Iterable[Any] | None: ...


@runtime_checkable
class Encoding(Protocol):
    """A deterministic byte encoding of a flattened mapping."""

    name: str

    def encode(self, mapping: Mapping[str, str]) -> bytes: ...

    def decode(self, data: bytes) -> dict[str, str]: ...
