"""TaggedFieldExtractor: flattens transport components via explicitly tagged fields.

Transport protocol components are not walked structurally.  Only fields
explicitly tagged as configurable are read, and each one is a leaf whatever
its type.  A field is tagged in one of two ways:

- dataclass field created with ``configurable()``::

      @dataclass
      class TCP:
          name: str = "TCP"
          recv_buf_size: int = configurable(default=150_000)

- ``Annotated`` annotation carrying a ``Configurable`` marker::

      class UDP:
          mcast_port: Annotated[int, Configurable()]

Values are read from the instance directly, bypassing properties and
``__getattr__``: instance values come from ``vars()`` or slots, and class
values are looked up with ``inspect.getattr_static``, so a property is never
invoked and reads as ``None``.  A declared field that was never assigned also
reads as ``None``; both are emitted as ``"null"``.  Each tagged field becomes
``<prefix>.<component name>.<field name>``.
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
import logging
import types
from collections.abc import Iterable, MutableMapping
from typing import Annotated, Any, get_origin

from config_normalizer.tree.flattener import render_leaf
from config_normalizer.tree.path import extend, normalize_prefix

__all__ = [
    "CONFIGURABLE_KEY",
    "Configurable",
    "TaggedFieldExtractor",
    "component_name",
    "configurable",
]

logger = logging.getLogger(__name__)

CONFIGURABLE_KEY = "config_normalizer.configurable"


@dataclasses.dataclass(frozen=True, slots=True)
class Configurable:
    """Marker tagging a field as externally configurable."""

    description: str = ""


def configurable(*, description: str = "", **field_kwargs: Any) -> Any:
    """Return a ``dataclasses.field`` tagged as configurable.

    Accepts every keyword ``dataclasses.field`` accepts; any ``metadata``
    passed in is preserved alongside the tag.
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[CONFIGURABLE_KEY] = Configurable(description)
    return dataclasses.field(metadata=metadata, **field_kwargs)


def _is_tagged_annotation(annotation: Any) -> bool:
    if get_origin(annotation) is not Annotated:
        return False
    return any(
        isinstance(meta, Configurable) or meta is Configurable
        for meta in annotation.__metadata__
    )


def _own_annotations(klass: type) -> dict[str, Any]:
    try:
        return inspect.get_annotations(klass, eval_str=True)
    except (NameError, SyntaxError, TypeError, AttributeError):
        # names imported only under TYPE_CHECKING cannot be evaluated
        return inspect.get_annotations(klass)


def _read_raw(component: Any, name: str) -> Any:
    try:
        attributes = vars(component)
    except TypeError:
        attributes = None
    if attributes is not None and name in attributes:
        return attributes[name]
    value = inspect.getattr_static(component, name, None)
    if isinstance(value, types.MemberDescriptorType):
        # __slots__ storage
        try:
            return value.__get__(component, type(component))
        except AttributeError:
            return None
    if isinstance(value, (property, functools.cached_property)):
        return None
    return value


def component_name(component: Any) -> str:
    """Return the component's ``name``, falling back to its class name."""
    name = _read_raw(component, "name")
    if isinstance(name, str) and name:
        return name
    return type(component).__name__


class TaggedFieldExtractor:
    """Reads configurable-tagged fields from transport components.

    Args:
        include_inherited: Also collect tagged fields declared on base classes,
            walking the MRO base-first.  By default only the component's own
            class is inspected.
    """

    def __init__(self, *, include_inherited: bool = False) -> None:
        self._include_inherited = include_inherited

    def tagged_fields(self, component_type: type) -> tuple[str, ...]:
        """Return the tagged field names of ``component_type`` in declaration order."""
        if self._include_inherited:
            classes = [k for k in reversed(component_type.__mro__) if k is not object]
        else:
            classes = [component_type]

        dc_fields = (
            {f.name: f for f in dataclasses.fields(component_type)}
            if dataclasses.is_dataclass(component_type)
            else {}
        )

        names: dict[str, None] = {}
        for klass in classes:
            for name, annotation in _own_annotations(klass).items():
                dc_field = dc_fields.get(name)
                if (dc_field is not None and CONFIGURABLE_KEY in dc_field.metadata) or (
                    _is_tagged_annotation(annotation)
                ):
                    names.setdefault(name, None)
        return tuple(names)

    def extract(
        self,
        component: Any,
        prefix: str | None,
        mapping: MutableMapping[str, str],
    ) -> None:
        """Insert ``prefix.<component>.<field> -> text`` for every tagged field."""
        base = extend(normalize_prefix(prefix), component_name(component))
        for field_name in self.tagged_fields(type(component)):
            key = extend(base, field_name)
            if key in mapping:
                logger.warning("Overwriting duplicate transport property %s", key)
            mapping[key] = render_leaf(_read_raw(component, field_name))

    def extract_stack(
        self,
        components: Iterable[Any],
        prefix: str | None,
        mapping: MutableMapping[str, str],
    ) -> None:
        """Extract every component of a protocol stack, in stack order."""
        for component in components:
            self.extract(component, prefix, mapping)
