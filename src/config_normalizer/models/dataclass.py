"""DataclassModel: every dataclass instance is a configuration node.

This is the default model of the public API.  Dataclass fields come first,
followed by properties and any public attributes set outside ``__init__``.
"""

from __future__ import annotations

import dataclasses

from config_normalizer.models.base import IntrospectingModel

__all__ = ["DataclassModel"]


class DataclassModel(IntrospectingModel):
    """Configuration model that recurses into dataclass instances."""

    def __repr__(self) -> str:
        return "DataclassModel()"

    def _is_model_type(self, cls: type) -> bool:
        return dataclasses.is_dataclass(cls)
