"""NormalizationResult dataclass returned by ConfigNormalizer calls."""

from __future__ import annotations

from dataclasses import dataclass

from config_normalizer.tree.nodes import SkippedAccessor

__all__ = ["NormalizationResult"]


@dataclass(frozen=True, slots=True)
class NormalizationResult:
    """Flattened properties plus the accessors that were left out.

    Attributes:
        properties: Flat ``path -> text`` mapping.  Keys are unique; iteration
            order carries no meaning.
        skipped: Accessors whose read raised, in traversal order.  Their paths
            are absent from ``properties``.
    """

    properties: dict[str, str]
    skipped: tuple[SkippedAccessor, ...] = ()

    @property
    def skipped_paths(self) -> list[str]:
        return [record.path for record in self.skipped]

    def __len__(self) -> int:
        return len(self.properties)
