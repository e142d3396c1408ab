"""Key-by-key comparison of two flattened mappings.

Comparing two normalized snapshots of the same manager is the main reason to
produce them at all, e.g. before and after an upgrade::

    from config_normalizer import diff_properties, loads

    before = loads(old_bytes, "standard")
    after = loads(new_bytes, "standard")
    print(diff_properties(before, after).summary())
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

__all__ = ["PropertiesDiff", "diff_properties"]


@dataclass(frozen=True, slots=True)
class PropertiesDiff:
    """Differences between a left and a right mapping.

    Attributes:
        added:   Keys only in the right mapping, with their right values.
        removed: Keys only in the left mapping, with their left values.
        changed: Keys in both with different values, as ``(left, right)``.

    All three are ordered by key.
    """

    added: dict[str, str]
    removed: dict[str, str]
    changed: dict[str, tuple[str, str]]

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.changed)

    def summary(self) -> str:
        """Return a human-readable, line-per-key description of the diff."""
        if self.is_empty:
            return "no differences"
        lines = [
            f"{len(self.added)} added, {len(self.removed)} removed, "
            f"{len(self.changed)} changed"
        ]
        lines.extend(f"  + {key}={value}" for key, value in self.added.items())
        lines.extend(f"  - {key}={value}" for key, value in self.removed.items())
        lines.extend(
            f"  ~ {key}: {left} -> {right}"
            for key, (left, right) in self.changed.items()
        )
        return "\n".join(lines)


def diff_properties(
    left: Mapping[str, str],
    right: Mapping[str, str],
) -> PropertiesDiff:
    """Compare two flattened mappings key by key."""
    added = {key: right[key] for key in sorted(right.keys() - left.keys())}
    removed = {key: left[key] for key in sorted(left.keys() - right.keys())}
    changed = {
        key: (left[key], right[key])
        for key in sorted(left.keys() & right.keys())
        if left[key] != right[key]
    }
    return PropertiesDiff(added=added, removed=removed, changed=changed)
