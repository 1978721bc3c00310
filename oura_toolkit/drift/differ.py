"""Signature differ for comparing stored fixtures with live API responses.

Compares two type signatures and reports:
- Fields present in the live response but not in the fixture
- Fields present in the fixture but missing from the live response
- Fields whose type changed

A ``null`` on either side is treated as compatible with any type.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .signature import TypeSignature, TypeTag, extract


class DiffKind(Enum):
    """Kinds of structural differences."""

    ADDED = "added"  # Path in actual but not fixture
    REMOVED = "removed"  # Path in fixture but not actual
    TYPE_CHANGED = "type_changed"  # Path in both, different non-null tags


@dataclass(frozen=True)
class FieldDiff:
    """A single structural difference."""

    path: str
    kind: DiffKind
    fixture_type: TypeTag | None = None
    actual_type: TypeTag | None = None

    def to_line(self) -> str:
        """Render as a single human-readable line."""
        if self.kind is DiffKind.ADDED:
            return f"+ {self.path}: {self.actual_type.value} (new field in API)"
        if self.kind is DiffKind.REMOVED:
            return f"- {self.path}: {self.fixture_type.value} (missing in API response)"
        return f"~ {self.path}: fixture={self.fixture_type.value}, actual={self.actual_type.value}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "path": self.path,
            "kind": self.kind.value,
            "fixture": self.fixture_type.value if self.fixture_type else None,
            "actual": self.actual_type.value if self.actual_type else None,
        }


@dataclass(frozen=True)
class StructuralDiff:
    """Ordered differences between a fixture and an actual signature.

    Additions and type changes come first (in actual-signature order),
    followed by removals (in fixture-signature order).
    """

    diffs: tuple[FieldDiff, ...] = field(default_factory=tuple)

    @property
    def matches(self) -> bool:
        """True when the two signatures are structurally equivalent."""
        return not self.diffs

    @property
    def additions(self) -> list[FieldDiff]:
        return [d for d in self.diffs if d.kind is DiffKind.ADDED]

    @property
    def removals(self) -> list[FieldDiff]:
        return [d for d in self.diffs if d.kind is DiffKind.REMOVED]

    @property
    def type_changes(self) -> list[FieldDiff]:
        return [d for d in self.diffs if d.kind is DiffKind.TYPE_CHANGED]

    def lines(self) -> list[str]:
        """Render every difference as a human-readable line."""
        return [d.to_line() for d in self.diffs]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "matches": self.matches,
            "added": len(self.additions),
            "removed": len(self.removals),
            "type_changed": len(self.type_changes),
            "diffs": [d.to_dict() for d in self.diffs],
        }

    def __len__(self) -> int:
        return len(self.diffs)

    def __iter__(self) -> Iterator[FieldDiff]:
        return iter(self.diffs)


def diff(fixture: TypeSignature, actual: TypeSignature) -> StructuralDiff:
    """Compare a fixture signature with an actual signature.

    Args:
        fixture: Signature of the stored fixture
        actual: Signature of the live response

    Returns:
        StructuralDiff, empty when the structures match
    """
    diffs: list[FieldDiff] = []

    for path, actual_type in actual.items():
        fixture_type = fixture.get(path)
        if fixture_type is None:
            diffs.append(FieldDiff(path=path, kind=DiffKind.ADDED, actual_type=actual_type))
        elif (
            fixture_type is not actual_type
            and TypeTag.NULL not in (fixture_type, actual_type)
        ):
            diffs.append(
                FieldDiff(
                    path=path,
                    kind=DiffKind.TYPE_CHANGED,
                    fixture_type=fixture_type,
                    actual_type=actual_type,
                ),
            )

    for path, fixture_type in fixture.items():
        if path not in actual:
            diffs.append(FieldDiff(path=path, kind=DiffKind.REMOVED, fixture_type=fixture_type))

    return StructuralDiff(diffs=tuple(diffs))


def compare_structures(fixture: Any, actual: Any) -> StructuralDiff:
    """Extract signatures from two JSON documents and diff them."""
    return diff(extract(fixture), extract(actual))
