"""Render hints: accumulative signals deciding whether to render.

A render hint type needs two properties:

1. A neutral value that evaluates to "do not render". None is accepted
   as the neutral value of every hint type.
2. A combining ``+`` that is associative and commutative, where combining
   any non-neutral value with anything yields a value that renders.

ModelChanged is the minimal two-state flag. DirtyFields tracks which
parts of a model may have changed, for renderers that update selectively.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Self, runtime_checkable


@runtime_checkable
class RenderHint(Protocol):
    """Protocol for render hint types."""

    def __add__(self, other: Self) -> Self: ...

    def should_render(self) -> bool: ...


class ModelChanged(Enum):
    """Perceptible effect when updating the model."""

    UNCHANGED = "unchanged"
    """The model has not changed."""

    MAYBE_CHANGED = "maybe_changed"
    """The model might have changed.

    False positives are allowed: when unsure, or when determining an
    actual change is costly or impossible, use this variant.
    """

    def __add__(self, other: "ModelChanged") -> "ModelChanged":
        if not isinstance(other, ModelChanged):
            return NotImplemented
        if self is ModelChanged.UNCHANGED and other is ModelChanged.UNCHANGED:
            return ModelChanged.UNCHANGED
        return ModelChanged.MAYBE_CHANGED

    def should_render(self) -> bool:
        return self is ModelChanged.MAYBE_CHANGED


@dataclass(frozen=True, slots=True)
class DirtyFields:
    """Set of model fields that might have changed.

    The empty set is neutral. Combining takes the union.
    """

    fields: frozenset[str] = frozenset()

    @classmethod
    def of(cls, *names: str) -> "DirtyFields":
        return cls(frozenset(names))

    @classmethod
    def clean(cls) -> "DirtyFields":
        return cls()

    def __add__(self, other: "DirtyFields") -> "DirtyFields":
        if not isinstance(other, DirtyFields):
            return NotImplemented
        return DirtyFields(self.fields | other.fields)

    def __contains__(self, name: str) -> bool:
        return name in self.fields

    def should_render(self) -> bool:
        return bool(self.fields)


def add_hints(left: RenderHint | None, right: RenderHint | None) -> RenderHint | None:
    """Combine two hints. None is neutral for every hint type."""
    if left is None:
        return right
    if right is None:
        return left
    return left + right


def combine_hints(hints: Iterable[RenderHint | None]) -> RenderHint | None:
    """Combine hints left to right. Returns None for an empty iterable."""
    total: RenderHint | None = None
    for hint in hints:
        total = add_hints(total, hint)
    return total


def should_render(hint: RenderHint | None) -> bool:
    return hint is not None and hint.should_render()
