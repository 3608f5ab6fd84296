"""Outcome of applying an effect to the model."""

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

from infect.core.action import ApplyEffect, SpawnTask
from infect.core.hint import ModelChanged, RenderHint


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True, slots=True)
class EffectApplied:
    """Result of mutating the model with one effect.

    Attributes:
        task: Follow-up task for triggering side-effects, or None.
        render_hint: Whether and what to render after the mutation. None is
            neutral and never triggers a render on its own.
        next_effect: Effect that is applied before any message still
            queued in the channel. Allows deferring received effects while
            a side-effect is pending and replaying them one after another
            once it finished.
    """

    task: Any = None
    render_hint: RenderHint | None = None
    next_effect: Any = None

    @classmethod
    def unchanged(cls, task: Any = None) -> "EffectApplied":
        """Mark the model as unchanged, optionally with a follow-up task."""
        return cls(task=task, render_hint=ModelChanged.UNCHANGED)

    @classmethod
    def unchanged_done(cls) -> "EffectApplied":
        return cls(render_hint=ModelChanged.UNCHANGED)

    @classmethod
    def maybe_changed(cls, task: Any = None) -> "EffectApplied":
        """Mark the model as maybe changed, optionally with a follow-up task."""
        return cls(task=task, render_hint=ModelChanged.MAYBE_CHANGED)

    @classmethod
    def maybe_changed_done(cls) -> "EffectApplied":
        return cls(render_hint=ModelChanged.MAYBE_CHANGED)

    @classmethod
    def from_action(
        cls,
        action: ApplyEffect | SpawnTask | None,
        render_hint: RenderHint | None = None,
    ) -> "EffectApplied":
        """Normalize an action into an outcome.

        ApplyEffect becomes the next effect, SpawnTask becomes the task.
        """
        match action:
            case None:
                return cls(render_hint=render_hint)
            case ApplyEffect(effect):
                return cls(render_hint=render_hint, next_effect=effect)
            case SpawnTask(task):
                return cls(task=task, render_hint=render_hint)
        raise TypeError(f"Not an action: {action!r}")

    def then(self, next_effect: Any) -> "EffectApplied":
        """Return a copy that continues with next_effect."""
        return replace(self, next_effect=next_effect)

    def map(
        self,
        *,
        effect: Callable[[Any], Any] = _identity,
        task: Callable[[Any], Any] = _identity,
        render_hint: Callable[[RenderHint], RenderHint] = _identity,
    ) -> "EffectApplied":
        """Convert payloads, e.g. when embedding a sub-model in a parent model.

        Converters are only called for present values.
        """
        return EffectApplied(
            task=None if self.task is None else task(self.task),
            render_hint=None if self.render_hint is None else render_hint(self.render_hint),
            next_effect=None if self.next_effect is None else effect(self.next_effect),
        )
