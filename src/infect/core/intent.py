"""Outcome of handling an intent."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from infect.core.action import ApplyEffect, SpawnTask
from infect.core.effect import EffectApplied, _identity
from infect.core.hint import RenderHint


@dataclass(frozen=True, slots=True)
class Rejected:
    """The intent has been rejected. The model stays untouched."""

    reason: Any

    def map(self, *, reason: Callable[[Any], Any] = _identity, **_: Any) -> "Rejected":
        return Rejected(reason(self.reason))


@dataclass(frozen=True, slots=True)
class Accepted:
    """The intent has been accepted and continues with the given outcome."""

    effect_applied: EffectApplied = EffectApplied()

    @classmethod
    def no_effect(cls) -> "Accepted":
        """Accept without any changes."""
        return cls()

    @classmethod
    def apply_effect(cls, effect: Any) -> "Accepted":
        """Accept and apply an effect immediately."""
        return cls(EffectApplied(next_effect=effect))

    @classmethod
    def spawn_task(cls, task: Any) -> "Accepted":
        """Accept and induce side-effects by spawning a task."""
        return cls(EffectApplied(task=task))

    @classmethod
    def from_action(cls, action: ApplyEffect | SpawnTask | None) -> "Accepted":
        return cls(EffectApplied.from_action(action))

    def map(
        self,
        *,
        effect: Callable[[Any], Any] = _identity,
        task: Callable[[Any], Any] = _identity,
        render_hint: Callable[[RenderHint], RenderHint] = _identity,
        **_: Any,
    ) -> "Accepted":
        return Accepted(
            self.effect_applied.map(effect=effect, task=task, render_hint=render_hint)
        )


type IntentHandled = Rejected | Accepted
"""Either Rejected(reason) or Accepted(effect_applied)."""
