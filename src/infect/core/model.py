"""Contracts for the state container and its observer.

The consume loop owns the model exclusively while it runs. Models
therefore need no internal locking.
"""

from typing import Any, Protocol, runtime_checkable

from infect.core.effect import EffectApplied
from infect.core.hint import RenderHint
from infect.core.intent import IntentHandled


@runtime_checkable
class Model(Protocol):
    """A stateful model driven by intents and effects."""

    def handle_intent(self, intent: Any) -> IntentHandled:
        """Decide whether an intent is admissible.

        Must not mutate the model and must not perform the work of the
        effect it leads to. It only gates legality.
        """
        ...

    def apply_effect(self, effect: Any) -> EffectApplied:
        """Mutate the model.

        The only operation allowed to mutate. The outcome must depend on
        nothing but the current state and the effect payload (no clocks,
        randomness or hidden external state).
        """
        ...


@runtime_checkable
class Renderer(Protocol):
    """Observes the model after it might have changed."""

    def render(self, model: Any, hint: RenderHint) -> Any | None:
        """Render the model.

        Might return an observed intent. It is enqueued as an ordinary
        message and handled later, never within the current turn.
        """
        ...


class NullRenderer:
    """Renderer that never observes anything."""

    def render(self, model: Any, hint: RenderHint) -> None:
        return None
