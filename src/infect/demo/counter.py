"""Demo counter model.

A small model exercising every path through the reactor:

- Intents are gated (non-positive steps and the limit are rejected).
- Delayed increments run as tasks on the task executor.
- Increments that arrive while a delayed increment is pending are
  deferred and replayed as a chain of next effects once it finished.
- A renderer records snapshots and may request follow-up increments.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from infect.core import (
    Accepted,
    DirtyFields,
    EffectApplied,
    IntentHandled,
    Rejected,
    TaskContext,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Intents
# =============================================================================


@dataclass(frozen=True, slots=True)
class Increment:
    step: int = 1


@dataclass(frozen=True, slots=True)
class IncrementLater:
    step: int = 1
    delay: float = 0.0
    fail: bool = False
    """Make the task raise, for exercising failure effects."""


@dataclass(frozen=True, slots=True)
class Reset:
    pass


type CounterIntent = Increment | IncrementLater | Reset


# =============================================================================
# Effects
# =============================================================================


@dataclass(frozen=True, slots=True)
class Incremented:
    step: int


@dataclass(frozen=True, slots=True)
class DelayedIncrementRequested:
    step: int
    delay: float
    fail: bool = False


@dataclass(frozen=True, slots=True)
class DelayedIncrementFinished:
    step: int


@dataclass(frozen=True, slots=True)
class DelayedIncrementFailed:
    error: str


@dataclass(frozen=True, slots=True)
class ResetDone:
    pass


type CounterEffect = (
    Incremented
    | DelayedIncrementRequested
    | DelayedIncrementFinished
    | DelayedIncrementFailed
    | ResetDone
)


# =============================================================================
# Tasks
# =============================================================================


@dataclass(frozen=True, slots=True)
class DelayedIncrement:
    step: int
    delay: float
    fail: bool = False


def run_counter_task(context: TaskContext, task: DelayedIncrement) -> None:
    """Task runner for ThreadPoolTaskExecutor."""
    if task.delay > 0:
        time.sleep(task.delay)
    if task.fail:
        raise RuntimeError(f"delayed increment by {task.step} failed")
    context.submit_effect(DelayedIncrementFinished(task.step))


def counter_failure_effect(task: DelayedIncrement, error: Exception) -> DelayedIncrementFailed:
    return DelayedIncrementFailed(str(error))


# =============================================================================
# Model
# =============================================================================


@dataclass
class Counter:
    """Counter with an optional upper limit."""

    value: int = 0
    limit: int | None = None
    pending: bool = False
    """Whether a delayed increment is in flight."""

    pending_step: int = 0
    """Step of the delayed increment in flight, 0 if none."""

    deferred: list[CounterEffect] = field(default_factory=list)
    """Effects received while pending, replayed in order afterwards."""

    last_error: str | None = None
    applied: int = 0
    """Number of effects applied, for diagnostics."""

    @property
    def projected_value(self) -> int:
        """Value once the pending and all deferred increments are applied."""
        deferred_steps = sum(e.step for e in self.deferred if isinstance(e, Incremented))
        return self.value + self.pending_step + deferred_steps

    def handle_intent(self, intent: CounterIntent) -> IntentHandled:
        match intent:
            case Increment(step) | IncrementLater(step) if step <= 0:
                return Rejected(f"step must be positive, got {step}")
            case Increment(step) | IncrementLater(step) if self._exceeds_limit(step):
                return Rejected(f"limit {self.limit} exceeded")
            case Increment(step):
                return Accepted.apply_effect(Incremented(step))
            case IncrementLater(step, delay, fail):
                if self.pending:
                    return Rejected("a delayed increment is already pending")
                return Accepted.apply_effect(DelayedIncrementRequested(step, delay, fail))
            case Reset():
                if self.pending:
                    return Rejected("cannot reset while a delayed increment is pending")
                return Accepted.apply_effect(ResetDone())
        return Rejected(f"unknown intent {intent!r}")

    def _exceeds_limit(self, step: int) -> bool:
        return self.limit is not None and self.projected_value + step > self.limit

    def apply_effect(self, effect: CounterEffect) -> EffectApplied:
        self.applied += 1
        match effect:
            case Incremented(step):
                if self.pending:
                    self.deferred.append(effect)
                    return EffectApplied(render_hint=DirtyFields.clean())
                self.value += step
                return self._replay(DirtyFields.of("value"))
            case DelayedIncrementRequested(step, delay, fail):
                self.pending = True
                self.pending_step = step
                return EffectApplied(
                    task=DelayedIncrement(step, delay, fail),
                    render_hint=DirtyFields.of("pending"),
                )
            case DelayedIncrementFinished(step):
                self.pending = False
                self.pending_step = 0
                self.value += step
                return self._replay(DirtyFields.of("value", "pending"))
            case DelayedIncrementFailed(error):
                self.pending = False
                self.pending_step = 0
                self.last_error = error
                return self._replay(DirtyFields.of("pending", "last_error"))
            case ResetDone():
                self.value = 0
                self.last_error = None
                return EffectApplied(render_hint=DirtyFields.of("value", "last_error"))
        raise TypeError(f"unknown effect {effect!r}")

    def _replay(self, render_hint: DirtyFields) -> EffectApplied:
        """Continue with the oldest deferred effect, if any."""
        next_effect = self.deferred.pop(0) if self.deferred else None
        return EffectApplied(render_hint=render_hint, next_effect=next_effect)


# =============================================================================
# Renderer
# =============================================================================


@dataclass(frozen=True, slots=True)
class CounterSnapshot:
    value: int
    pending: bool
    last_error: str | None
    changed: frozenset[str]


@dataclass
class CounterRenderer:
    """Records snapshots and keeps incrementing until a target is reached.

    Args:
        target: Submit Increment(1) after each render while value < target.
        on_render: Optional callback receiving each snapshot.
    """

    target: int | None = None
    on_render: Callable[[CounterSnapshot], None] | None = None
    snapshots: list[CounterSnapshot] = field(default_factory=list)

    def render(self, model: Counter, hint: DirtyFields) -> Increment | None:
        snapshot = CounterSnapshot(
            value=model.value,
            pending=model.pending,
            last_error=model.last_error,
            changed=hint.fields,
        )
        self.snapshots.append(snapshot)
        logger.debug("Rendered %r", snapshot)
        if self.on_render is not None:
            self.on_render(snapshot)
        if self.target is not None and not model.pending and model.value < self.target:
            return Increment(1)
        return None
