"""Built-in demo model for showcasing the reactor."""

from infect.demo.counter import (
    Counter,
    CounterRenderer,
    CounterSnapshot,
    DelayedIncrement,
    DelayedIncrementFailed,
    DelayedIncrementFinished,
    DelayedIncrementRequested,
    Increment,
    Incremented,
    IncrementLater,
    Reset,
    ResetDone,
    counter_failure_effect,
    run_counter_task,
)

__all__ = [
    "Counter",
    "CounterRenderer",
    "CounterSnapshot",
    "DelayedIncrement",
    "DelayedIncrementFailed",
    "DelayedIncrementFinished",
    "DelayedIncrementRequested",
    "Increment",
    "Incremented",
    "IncrementLater",
    "Reset",
    "ResetDone",
    "counter_failure_effect",
    "run_counter_task",
]
