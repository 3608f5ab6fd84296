"""Next step after accepting an intent."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ApplyEffect:
    """Apply an effect immediately, ahead of all queued messages."""

    effect: Any


@dataclass(frozen=True, slots=True)
class SpawnTask:
    """Trigger side-effects by spawning a task."""

    task: Any


type Action = ApplyEffect | SpawnTask
