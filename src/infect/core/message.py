"""Messages flowing through the channel.

A message is either an intent or an effect. Both payload types are
defined by the model; the core never inspects them. ``None`` is not a
valid payload because it marks absence throughout the core.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class IntentMessage:
    """A proposed change that the model may reject."""

    intent: Any


@dataclass(frozen=True, slots=True)
class EffectMessage:
    """An unconditional model mutation."""

    effect: Any


type Message = IntentMessage | EffectMessage
"""Tagged union of intent and effect messages."""


def intent_message(intent: Any) -> IntentMessage:
    if intent is None:
        raise ValueError("intent must not be None")
    return IntentMessage(intent)


def effect_message(effect: Any) -> EffectMessage:
    if effect is None:
        raise ValueError("effect must not be None")
    return EffectMessage(effect)
