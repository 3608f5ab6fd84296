"""Infect - a message-driven reactor core.

Intents and effects flow through a bounded channel into a single consume
loop that mutates a model, spawns concurrent tasks and renders observers
whose feedback re-enters the channel.
"""

from infect.core import (
    Accepted,
    ApplyEffect,
    DirtyFields,
    EffectApplied,
    EffectMessage,
    IntentMessage,
    IntentRejected,
    MessageReceiver,
    MessageSender,
    Model,
    ModelChanged,
    NoProgress,
    NullRenderer,
    Progressing,
    Reactor,
    Rejected,
    Renderer,
    RenderHint,
    SpawnTask,
    StoppedClosed,
    StoppedIdle,
    StoppedRejected,
    TaskContext,
    TaskExecutor,
    ThreadPoolTaskExecutor,
    consume_messages,
    enqueue_effect,
    enqueue_intent,
    message_channel,
    process_message,
    run_consume_loop,
)
from infect.foundation.config import ReactorConfig
from infect.foundation.errors import ErrorCode, InfectError

__version__ = "0.1.0"

__all__ = [
    "Accepted",
    "ApplyEffect",
    "DirtyFields",
    "EffectApplied",
    "EffectMessage",
    "IntentMessage",
    "IntentRejected",
    "MessageReceiver",
    "MessageSender",
    "Model",
    "ModelChanged",
    "NoProgress",
    "NullRenderer",
    "Progressing",
    "Reactor",
    "Rejected",
    "Renderer",
    "RenderHint",
    "SpawnTask",
    "StoppedClosed",
    "StoppedIdle",
    "StoppedRejected",
    "TaskContext",
    "TaskExecutor",
    "ThreadPoolTaskExecutor",
    "consume_messages",
    "enqueue_effect",
    "enqueue_intent",
    "message_channel",
    "process_message",
    "run_consume_loop",
    # Config / errors
    "ReactorConfig",
    "ErrorCode",
    "InfectError",
]
