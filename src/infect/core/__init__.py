"""Reactor core: messages, model contracts, processing and the consume loop."""

from infect.core.action import Action, ApplyEffect, SpawnTask
from infect.core.effect import EffectApplied
from infect.core.hint import (
    DirtyFields,
    ModelChanged,
    RenderHint,
    add_hints,
    combine_hints,
    should_render,
)
from infect.core.intent import Accepted, IntentHandled, Rejected
from infect.core.message import (
    EffectMessage,
    IntentMessage,
    Message,
    effect_message,
    intent_message,
)
from infect.core.messaging import (
    MessageReceiver,
    MessageSender,
    RecvStatus,
    SendStatus,
    enqueue_effect,
    enqueue_intent,
    enqueue_message,
    message_channel,
)
from infect.core.model import Model, NullRenderer, Renderer
from infect.core.processing import (
    IntentRejected,
    MessageProcessed,
    MessagesConsumed,
    NoProgress,
    Progressing,
    StoppedClosed,
    StoppedIdle,
    StoppedRejected,
    consume_messages,
    process_message,
    run_consume_loop,
)
from infect.core.reactor import Reactor
from infect.core.task import TaskContext, TaskExecutor, ThreadPoolTaskExecutor

__all__ = [
    # Data model
    "Action",
    "ApplyEffect",
    "SpawnTask",
    "EffectApplied",
    "Accepted",
    "Rejected",
    "IntentHandled",
    "Message",
    "IntentMessage",
    "EffectMessage",
    "intent_message",
    "effect_message",
    # Render hints
    "RenderHint",
    "ModelChanged",
    "DirtyFields",
    "add_hints",
    "combine_hints",
    "should_render",
    # Channel
    "MessageSender",
    "MessageReceiver",
    "SendStatus",
    "RecvStatus",
    "message_channel",
    "enqueue_message",
    "enqueue_intent",
    "enqueue_effect",
    # Contracts
    "Model",
    "Renderer",
    "NullRenderer",
    "TaskContext",
    "TaskExecutor",
    "ThreadPoolTaskExecutor",
    # Processing
    "MessageProcessed",
    "IntentRejected",
    "Progressing",
    "NoProgress",
    "process_message",
    "MessagesConsumed",
    "StoppedRejected",
    "StoppedClosed",
    "StoppedIdle",
    "consume_messages",
    "run_consume_loop",
    "Reactor",
]
