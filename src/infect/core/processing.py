"""Message processor and consume loop.

The consume loop is the single consumer of the message channel and the
exclusive owner of the model. It suspends only while waiting for the next
message; processing one message, including its whole chain of next
effects, runs synchronously to completion. That makes every physical
message atomic with respect to all other queued messages.

Outcomes are returned as values. Rejections, closure and idleness are
control flow, not errors.
"""

import logging
from dataclasses import dataclass
from typing import Any

from infect.core.effect import EffectApplied
from infect.core.hint import add_hints, should_render
from infect.core.intent import Accepted, Rejected
from infect.core.message import EffectMessage, IntentMessage, Message
from infect.core.messaging import MessageReceiver, RecvStatus
from infect.core.model import Model, Renderer
from infect.core.task import TaskContext, TaskExecutor

logger = logging.getLogger(__name__)


# =============================================================================
# Outcome of processing a single message
# =============================================================================


@dataclass(frozen=True, slots=True)
class IntentRejected:
    """The message carried an intent that has been rejected."""

    reason: Any


@dataclass(frozen=True, slots=True)
class Progressing:
    """A task has been spawned or an observed intent has been enqueued."""


@dataclass(frozen=True, slots=True)
class NoProgress:
    """Neither task nor message has been produced.

    The model may still have been mutated. Progress only counts activity
    that can lead to further messages.
    """


type MessageProcessed = IntentRejected | Progressing | NoProgress


def process_message(
    context: TaskContext,
    model: Model,
    renderer: Renderer,
    message: Message,
) -> MessageProcessed:
    """Process a single message.

    1. An intent is gated by ``handle_intent``; a rejection ends processing
       without mutation, task or render. An effect is applied directly.
    2. Render hints of all applied effects are accumulated.
    3. Every returned task is spawned.
    4. A returned next effect is applied right away, ahead of all queued
       messages, until the chain ends.
    5. If the accumulated hint says so, the model is rendered and an
       observed intent is enqueued.

    Args:
        context: Task context used for spawning and enqueueing.
        model: The model, exclusively owned by the caller.
        renderer: Observer invoked after changes.
        message: The message to process.

    Returns:
        IntentRejected, Progressing or NoProgress.
    """
    applied: EffectApplied
    match message:
        case IntentMessage(intent):
            match model.handle_intent(intent):
                case Rejected(reason):
                    logger.debug("Intent rejected: %r (%r)", intent, reason)
                    return IntentRejected(reason)
                case Accepted(effect_applied):
                    applied = effect_applied
                case other:
                    raise TypeError(f"handle_intent returned {other!r}, expected Rejected or Accepted")
        case EffectMessage(effect):
            applied = _apply(model, effect, 1)
        case _:
            raise TypeError(f"Not a message: {message!r}")

    render_hint = applied.render_hint
    effect_count = 0 if isinstance(message, IntentMessage) else 1
    progressing = False
    while True:
        if applied.task is not None:
            context.spawn_task(applied.task)
            progressing = True
        if applied.next_effect is None:
            break
        effect_count += 1
        applied = _apply(model, applied.next_effect, effect_count)
        render_hint = add_hints(render_hint, applied.render_hint)

    if should_render(render_hint):
        logger.debug("Rendering model after %d effect(s): %r", effect_count, render_hint)
        observed_intent = renderer.render(model, render_hint)
        if observed_intent is not None:
            logger.debug("Observed intent after rendering model: %r", observed_intent)
            # Enqueued like any other message, not processed during this turn
            context.submit_intent(observed_intent)
            progressing = True

    return Progressing() if progressing else NoProgress()


def _apply(model: Model, effect: Any, effect_count: int) -> EffectApplied:
    logger.debug("Applying effect #%d: %r", effect_count, effect)
    return model.apply_effect(effect)


# =============================================================================
# Outcome of consuming messages
# =============================================================================


@dataclass(frozen=True, slots=True)
class StoppedRejected:
    """The last message carried an intent that has been rejected."""

    reason: Any


@dataclass(frozen=True, slots=True)
class StoppedClosed:
    """The message channel is closed and drained."""


@dataclass(frozen=True, slots=True)
class StoppedIdle:
    """No progress, no next message ready, and no task outstanding."""


type MessagesConsumed = StoppedRejected | StoppedClosed | StoppedIdle


def consume_messages(
    receiver: MessageReceiver,
    context: TaskContext,
    model: Model,
    renderer: Renderer,
    *,
    first_message: Message | None = None,
    idle_poll_interval: float | None = None,
) -> MessagesConsumed:
    """Receive and process messages until a stop condition is reached.

    After a message made progress the loop waits for the next one. After
    a message made no progress it only takes a message that is ready; if
    none is, it stops when all tasks finished and otherwise waits for a
    still running task to submit one.

    Args:
        receiver: The channel's only receiver.
        context: Task context shared with all spawned tasks.
        model: The model, owned by this loop until it returns.
        renderer: Observer invoked after changes.
        first_message: Process this before taking anything from the channel.
        idle_poll_interval: While waiting on outstanding tasks, re-check
            them this often. None waits for the next message, which may
            not come if an executor reports a task as outstanding after
            its last message was processed.

    Returns:
        The terminal state: StoppedRejected, StoppedClosed or StoppedIdle.
    """
    next_message = first_message
    while True:
        if next_message is None:
            next_message = receiver.recv()
            if next_message is None:
                logger.debug("Stopping after message channel closed")
                return StoppedClosed()

        message, next_message = next_message, None
        logger.debug("Processing next message: %r", message)
        match process_message(context, model, renderer, message):
            case IntentRejected(reason):
                logger.debug("Stopping after intent rejected: %r", reason)
                return StoppedRejected(reason)
            case Progressing():
                continue
            case NoProgress():
                pass

        match receiver.try_recv():
            case RecvStatus.CLOSED:
                logger.debug("Stopping after no progress made and message channel closed")
                return StoppedClosed()
            case RecvStatus.EMPTY:
                if context.executor.all_tasks_finished():
                    stopped_or_ready = _recv_after_tasks_finished(receiver)
                elif idle_poll_interval is None:
                    continue
                else:
                    stopped_or_ready = _wait_for_tasks(receiver, context.executor, idle_poll_interval)
                if isinstance(stopped_or_ready, (StoppedClosed, StoppedIdle)):
                    return stopped_or_ready
                next_message = stopped_or_ready
            case ready:
                next_message = ready


def _recv_after_tasks_finished(receiver: MessageReceiver) -> Message | StoppedClosed | StoppedIdle:
    """Take a message that a task submitted right before it finished."""
    match receiver.try_recv():
        case RecvStatus.EMPTY:
            logger.debug("Stopping after no progress made and all tasks finished")
            return StoppedIdle()
        case RecvStatus.CLOSED:
            logger.debug("Stopping after all tasks finished and message channel closed")
            return StoppedClosed()
        case ready:
            return ready


def _wait_for_tasks(
    receiver: MessageReceiver,
    executor: TaskExecutor,
    poll_interval: float,
) -> Message | StoppedClosed | StoppedIdle:
    """Wait for a message while re-checking outstanding tasks."""
    while True:
        received = receiver.recv(timeout=poll_interval)
        if received is None:
            logger.debug("Stopping after message channel closed")
            return StoppedClosed()
        if received is not RecvStatus.EMPTY:
            return received
        if executor.all_tasks_finished():
            return _recv_after_tasks_finished(receiver)


def run_consume_loop(
    model: Model,
    renderer: Renderer,
    task_executor: TaskExecutor,
    receiver: MessageReceiver,
    *,
    first_message: Message | None = None,
    idle_poll_interval: float | None = None,
) -> MessagesConsumed:
    """Run the consume loop on a model until it reaches a terminal state.

    Note:
        ThreadPoolTaskExecutor counts a task as outstanding until just after
        it submitted its last message. With ``idle_poll_interval=None`` the
        loop may then block waiting for a message that never comes, until
        the channel is closed. Pass an interval (Reactor uses
        ReactorConfig.idle_poll_interval, 0.1 s by default) to stop idle.
    """
    context = TaskContext(sender=receiver.new_sender(), executor=task_executor)
    outcome = consume_messages(
        receiver,
        context,
        model,
        renderer,
        first_message=first_message,
        idle_poll_interval=idle_poll_interval,
    )
    logger.info("Consume loop stopped: %r", outcome)
    return outcome
