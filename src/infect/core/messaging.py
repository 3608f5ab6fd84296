"""Bounded, ordered, multi-producer/single-consumer message channel.

Enqueueing never blocks and never fails observably: when the channel is
full or closed the message is dropped and logged. Under sustained
overload the newest messages are lost instead of blocking producers or
growing memory without bound.

Closing either end is a graceful shutdown: messages already queued can
still be received, new ones are dropped.

Thread Safety:
    Backed by queue.Queue (Python 3.13+ for Queue.shutdown()). Any number
    of threads may send, exactly one thread may receive.
"""

import logging
import queue
from collections.abc import Callable
from enum import Enum
from typing import Any

from infect.core.message import Message, effect_message, intent_message
from infect.foundation.errors import config_error

logger = logging.getLogger(__name__)


class SendStatus(Enum):
    """Result of a non-blocking send."""

    SENT = "sent"
    FULL = "full"
    CLOSED = "closed"


class RecvStatus(Enum):
    """Reason why no message was received."""

    EMPTY = "empty"
    CLOSED = "closed"


class MessageSender:
    """Producer handle. Share it freely between threads."""

    __slots__ = ("_queue",)

    def __init__(self, message_queue: queue.Queue) -> None:
        self._queue = message_queue

    def try_send(self, message: Message) -> SendStatus:
        try:
            self._queue.put_nowait(message)
        except queue.ShutDown:
            return SendStatus.CLOSED
        except queue.Full:
            return SendStatus.FULL
        return SendStatus.SENT

    def close(self) -> None:
        """Close the channel for all senders and the receiver."""
        self._queue.shutdown()

    @property
    def is_closed(self) -> bool:
        return self._queue.is_shutdown

    def __repr__(self) -> str:
        return f"MessageSender(closed={self.is_closed})"


class MessageReceiver:
    """Consumer handle. Owned by exactly one consume loop."""

    __slots__ = ("_queue", "capacity")

    def __init__(self, message_queue: queue.Queue, capacity: int) -> None:
        self._queue = message_queue
        self.capacity = capacity

    def recv(self, timeout: float | None = None) -> Message | RecvStatus | None:
        """Wait for the next message.

        Returns:
            The next message, None once the channel is closed and drained,
            or RecvStatus.EMPTY if ``timeout`` elapsed first.
        """
        try:
            return self._queue.get(timeout=timeout)
        except queue.ShutDown:
            return None
        except queue.Empty:
            return RecvStatus.EMPTY

    def try_recv(self) -> Message | RecvStatus:
        """Take the next message if one is ready."""
        try:
            return self._queue.get_nowait()
        except queue.ShutDown:
            return RecvStatus.CLOSED
        except queue.Empty:
            # An empty queue that is shut down is closed, not merely empty
            if self._queue.is_shutdown:
                return RecvStatus.CLOSED
            return RecvStatus.EMPTY

    def new_sender(self) -> MessageSender:
        """Create another producer handle for the same channel."""
        return MessageSender(self._queue)

    def close(self) -> None:
        self._queue.shutdown()

    @property
    def is_closed(self) -> bool:
        return self._queue.is_shutdown

    def __len__(self) -> int:
        return self._queue.qsize()

    def __repr__(self) -> str:
        return f"MessageReceiver(capacity={self.capacity}, queued={len(self)}, closed={self.is_closed})"


def message_channel(capacity: int) -> tuple[MessageSender, MessageReceiver]:
    """Create a bounded FIFO channel.

    Args:
        capacity: Maximum number of queued messages. Must be positive.

    Returns:
        Tuple of (sender, receiver).
    """
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
        raise config_error("channel_capacity", f"must be a positive integer, got {capacity!r}")
    message_queue: queue.Queue = queue.Queue(maxsize=capacity)
    return MessageSender(message_queue), MessageReceiver(message_queue, capacity)


def enqueue_message(sender: MessageSender, message: Message) -> None:
    """Enqueue a message into the channel.

    Fire-and-forget: submitters are never bothered with failures. A closed
    channel is part of a regular shutdown and logged as such, a full
    channel means the reactor is overloaded.
    """
    logger.debug("Sending message: %r", message)
    status = sender.try_send(message)
    if status is SendStatus.CLOSED:
        logger.info("Dropping message - channel is closed: %r", message)
    elif status is SendStatus.FULL:
        logger.warning("Dropping message - channel is full: %r", message)


def enqueue_intent(sender: MessageSender, intent: Any) -> None:
    _enqueue_payload(sender, intent_message, intent)


def enqueue_effect(sender: MessageSender, effect: Any) -> None:
    _enqueue_payload(sender, effect_message, effect)


def _enqueue_payload(
    sender: MessageSender,
    to_message: Callable[[Any], Message],
    payload: Any,
) -> None:
    try:
        message = to_message(payload)
    except ValueError as e:
        logger.warning("Dropping message - %s", e)
        return
    enqueue_message(sender, message)
