"""Reactor: a model bundled with its channel, renderer and task executor.

Embedding applications that do not want to wire the channel themselves
create a Reactor, hand out its sender to producers and call run() on the
thread that owns the model.

Thread Safety:
    submit_intent()/submit_effect() may be called from any thread. Only
    one run() may be active at a time; a second concurrent call raises.
"""

import logging
import threading
from typing import Any

from infect.core.message import Message, effect_message, intent_message
from infect.core.messaging import (
    MessageReceiver,
    MessageSender,
    enqueue_effect,
    enqueue_intent,
    message_channel,
)
from infect.core.model import Model, Renderer
from infect.core.processing import MessagesConsumed, run_consume_loop
from infect.core.task import TaskExecutor
from infect.foundation.config import ReactorConfig, get_config
from infect.foundation.errors import runtime_error

logger = logging.getLogger(__name__)


class Reactor:
    """Drives a model from a bounded message channel.

    Example:
        >>> reactor = Reactor(Counter(), renderer, executor)
        >>> reactor.submit_intent(Increment(2))
        >>> outcome = reactor.run()
    """

    def __init__(
        self,
        model: Model,
        renderer: Renderer,
        task_executor: TaskExecutor,
        config: ReactorConfig | None = None,
    ) -> None:
        self.model = model
        self.renderer = renderer
        self.task_executor = task_executor
        self.config = config or get_config()

        self._sender: MessageSender
        self._receiver: MessageReceiver
        self._sender, self._receiver = message_channel(self.config.channel_capacity)
        self._run_lock = threading.Lock()
        self._runs = 0

    @property
    def sender(self) -> MessageSender:
        """Producer handle for tasks, UI callbacks and other threads."""
        return self._sender

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    @property
    def is_closed(self) -> bool:
        return self._receiver.is_closed

    def submit_intent(self, intent: Any) -> None:
        enqueue_intent(self._sender, intent)

    def submit_effect(self, effect: Any) -> None:
        enqueue_effect(self._sender, effect)

    def run(self, first_message: Message | None = None) -> MessagesConsumed:
        """Consume messages on the calling thread until a terminal state.

        A reactor can be run again after it stopped, e.g. to resume after a
        rejected intent has been reported to the user.

        Raises:
            InfectError: If another run() is active.
        """
        if not self._run_lock.acquire(blocking=False):
            raise runtime_error("the consume loop of this reactor is already running")
        try:
            self._runs += 1
            logger.debug("Starting consume loop run #%d", self._runs)
            return run_consume_loop(
                self.model,
                self.renderer,
                self.task_executor,
                self._receiver,
                first_message=first_message,
                idle_poll_interval=self.config.idle_poll_interval,
            )
        finally:
            self._run_lock.release()

    def run_intent(self, intent: Any) -> MessagesConsumed:
        """Run starting with an intent ahead of everything queued."""
        return self.run(intent_message(intent))

    def run_effect(self, effect: Any) -> MessagesConsumed:
        """Run starting with an effect ahead of everything queued."""
        return self.run(effect_message(effect))

    def close(self) -> None:
        """Close the channel. A running loop drains it and stops."""
        self._sender.close()

    def __repr__(self) -> str:
        return (
            f"Reactor(model={type(self.model).__name__}, "
            f"capacity={self.config.channel_capacity}, running={self.is_running})"
        )
