"""Task execution contract.

Tasks are units of concurrent work that produce future messages. They are
opaque to the core: a task reports success and failure alike by submitting
effects through its TaskContext. Nothing is retried automatically.

Cancellation and timeouts are not provided here. A task that wants them
observes a cancellation effect cooperatively or submits a "timed out"
effect itself.
"""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from infect.core.message import Message
from infect.core.messaging import (
    MessageSender,
    enqueue_effect,
    enqueue_intent,
    enqueue_message,
)
from infect.foundation.errors import ErrorCode, runtime_error
from infect.foundation.threading import optimal_workers

logger = logging.getLogger(__name__)


@runtime_checkable
class TaskExecutor(Protocol):
    """Spawns tasks and tracks their completion."""

    def spawn(self, context: "TaskContext", task: Any) -> None:
        """Launch a task without blocking the caller."""
        ...

    def all_tasks_finished(self) -> bool:
        """True when no spawned task is outstanding.

        A termination oracle for the consume loop, not a synchronization
        primitive.
        """
        ...


@dataclass(frozen=True, slots=True)
class TaskContext:
    """Handle given to every task.

    Lets a task submit messages and spawn further tasks. The same context
    is shared by all outstanding tasks and the consume loop.
    """

    sender: MessageSender
    executor: TaskExecutor

    def submit_message(self, message: Message) -> None:
        enqueue_message(self.sender, message)

    def submit_intent(self, intent: Any) -> None:
        enqueue_intent(self.sender, intent)

    def submit_effect(self, effect: Any) -> None:
        enqueue_effect(self.sender, effect)

    def spawn_task(self, task: Any) -> None:
        logger.debug("Spawning task: %r", task)
        self.executor.spawn(self, task)


TaskRunner = Callable[[TaskContext, Any], None]
"""Executes one task: (context, task) -> None"""

FailureEffect = Callable[[Any, Exception], Any]
"""Converts a task failure into an effect: (task, exception) -> effect"""


class ThreadPoolTaskExecutor:
    """Runs tasks on a thread pool.

    The outstanding counter is incremented before a task is submitted and
    decremented only after the task returned, so every message a task
    submits is already queued once all_tasks_finished() reports True.

    Example:
        >>> def run(context, task):
        ...     context.submit_effect(Fetched(download(task.url)))
        >>> with ThreadPoolTaskExecutor(run) as executor:
        ...     outcome = run_consume_loop(model, renderer, executor, receiver)
    """

    def __init__(
        self,
        run_task: TaskRunner,
        *,
        max_workers: int | None = None,
        failure_effect: FailureEffect | None = None,
        thread_name_prefix: str = "infect-task",
    ) -> None:
        """Initialize executor.

        Args:
            run_task: Callable executing a single task.
            max_workers: Pool size (None = I/O-bound heuristic).
            failure_effect: Converts an exception escaping run_task into an
                effect that is submitted in place of the lost outcome.
            thread_name_prefix: Prefix for worker thread names.
        """
        self._run_task = run_task
        self._failure_effect = failure_effect
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers or optimal_workers(),
            thread_name_prefix=thread_name_prefix,
        )
        self._lock = threading.Lock()
        self._outstanding = 0
        self._shutdown = False

    def spawn(self, context: TaskContext, task: Any) -> None:
        with self._lock:
            if self._shutdown:
                raise runtime_error(
                    "executor is shut down",
                    code=ErrorCode.RUNTIME_EXECUTOR_SHUTDOWN,
                    task=repr(task),
                )
            self._outstanding += 1
        try:
            future = self._pool.submit(self._run, context, task)
        except RuntimeError:
            self._task_done()
            raise
        future.add_done_callback(self._on_done)

    def _run(self, context: TaskContext, task: Any) -> None:
        try:
            self._run_task(context, task)
        except Exception as e:
            logger.exception("Task failed: %r", task)
            if self._failure_effect is not None:
                context.submit_effect(self._failure_effect(task, e))
        finally:
            self._task_done()

    def _on_done(self, future: Future) -> None:
        # Cancelled futures never reach _run
        if future.cancelled():
            self._task_done()

    def _task_done(self) -> None:
        with self._lock:
            self._outstanding -= 1

    def all_tasks_finished(self) -> bool:
        with self._lock:
            return self._outstanding == 0

    @property
    def outstanding(self) -> int:
        """Number of spawned tasks that did not finish yet."""
        with self._lock:
            return self._outstanding

    def shutdown(self, wait: bool = True, cancel_pending: bool = False) -> None:
        """Stop accepting tasks and release the worker threads."""
        with self._lock:
            self._shutdown = True
        self._pool.shutdown(wait=wait, cancel_futures=cancel_pending)

    def __enter__(self) -> "ThreadPoolTaskExecutor":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown(wait=True)
