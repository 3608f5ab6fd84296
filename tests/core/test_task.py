"""Tests for task contexts and the thread pool executor."""

import logging
import threading

import pytest

from infect.core import (
    EffectMessage,
    IntentMessage,
    RecvStatus,
    TaskContext,
    TaskExecutor,
    ThreadPoolTaskExecutor,
)
from infect.foundation.errors import ErrorCode, InfectError
from infect.foundation.threading import optimal_workers


class TestTaskContext:
    def test_submits_messages(self, context, receiver):
        context.submit_intent("i")
        context.submit_effect("e")
        context.submit_message(IntentMessage("m"))

        assert receiver.try_recv() == IntentMessage("i")
        assert receiver.try_recv() == EffectMessage("e")
        assert receiver.try_recv() == IntentMessage("m")

    def test_spawn_task_delegates_to_executor(self, context, executor):
        context.spawn_task("job")

        assert executor.spawned == [(context, "job")]

    def test_fake_executor_satisfies_protocol(self, executor):
        assert isinstance(executor, TaskExecutor)


class TestThreadPoolTaskExecutor:
    def test_outstanding_until_task_returns(self, sender):
        release = threading.Event()
        started = threading.Event()

        def run(context, task):
            started.set()
            release.wait(timeout=2)
            context.submit_effect(("done", task))

        with ThreadPoolTaskExecutor(run, max_workers=1) as executor:
            context = TaskContext(sender=sender, executor=executor)
            assert executor.all_tasks_finished()

            context.spawn_task("job")
            assert started.wait(timeout=2)
            assert not executor.all_tasks_finished()
            assert executor.outstanding == 1

            release.set()

        assert executor.all_tasks_finished()

    def test_message_is_queued_before_task_counts_as_finished(self, sender, receiver):
        def run(context, task):
            context.submit_effect(task)

        with ThreadPoolTaskExecutor(run, max_workers=4) as executor:
            context = TaskContext(sender=sender, executor=executor)
            for i in range(10):
                context.spawn_task(i)

        assert executor.all_tasks_finished()
        received = []
        while (message := receiver.try_recv()) is not RecvStatus.EMPTY:
            received.append(message.effect)
        assert sorted(received) == list(range(10))

    def test_failure_is_logged(self, sender, receiver, caplog):
        def run(context, task):
            raise ValueError("boom")

        with caplog.at_level(logging.ERROR, logger="infect.core.task"):
            with ThreadPoolTaskExecutor(run, max_workers=1) as executor:
                TaskContext(sender=sender, executor=executor).spawn_task("job")

        assert executor.all_tasks_finished()
        assert any("Task failed" in r.getMessage() for r in caplog.records)
        assert receiver.try_recv() is RecvStatus.EMPTY

    def test_failure_effect_is_submitted(self, sender, receiver):
        def run(context, task):
            raise ValueError("boom")

        def on_failure(task, error):
            return ("failed", task, str(error))

        with ThreadPoolTaskExecutor(run, max_workers=1, failure_effect=on_failure) as executor:
            TaskContext(sender=sender, executor=executor).spawn_task("job")

        assert receiver.try_recv() == EffectMessage(("failed", "job", "boom"))

    def test_tasks_can_spawn_tasks(self, sender, receiver):
        def run(context, task):
            if task > 0:
                context.spawn_task(task - 1)
            context.submit_effect(task)

        executor = ThreadPoolTaskExecutor(run, max_workers=2)
        TaskContext(sender=sender, executor=executor).spawn_task(3)

        received = []
        while len(received) < 4:
            message = receiver.recv(timeout=2)
            assert message is not RecvStatus.EMPTY
            received.append(message.effect)
        executor.shutdown()

        assert sorted(received) == [0, 1, 2, 3]
        assert executor.all_tasks_finished()

    def test_spawn_after_shutdown_raises(self, sender):
        executor = ThreadPoolTaskExecutor(lambda context, task: None, max_workers=1)
        executor.shutdown()

        with pytest.raises(InfectError) as excinfo:
            TaskContext(sender=sender, executor=executor).spawn_task("late")

        assert excinfo.value.code == ErrorCode.RUNTIME_EXECUTOR_SHUTDOWN
        assert executor.all_tasks_finished()

    def test_satisfies_protocol(self):
        executor = ThreadPoolTaskExecutor(lambda context, task: None, max_workers=1)
        try:
            assert isinstance(executor, TaskExecutor)
        finally:
            executor.shutdown()

    def test_default_pool_size(self):
        executor = ThreadPoolTaskExecutor(lambda context, task: None)
        try:
            assert executor._pool._max_workers == optimal_workers()
        finally:
            executor.shutdown()
