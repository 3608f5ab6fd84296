"""Pytest fixtures for Infect tests."""

import logging
import os
from dataclasses import dataclass, field
from typing import Any

import pytest

from infect.core import (
    EffectApplied,
    IntentHandled,
    MessageReceiver,
    MessageSender,
    Rejected,
    RenderHint,
    TaskContext,
    enqueue_effect,
    message_channel,
)
from infect.foundation.config import reset_config


@dataclass
class ScriptedModel:
    """Model whose outcomes are scripted per intent and effect.

    Unknown intents are rejected, unknown effects leave the model unchanged.
    """

    intents: dict[Any, IntentHandled] = field(default_factory=dict)
    effects: dict[Any, EffectApplied] = field(default_factory=dict)
    handled_intents: list[Any] = field(default_factory=list)
    applied_effects: list[Any] = field(default_factory=list)

    def handle_intent(self, intent: Any) -> IntentHandled:
        self.handled_intents.append(intent)
        return self.intents.get(intent, Rejected(f"unknown intent {intent!r}"))

    def apply_effect(self, effect: Any) -> EffectApplied:
        self.applied_effects.append(effect)
        return self.effects.get(effect, EffectApplied())


@dataclass
class RecordingRenderer:
    """Records render calls and replies with queued intents."""

    replies: list[Any] = field(default_factory=list)
    hints: list[RenderHint] = field(default_factory=list)

    def render(self, model: Any, hint: RenderHint) -> Any | None:
        self.hints.append(hint)
        return self.replies.pop(0) if self.replies else None


@dataclass
class FakeExecutor:
    """Executor that only records spawned tasks.

    ``finished`` is what all_tasks_finished() reports.
    """

    finished: bool = True
    spawned: list[tuple[TaskContext, Any]] = field(default_factory=list)

    def spawn(self, context: TaskContext, task: Any) -> None:
        self.spawned.append((context, task))

    def all_tasks_finished(self) -> bool:
        return self.finished

    @property
    def tasks(self) -> list[Any]:
        return [task for _, task in self.spawned]


@dataclass
class LateSubmittingExecutor:
    """Executor whose last task submits an effect right before it finishes.

    The effect is submitted when all_tasks_finished() is first asked.
    """

    sender: MessageSender
    effect: Any
    submitted: bool = False

    def spawn(self, context: TaskContext, task: Any) -> None:
        raise AssertionError("no tasks expected")

    def all_tasks_finished(self) -> bool:
        if not self.submitted:
            self.submitted = True
            enqueue_effect(self.sender, self.effect)
        return True


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory):
    """Keep user config files and INFECT_* variables out of tests."""
    for key in list(os.environ):
        if key.startswith("INFECT_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("HOME", str(tmp_path_factory.mktemp("home")))
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo configure_logging() calls made by a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def channel() -> tuple[MessageSender, MessageReceiver]:
    """Create a channel with room for 16 messages."""
    return message_channel(16)


@pytest.fixture
def sender(channel: tuple[MessageSender, MessageReceiver]) -> MessageSender:
    return channel[0]


@pytest.fixture
def receiver(channel: tuple[MessageSender, MessageReceiver]) -> MessageReceiver:
    return channel[1]


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def context(sender: MessageSender, executor: FakeExecutor) -> TaskContext:
    return TaskContext(sender=sender, executor=executor)


@pytest.fixture
def busy_context(sender: MessageSender) -> TaskContext:
    """Context whose executor never reports its tasks as finished."""
    return TaskContext(sender=sender, executor=FakeExecutor(finished=False))


@pytest.fixture
def model() -> ScriptedModel:
    return ScriptedModel()


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def late_context(sender: MessageSender) -> TaskContext:
    """Context whose executor submits "late" while reporting completion."""
    return TaskContext(sender=sender, executor=LateSubmittingExecutor(sender, "late"))
