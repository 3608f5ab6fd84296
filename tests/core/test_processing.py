"""Tests for processing a single message."""

import pytest

from infect.core import (
    Accepted,
    DirtyFields,
    EffectApplied,
    EffectMessage,
    IntentMessage,
    IntentRejected,
    ModelChanged,
    NoProgress,
    Progressing,
    RecvStatus,
    Rejected,
    process_message,
)


class TestIntentMessages:
    def test_rejected_intent_has_no_side_effects(self, context, model, renderer, receiver, executor):
        model.intents["bad"] = Rejected("not allowed")

        outcome = process_message(context, model, renderer, IntentMessage("bad"))

        assert outcome == IntentRejected("not allowed")
        assert model.applied_effects == []
        assert executor.spawned == []
        assert renderer.hints == []
        assert receiver.try_recv() is RecvStatus.EMPTY

    def test_rejection_is_repeatable(self, context, model, renderer):
        model.intents["bad"] = Rejected("nope")

        first = process_message(context, model, renderer, IntentMessage("bad"))
        second = process_message(context, model, renderer, IntentMessage("bad"))

        assert first == second == IntentRejected("nope")
        assert model.applied_effects == []

    def test_accepted_without_effect_makes_no_progress(self, context, model, renderer):
        model.intents["noop"] = Accepted.no_effect()

        assert process_message(context, model, renderer, IntentMessage("noop")) == NoProgress()
        assert model.applied_effects == []

    def test_accepted_next_effect_is_applied_once(self, context, model, renderer):
        model.intents["go"] = Accepted.apply_effect("went")

        process_message(context, model, renderer, IntentMessage("go"))

        assert model.applied_effects == ["went"]

    def test_spawned_task_is_the_returned_task(self, context, model, renderer, executor):
        task = object()
        model.intents["work"] = Accepted.spawn_task(task)

        outcome = process_message(context, model, renderer, IntentMessage("work"))

        assert outcome == Progressing()
        assert len(executor.spawned) == 1
        spawned_context, spawned_task = executor.spawned[0]
        assert spawned_task is task
        assert spawned_context is context

    def test_invalid_handle_intent_result_raises(self, context, model, renderer):
        model.intents["broken"] = "not an outcome"

        with pytest.raises(TypeError):
            process_message(context, model, renderer, IntentMessage("broken"))


class TestEffectChains:
    def test_effect_with_next_effect_applies_both(self, context, model, renderer, receiver):
        model.effects["E1"] = EffectApplied(next_effect="E2")

        outcome = process_message(context, model, renderer, EffectMessage("E1"))

        assert model.applied_effects == ["E1", "E2"]
        assert outcome == NoProgress()
        assert receiver.try_recv() is RecvStatus.EMPTY

    def test_chain_runs_to_completion(self, context, model, renderer):
        for i in range(5):
            model.effects[i] = EffectApplied(next_effect=i + 1)

        outcome = process_message(context, model, renderer, EffectMessage(0))

        assert outcome == NoProgress()
        assert model.applied_effects == [0, 1, 2, 3, 4, 5]

    def test_chain_applies_before_queued_messages(self, context, model, renderer, sender, receiver):
        model.effects["first"] = EffectApplied(next_effect="chained")
        context.submit_effect("queued")

        process_message(context, model, renderer, EffectMessage("first"))

        assert model.applied_effects == ["first", "chained"]
        assert receiver.try_recv() == EffectMessage("queued")

    def test_tasks_along_the_chain_are_spawned_in_order(self, context, model, renderer, executor):
        model.effects["a"] = EffectApplied(task="t1", next_effect="b")
        model.effects["b"] = EffectApplied(next_effect="c")
        model.effects["c"] = EffectApplied(task="t2")

        outcome = process_message(context, model, renderer, EffectMessage("a"))

        assert outcome == Progressing()
        assert executor.tasks == ["t1", "t2"]


class TestRendering:
    def test_hints_are_accumulated_across_chain(self, context, model, renderer):
        model.effects["a"] = EffectApplied(render_hint=ModelChanged.UNCHANGED, next_effect="b")
        model.effects["b"] = EffectApplied(render_hint=ModelChanged.MAYBE_CHANGED, next_effect="c")
        model.effects["c"] = EffectApplied(render_hint=ModelChanged.UNCHANGED)

        process_message(context, model, renderer, EffectMessage("a"))

        assert renderer.hints == [ModelChanged.MAYBE_CHANGED]

    def test_dirty_fields_are_united(self, context, model, renderer):
        model.effects["a"] = EffectApplied(render_hint=DirtyFields.of("x"), next_effect="b")
        model.effects["b"] = EffectApplied(render_hint=DirtyFields.of("y"))

        process_message(context, model, renderer, EffectMessage("a"))

        assert renderer.hints == [DirtyFields.of("x", "y")]

    def test_unchanged_model_is_not_rendered(self, context, model, renderer):
        model.effects["quiet"] = EffectApplied.unchanged_done()

        process_message(context, model, renderer, EffectMessage("quiet"))
        process_message(context, model, renderer, EffectMessage("unknown"))

        assert renderer.hints == []

    def test_observed_intent_is_enqueued_not_handled(self, context, model, renderer, receiver):
        model.effects["changed"] = EffectApplied.maybe_changed_done()
        renderer.replies.append("follow-up")

        outcome = process_message(context, model, renderer, EffectMessage("changed"))

        assert outcome == Progressing()
        assert model.handled_intents == []
        assert receiver.try_recv() == IntentMessage("follow-up")

    def test_render_returning_none_makes_no_progress(self, context, model, renderer, receiver):
        model.effects["changed"] = EffectApplied.maybe_changed_done()

        outcome = process_message(context, model, renderer, EffectMessage("changed"))

        assert outcome == NoProgress()
        assert renderer.hints == [ModelChanged.MAYBE_CHANGED]
        assert receiver.try_recv() is RecvStatus.EMPTY
