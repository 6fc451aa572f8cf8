"""Tests for intent classification and response composition."""

import pytest

from elitemindset.coaching import (
    CoachingState,
    classify_intent,
    compose_next_best_step,
    compose_refresh,
    compose_state_response,
)
from elitemindset.coaching.composer import (
    DEFAULT_CONSTRAINTS,
    DRAFT_OPTIONS,
    FINISH_LINE,
    detect_timebox,
)
from elitemindset.coaching.states import STATE_COPY


class TestClassifyIntent:
    """Tests for classify_intent."""

    @pytest.mark.parametrize("text", ["done", "DONE!", "I sent the email", "  Finished it  "])
    def test_completion_phrases(self, text):
        assert classify_intent(text) == CoachingState.MOVED

    def test_completion_beats_overwhelm(self):
        """Test that a completion signal wins even when the user also sounds overwhelmed."""
        assert classify_intent("I was stuck and overwhelmed but I'm done now") == CoachingState.MOVED

    def test_clarity_beats_momentum(self):
        assert classify_intent("What's the plan, next step?") == CoachingState.NEEDS_CLARITY

    def test_momentum_request(self):
        assert classify_intent("Give me the next step") == CoachingState.MOMENTUM

    def test_momentum_beats_overwhelm(self):
        assert classify_intent("too much going on, what next?") == CoachingState.MOMENTUM

    def test_overwhelm_signal(self):
        assert classify_intent("I'm totally overwhelmed") == CoachingState.STUCK

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_input_defaults_to_stuck(self, text):
        assert classify_intent(text) == CoachingState.STUCK

    def test_unmatched_input_defaults_to_stuck(self):
        assert classify_intent("the weather is nice today") == CoachingState.STUCK


class TestComposeStateResponse:
    """Tests for the coach variant composer."""

    def test_every_state_has_copy(self):
        assert set(STATE_COPY) == set(CoachingState)

    def test_copy_table_is_read_only(self):
        with pytest.raises(TypeError):
            STATE_COPY[CoachingState.STUCK] = STATE_COPY[CoachingState.MOVED]

    def test_text_is_two_paragraphs(self):
        response = compose_state_response(CoachingState.MOVED)
        copy = STATE_COPY[CoachingState.MOVED]
        assert response.text == f"{copy.message}\n\n{copy.ask}"

    def test_structured_record(self):
        structured = compose_state_response(CoachingState.NEEDS_CLARITY).to_structured()
        assert structured["state"] == "needs_clarity"
        assert structured["message"] == STATE_COPY[CoachingState.NEEDS_CLARITY].message
        assert structured["action"] == STATE_COPY[CoachingState.NEEDS_CLARITY].ask


class TestComposeNextBestStep:
    """Tests for the elite-mindset composer."""

    def test_detects_hours(self):
        payload = compose_next_best_step("I have 2 hours before the launch")
        assert payload.details.splitlines()[0] == "Next Best Step (2 hours):"

    def test_timebox_is_verbatim(self):
        assert detect_timebox("maybe 45 MINS tops") == "45 MINS"
        assert detect_timebox("I have 90min") == "90min"

    def test_defaults_to_thirty_minutes(self):
        payload = compose_next_best_step("No idea how long I have")
        assert "30 minutes" in payload.details.splitlines()[0]

    def test_default_constraints(self):
        payload = compose_next_best_step("launching soon", constraints="   ")
        assert f"Constraints: {DEFAULT_CONSTRAINTS}" in payload.details

    def test_custom_constraints_and_outcome(self):
        payload = compose_next_best_step(
            "launching soon", constraints="No email", desired_outcome="  momentum "
        )
        lines = payload.details.splitlines()
        assert "Constraints: No email" in lines
        assert "Desired outcome: momentum" in lines
        assert lines[-1] == FINISH_LINE

    def test_omits_desired_outcome_when_blank(self):
        payload = compose_next_best_step("launching soon", desired_outcome="")
        assert "Desired outcome" not in payload.details

    def test_no_blank_lines(self):
        payload = compose_next_best_step("launching soon", desired_outcome="clarity")
        assert all(line.strip() for line in payload.details.splitlines())

    @pytest.mark.parametrize(
        "situation",
        [
            "Should I do (1) ads, (2) SEO, or (3) a newsletter?",
            "Options: write a blog post; record a podcast; cold call",
            "x",
        ],
    )
    def test_always_one_fixed_action(self, situation):
        """Test that the user's options never leak into the directive."""
        payload = compose_next_best_step(situation)
        for option in DRAFT_OPTIONS:
            assert payload.details.count(option) == 1
        assert "newsletter" not in payload.details
        assert "podcast" not in payload.details
        assert "Pick exactly one" in payload.details

    def test_payload_shape(self):
        payload = compose_next_best_step("launching soon").to_dict()
        assert payload["message"] == "Next Best Step (one action)"
        assert payload["accentColor"] == "#2d6cdf"
        assert payload["fromTool"] == "next_best_step"


class TestComposeRefresh:
    def test_echoes_message(self):
        payload = compose_refresh("hello").to_dict()
        assert payload == {
            "message": "hello",
            "accentColor": "#2d6cdf",
            "details": "Response returned from window.openai.callTool.",
            "fromTool": "kitchen-sink-refresh",
        }
