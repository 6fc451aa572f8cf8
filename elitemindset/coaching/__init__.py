"""Coaching logic: intent classification and response composition."""

from .composer import (
    StateResponse,
    WidgetPayload,
    compose_next_best_step,
    compose_refresh,
    compose_state_response,
)
from .states import CoachingState, classify_intent

__all__ = [
    "CoachingState",
    "StateResponse",
    "WidgetPayload",
    "classify_intent",
    "compose_next_best_step",
    "compose_refresh",
    "compose_state_response",
]
