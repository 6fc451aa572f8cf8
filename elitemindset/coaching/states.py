"""Coaching states and keyword-based intent classification.

Free-text input from the user is mapped onto exactly one CoachingState by
checking a few keyword sets in a fixed priority order. Each state has a canned
message and a call to action.
"""

from enum import Enum
from types import MappingProxyType
from typing import NamedTuple


class CoachingState(str, Enum):
    STUCK = "stuck"
    MOVED = "moved"
    MOMENTUM = "momentum"
    NEEDS_CLARITY = "needs_clarity"


class StateCopy(NamedTuple):
    message: str
    ask: str


STATE_COPY = MappingProxyType(
    {
        CoachingState.STUCK: StateCopy(
            message=(
                "Feeling stuck is normal. It usually means the next step is too big, "
                "not that you're doing it wrong."
            ),
            ask=(
                "Shrink it: set a 10 minute timer and do the smallest visible piece "
                "of the task. Tell me when you've done it."
            ),
        ),
        CoachingState.MOVED: StateCopy(
            message="Nice. That's real movement, and it counts.",
            ask=(
                "Lock it in: write one line on what you finished, then name the very "
                "next thing it unlocks."
            ),
        ),
        CoachingState.MOMENTUM: StateCopy(
            message="You've got momentum. Keep the next step just as small so it stays that way.",
            ask=(
                "Pick the one follow-up that builds directly on what you just did and "
                "start it in the next 5 minutes."
            ),
        ),
        CoachingState.NEEDS_CLARITY: StateCopy(
            message="Let's get clear before doing more. Fuzzy goals create friction.",
            ask=(
                "Write one sentence: 'By the end of today, I will have ___.' "
                "Then we'll pick the first step toward it."
            ),
        ),
    }
)

# Checked in order; the first set with a matching phrase wins.
COMPLETION_SIGNALS = (
    "done",
    "finished",
    "completed",
    "i did it",
    "i sent",
    "sent the",
    "shipped",
    "posted it",
    "published",
    "wrapped up",
)

CLARITY_REQUESTS = (
    "what's the plan",
    "what’s the plan",
    "what is the plan",
    "not sure what",
    "don't know what",
    "don’t know what",
    "confused",
    "clarify",
    "clarity",
    "where do i start",
    "what should i focus",
)

MOMENTUM_REQUESTS = (
    "next step",
    "what next",
    "what's next",
    "what’s next",
    "keep going",
    "momentum",
    "on a roll",
    "what now",
)

OVERWHELM_SIGNALS = (
    "stuck",
    "overwhelmed",
    "too much",
    "can't start",
    "can’t start",
    "procrastinat",
    "anxious",
    "paralyzed",
    "behind",
)

_PRIORITY = (
    (COMPLETION_SIGNALS, CoachingState.MOVED),
    (CLARITY_REQUESTS, CoachingState.NEEDS_CLARITY),
    (MOMENTUM_REQUESTS, CoachingState.MOMENTUM),
    (OVERWHELM_SIGNALS, CoachingState.STUCK),
)


def classify_intent(text: str) -> CoachingState:
    """Map user input to a coaching state.

    Unmatched input (including empty input) falls through to STUCK.
    """
    normalized = (text or "").strip().lower()
    if normalized:
        for phrases, state in _PRIORITY:
            if any(phrase in normalized for phrase in phrases):
                return state
    return CoachingState.STUCK
