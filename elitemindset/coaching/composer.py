"""Response composition for the coaching tools.

The coach variant renders the canned copy for a classified state. The
elite-mindset variant renders a single, time-boxed next step; the user's
situation only influences the detected timebox, never the action itself.
"""

import re
from dataclasses import dataclass
from typing import Any

from .states import STATE_COPY, CoachingState

ACCENT_COLOR = "#2d6cdf"

DEFAULT_TIMEBOX = "30 minutes"
DEFAULT_CONSTRAINTS = "One step only. Make it concrete, time-boxed, and low-friction."

TIMEBOX_PATTERN = re.compile(r"(\d+)\s*(minutes?|mins?|hours?|hrs?)", re.IGNORECASE)

DRAFT_OPTIONS = (
    "(a) 5 App Store headline variants",
    "(b) one outreach DM",
    "(c) a 20–30s UGC script",
)
DRAFT_CHOICE = f"{DRAFT_OPTIONS[0]}, {DRAFT_OPTIONS[1]}, or {DRAFT_OPTIONS[2]}"

STEP_TEMPLATE = (
    "Set a {timebox} timer and produce ONE shippable draft that moves distribution "
    "forward (not polish). Pick exactly one: {options}. "
    "Write the ugly first draft without editing."
)

FINISH_LINE = (
    "Done = you can paste/share the draft somewhere immediately (even if it’s not perfect)."
)

NEXT_BEST_STEP_MESSAGE = "Next Best Step (one action)"
REFRESH_DETAILS = "Response returned from window.openai.callTool."


@dataclass(frozen=True)
class StateResponse:
    """Rendered reply for the coach variant."""

    state: CoachingState
    message: str
    action: str

    @property
    def text(self) -> str:
        return f"{self.message}\n\n{self.action}"

    def to_structured(self) -> dict[str, Any]:
        return {"message": self.message, "action": self.action, "state": self.state.value}


@dataclass(frozen=True)
class WidgetPayload:
    """Structured content rendered by the kitchen-sink-lite widget."""

    message: str
    accent_color: str = ACCENT_COLOR
    details: str | None = None
    from_tool: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"message": self.message, "accentColor": self.accent_color}
        if self.details is not None:
            payload["details"] = self.details
        if self.from_tool is not None:
            payload["fromTool"] = self.from_tool
        return payload


def compose_state_response(state: CoachingState) -> StateResponse:
    copy = STATE_COPY[state]
    return StateResponse(state=state, message=copy.message, action=copy.ask)


def detect_timebox(situation: str) -> str:
    """Return the first duration phrase in the situation, verbatim, or the default."""
    match = TIMEBOX_PATTERN.search(situation)
    return match.group(0) if match else DEFAULT_TIMEBOX


def compose_next_best_step(
    situation: str,
    constraints: str | None = None,
    desired_outcome: str | None = None,
) -> WidgetPayload:
    """Build the one-action directive for the next_best_step tool."""
    timebox = detect_timebox(situation)
    resolved_constraints = (constraints or "").strip() or DEFAULT_CONSTRAINTS
    desired = (desired_outcome or "").strip()

    lines = [
        f"Next Best Step ({timebox}):",
        STEP_TEMPLATE.format(timebox=timebox, options=DRAFT_CHOICE),
        f"Constraints: {resolved_constraints}",
    ]
    if desired:
        lines.append(f"Desired outcome: {desired}")
    lines.append(FINISH_LINE)

    return WidgetPayload(
        message=NEXT_BEST_STEP_MESSAGE,
        details="\n".join(lines),
        from_tool="next_best_step",
    )


def compose_refresh(message: str) -> WidgetPayload:
    """Echo a widget-originated message back in the widget envelope."""
    return WidgetPayload(
        message=message,
        details=REFRESH_DETAILS,
        from_tool="kitchen-sink-refresh",
    )
