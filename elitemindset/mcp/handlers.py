"""MCP Tool handlers for the coaching servers.

Each handler validates its arguments against the tool's Pydantic model and
returns a ``CallToolResult`` carrying the text reply, the structured payload
for the widget, and the invocation metadata.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, CallToolResult, ErrorData, TextContent
from pydantic import BaseModel, ValidationError

from ..coaching import (
    classify_intent,
    compose_next_best_step,
    compose_refresh,
    compose_state_response,
)
from ..config import Variant
from .arg_models import CoachNextBestStepArgs, NextBestStepArgs, RefreshArgs
from .tools import (
    KITCHEN_SINK_REFRESH,
    NEXT_BEST_STEP,
    coach_descriptor_meta,
    invocation_meta,
    widget_descriptor_meta,
)

logger = logging.getLogger(__name__)

ArgsT = TypeVar("ArgsT", bound=BaseModel)

ToolHandler = Callable[[dict[str, Any]], Awaitable[CallToolResult]]


def _validation_error_message(e: ValidationError) -> str:
    """Flatten Pydantic errors into one line, e.g. ``situation: Field required``."""
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc") or ()) or "arguments"
        parts.append(f"{loc}: {err.get('msg')}")
    return "Invalid arguments: " + "; ".join(parts)


def parse_arguments(model: type[ArgsT], arguments: dict[str, Any]) -> ArgsT:
    """Validate tool arguments, raising a JSON-RPC invalid-params error on failure."""
    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        raise McpError(ErrorData(code=INVALID_PARAMS, message=_validation_error_message(e))) from e


async def handle_coach_next_best_step(arguments: dict[str, Any]) -> CallToolResult:
    """Classify the user's input and reply with that state's message and ask."""
    args = parse_arguments(CoachNextBestStepArgs, arguments)
    state = classify_intent(args.user_input)
    logger.debug("Classified input as %s", state.value)

    response = compose_state_response(state)
    return CallToolResult(
        content=[TextContent(type="text", text=response.text)],
        structuredContent=response.to_structured(),
        _meta=invocation_meta(coach_descriptor_meta(), NEXT_BEST_STEP),
    )


async def handle_next_best_step(arguments: dict[str, Any]) -> CallToolResult:
    args = parse_arguments(NextBestStepArgs, arguments)
    payload = compose_next_best_step(args.situation, args.constraints, args.desired_outcome)

    return CallToolResult(
        content=[TextContent(type="text", text=payload.details or "")],
        structuredContent={
            **payload.to_dict(),
            "inputs": {
                "situation": args.situation,
                "constraints": args.constraints or "",
                "desired_outcome": args.desired_outcome or "",
            },
        },
        _meta=invocation_meta(widget_descriptor_meta(), NEXT_BEST_STEP),
    )


async def handle_kitchen_sink_refresh(arguments: dict[str, Any]) -> CallToolResult:
    args = parse_arguments(RefreshArgs, arguments)
    payload = compose_refresh(args.message)

    return CallToolResult(
        content=[TextContent(type="text", text=payload.message)],
        structuredContent=payload.to_dict(),
        _meta=invocation_meta(widget_descriptor_meta(), KITCHEN_SINK_REFRESH),
    )


TOOL_HANDLERS: dict[Variant, dict[str, ToolHandler]] = {
    Variant.COACH: {
        NEXT_BEST_STEP: handle_coach_next_best_step,
    },
    Variant.ELITE_MINDSET: {
        NEXT_BEST_STEP: handle_next_best_step,
        KITCHEN_SINK_REFRESH: handle_kitchen_sink_refresh,
    },
}


async def handle_tool_call(
    variant: Variant, name: str, arguments: dict[str, Any] | None
) -> CallToolResult:
    """Route tool calls to their handlers."""
    handler = TOOL_HANDLERS[variant].get(name)
    if handler is None:
        raise ValueError(f"Unknown tool: {name}")
    return await handler(arguments or {})
