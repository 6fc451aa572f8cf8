"""MCP Tool definitions for the coaching servers.

Each variant advertises a static list of tools. Input schemas come from the
Pydantic argument models; display metadata (``_meta``) tells ChatGPT which
widget to render and what to show while the tool runs.
"""

from typing import Any

from mcp.types import Tool, ToolAnnotations

from .arg_models import CoachNextBestStepArgs, NextBestStepArgs, RefreshArgs
from .schema import input_schema_from_model

NEXT_BEST_STEP = "next_best_step"
KITCHEN_SINK_REFRESH = "kitchen-sink-refresh"

# Both the resource URI and the resource template URI.
TEMPLATE_URI = "ui://widget/kitchen-sink-lite.html"
WIDGET_MIME_TYPE = "text/html+skybridge"

READ_ONLY_ANNOTATIONS = ToolAnnotations(
    readOnlyHint=True,
    destructiveHint=False,
    openWorldHint=False,
)


def widget_descriptor_meta() -> dict[str, Any]:
    """Display metadata shared by elite-mindset tools and the widget resource."""
    return {
        "openai/outputTemplate": TEMPLATE_URI,
        "openai/toolInvocation/invoking": "Preparing EliteMindset",
        "openai/toolInvocation/invoked": "Next step delivered",
        "openai/widgetAccessible": True,
    }


def coach_descriptor_meta() -> dict[str, Any]:
    return {
        "openai/toolInvocation/invoking": "Reading where you are",
        "openai/toolInvocation/invoked": "Next step ready",
    }


def invocation_meta(descriptor_meta: dict[str, Any], invocation: str) -> dict[str, Any]:
    """Metadata attached to a tool result: the descriptor metadata plus the tool name."""
    return {**descriptor_meta, "invocation": invocation}


def coach_next_best_step_tool() -> Tool:
    """Tool definition for the coach variant's next_best_step."""
    return Tool(
        name=NEXT_BEST_STEP,
        title="Next Best Step",
        description=(
            "Reads how the user describes their progress (stuck, done, unsure, on a roll) "
            "and returns one coaching message with a single call to action."
        ),
        inputSchema=input_schema_from_model(CoachNextBestStepArgs),
        annotations=READ_ONLY_ANNOTATIONS,
        _meta=coach_descriptor_meta(),
    )


def next_best_step_tool() -> Tool:
    """Tool definition for the elite-mindset next_best_step."""
    return Tool(
        name=NEXT_BEST_STEP,
        title="Next Best Step",
        description=(
            "Returns exactly one concrete, time-boxed next step based on the situation "
            "and constraints."
        ),
        inputSchema=input_schema_from_model(NextBestStepArgs),
        annotations=READ_ONLY_ANNOTATIONS,
        _meta=widget_descriptor_meta(),
    )


def kitchen_sink_refresh_tool() -> Tool:
    """Tool definition for the widget's echo tool."""
    return Tool(
        name=KITCHEN_SINK_REFRESH,
        title="Refresh from widget",
        description="Lightweight echo tool called from the widget via callTool.",
        inputSchema=input_schema_from_model(RefreshArgs),
        annotations=READ_ONLY_ANNOTATIONS,
        _meta=widget_descriptor_meta(),
    )


COACH_TOOLS: tuple[Tool, ...] = (coach_next_best_step_tool(),)

ELITE_MINDSET_TOOLS: tuple[Tool, ...] = (
    next_best_step_tool(),
    kitchen_sink_refresh_tool(),
)
