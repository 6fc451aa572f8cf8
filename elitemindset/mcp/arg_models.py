"""Pydantic models for MCP tool arguments.

These double as the source of each tool's ``inputSchema`` (see ``schema.py``)
and as the validator applied to incoming ``tools/call`` arguments.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CoachNextBestStepArgs(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_input: str = Field(
        description="What the user just said about where they are with their task.",
    )


class NextBestStepArgs(BaseModel):
    model_config = ConfigDict(extra="forbid")

    situation: str = Field(
        min_length=1,
        description=(
            "What’s going on right now. Include context and what you’re trying to move forward."
        ),
    )
    constraints: str | None = Field(
        default=None,
        description="Rules to follow (e.g., one step only, time limit, low friction, avoid X).",
    )
    desired_outcome: str | None = Field(
        default=None,
        description="What you want by the end of the step (e.g., momentum, clarity, progress).",
    )


class RefreshArgs(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str = Field(description="Message to echo back.")
