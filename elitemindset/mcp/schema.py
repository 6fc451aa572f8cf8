"""Helpers for generating MCP Tool JSON Schemas from Pydantic models."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)

_NULL_VARIANT = {"type": "null"}


def _simplify_anyof_nulls(schema: dict[str, Any]) -> None:
    """Simplify ``anyOf`` nullable patterns in-place for MCP client compatibility.

    Pydantic v2 emits ``anyOf: [{type: X}, {type: null}]`` for ``X | None``
    fields. ChatGPT and most other MCP clients expect a flat ``type: X``.

    Rules:
    - 2-item anyOf with one null variant → flatten the non-null variant into
      the property (preserving description, default, etc.).
    - 3+-item anyOf with a null variant → drop the null variant but keep
      ``anyOf`` with the remaining types.
    - anyOf without a null variant → leave untouched.
    """
    for prop in schema.get("properties", {}).values():
        any_of = prop.get("anyOf")
        if not any_of:
            continue

        non_null = [v for v in any_of if v != _NULL_VARIANT]
        if len(non_null) == len(any_of):
            continue

        if len(non_null) == 1:
            del prop["anyOf"]
            prop.update(non_null[0])
        else:
            prop["anyOf"] = non_null

        # A null default means "omit the field"; it is not a valid value for clients.
        if prop.get("default", ...) is None:
            del prop["default"]


def input_schema_from_model(model: type[ModelT]) -> dict[str, Any]:
    """Return a JSON Schema dict usable as an MCP Tool ``inputSchema``."""

    schema = model.model_json_schema(mode="validation")

    # Drop Pydantic-generated titles; tools carry their own title.
    schema.pop("title", None)
    for prop in schema.get("properties", {}).values():
        prop.pop("title", None)

    _simplify_anyof_nulls(schema)

    if "required" not in schema:
        schema["required"] = []

    return schema
