"""Small builders for the JSON schemas sent with LLM prompts."""

from typing import Any


def string(enum: list[str] | None = None, description: str | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "string"}
    if enum:
        schema["enum"] = enum
    if description:
        schema["description"] = description
    return schema


def number(description: str | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "number"}
    if description:
        schema["description"] = description
    return schema


def boolean() -> dict[str, Any]:
    return {"type": "boolean"}


def array(items: dict[str, Any], max_items: int | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "array", "items": items}
    if max_items is not None:
        schema["maxItems"] = max_items
    return schema


def obj(**properties: dict[str, Any]) -> dict[str, Any]:
    return {"type": "object", "properties": properties}


def string_list(max_items: int | None = None) -> dict[str, Any]:
    return array(string(), max_items=max_items)


LEVEL = ["low", "medium", "high"]
PRIORITY = ["critical", "high", "medium", "low"]
