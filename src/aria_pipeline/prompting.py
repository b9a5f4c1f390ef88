"""Request composition helpers."""

from __future__ import annotations

import json
from typing import Any, Mapping

from pydantic import JsonValue


def make_user_content(payload: Mapping[str, JsonValue]) -> str:
    """
    Serializes a step input as a JSON object. Consistency helps prefix-caching backends.
    """
    return json.dumps(dict(payload), ensure_ascii=False, sort_keys=True)


def make_messages(system_prompt: str, payload: Mapping[str, JsonValue]) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": make_user_content(payload)},
    ]


def schema_function_name(output_schema: Mapping[str, Any], fallback: str) -> str:
    name = output_schema.get("name")
    if isinstance(name, str) and name:
        return name
    return fallback.replace("-", "_")


def schema_parameters(output_schema: Mapping[str, Any]) -> dict[str, Any] | None:
    """
    Returns the JSON schema of the expected output.
    Accepts a function-call schema ({name, description, parameters}) or a bare JSON schema.
    """
    if not output_schema:
        return None
    parameters = output_schema.get("parameters")
    if isinstance(parameters, dict):
        return parameters
    if "type" in output_schema or "properties" in output_schema:
        return dict(output_schema)
    return None
