"""JSON parsing helpers for model replies."""

from __future__ import annotations

import json

from pydantic import JsonValue

from aria_pipeline.errors import ReasoningParseError


def parse_json_reply(text: str) -> JsonValue:
    """
    Parse a model reply as JSON.
    Falls back to the first embedded JSON object for models that wrap JSON in extra text.
    """
    stripped = text.strip()
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        pass

    decoder = json.JSONDecoder()
    start = stripped.find("{")
    while start != -1:
        try:
            value, _end = decoder.raw_decode(stripped, start)
        except json.JSONDecodeError:
            start = stripped.find("{", start + 1)
            continue
        return value
    raise ReasoningParseError("No JSON object found in model output.")
