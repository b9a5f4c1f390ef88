"""Input/output helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from aria_pipeline.models.pipeline_request import PipelineRequest


def parse_steps_json(text: str) -> PipelineRequest:
    """
    Accepts either {"steps": [...]} or a bare list of steps.
    """
    raw = json.loads(text)
    if isinstance(raw, list):
        raw = {"steps": raw}
    return PipelineRequest.model_validate(raw)


def load_steps(path: Path) -> PipelineRequest:
    if not path.exists():
        raise FileNotFoundError(path)
    return parse_steps_json(path.read_text(encoding="utf-8"))


def load_json_object(path: Path) -> dict[str, Any]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a JSON object.")
    return raw


def write_output(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
