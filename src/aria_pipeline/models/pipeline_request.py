"""Pydantic models for the pipeline request and response bodies."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from aria_pipeline.models.pipeline_step import PipelineStep


class PipelineRequest(BaseModel):
    steps: list[PipelineStep] = Field(default_factory=list)

    @field_validator("steps")
    @classmethod
    def _steps_have_no_output(cls, steps: list[PipelineStep]) -> list[PipelineStep]:
        for step in steps:
            if step.has_output:
                raise ValueError(f"Step {step.name!r} already has an output; submit only steps that have not run.")
        return steps


class PipelineResponse(BaseModel):
    steps: list[PipelineStep] = Field(default_factory=list)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
