"""Pydantic model for a single pipeline step."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, JsonValue, PrivateAttr

from aria_pipeline.errors import PipelineStateError


class PipelineStep(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    prompt_name: str = Field(alias="promptName")
    input: dict[str, JsonValue] = Field(default_factory=dict)
    output: JsonValue = None

    _executed: bool = PrivateAttr(default=False)

    @property
    def has_output(self) -> bool:
        return self._executed or self.output is not None

    def record_output(self, value: JsonValue) -> None:
        if self._executed:
            raise PipelineStateError(f"Step {self.name!r} already has an output.", step_name=self.name)
        self.output = value
        self._executed = True
