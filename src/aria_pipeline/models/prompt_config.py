"""Pydantic model for a stored prompt."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class PromptConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    system_prompt: str = Field(validation_alias=AliasChoices("system_prompt", "systemPrompt"))
    # Rows written by the dashboard store the schema as "function_schema".
    output_schema: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("output_schema", "outputSchema", "function_schema"),
    )

    @field_validator("output_schema", mode="before")
    @classmethod
    def _null_schema_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value
