"""Pydantic model for one call to the reasoning service."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, JsonValue

from aria_pipeline.prompting import make_messages, make_user_content, schema_function_name, schema_parameters


class ReasoningRequest(BaseModel):
    prompt_name: str
    system_prompt: str
    payload: dict[str, JsonValue] = Field(default_factory=dict)
    output_schema: dict[str, Any] = Field(default_factory=dict)

    def user_content(self) -> str:
        return make_user_content(self.payload)

    def messages(self) -> list[dict[str, str]]:
        return make_messages(self.system_prompt, self.payload)

    def function_name(self) -> str:
        return schema_function_name(self.output_schema, self.prompt_name)

    def parameters_schema(self) -> dict[str, Any] | None:
        return schema_parameters(self.output_schema)

    def chat_body(self, model_name: str) -> dict[str, Any]:
        body: dict[str, Any] = {"model": model_name, "messages": self.messages()}
        if self.output_schema:
            body["function_call"] = "auto"
            body["functions"] = [self.output_schema]
        return body
