"""Pydantic model for the pipeline configuration file."""

from __future__ import annotations

from pydantic import BaseModel, Field

from aria_pipeline.models.service_spec import ReasoningServiceSpec
from aria_pipeline.models.store_spec import PromptStoreSpec


class PipelineConfig(BaseModel):
    reasoning: ReasoningServiceSpec = Field(default_factory=ReasoningServiceSpec)
    prompt_store: PromptStoreSpec = Field(default_factory=PromptStoreSpec)
    log_level: str = "INFO"
