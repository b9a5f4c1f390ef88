"""Model types for pipeline configuration and runtime."""

from aria_pipeline.models.pipeline_config import PipelineConfig
from aria_pipeline.models.pipeline_request import PipelineRequest
from aria_pipeline.models.pipeline_request import PipelineResponse
from aria_pipeline.models.pipeline_step import PipelineStep
from aria_pipeline.models.prompt_config import PromptConfig
from aria_pipeline.models.reasoning_request import ReasoningRequest
from aria_pipeline.models.service_spec import ReasoningServiceSpec
from aria_pipeline.models.store_spec import PromptStoreSpec

__all__ = [
    "PipelineConfig",
    "PipelineRequest",
    "PipelineResponse",
    "PipelineStep",
    "PromptConfig",
    "PromptStoreSpec",
    "ReasoningRequest",
    "ReasoningServiceSpec",
]
