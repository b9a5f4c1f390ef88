"""Public package exports."""

from aria_pipeline.engine import PipelineEngine
from aria_pipeline.engine import RunState
from aria_pipeline.errors import PipelineError
from aria_pipeline.errors import PromptNotFoundError
from aria_pipeline.errors import ReasoningServiceError
from aria_pipeline.models import PipelineStep
from aria_pipeline.models import PromptConfig
from aria_pipeline.orchestrator import Orchestrator
from aria_pipeline.prompt_store import InMemoryPromptStore
from aria_pipeline.prompt_store import PromptStore
from aria_pipeline.reasoning_client import ReasoningClient

__all__ = [
    "InMemoryPromptStore",
    "Orchestrator",
    "PipelineEngine",
    "PipelineError",
    "PipelineStep",
    "PromptConfig",
    "PromptNotFoundError",
    "PromptStore",
    "ReasoningClient",
    "ReasoningServiceError",
    "RunState",
]
