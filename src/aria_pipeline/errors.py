"""Error types raised by the pipeline and its collaborators."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for failures that abort a pipeline run."""

    code = "pipeline_error"

    def __init__(self, message: str, *, step_name: str | None = None) -> None:
        super().__init__(message)
        self.step_name: str | None = step_name


class PromptNotFoundError(PipelineError):
    code = "prompt_not_found"

    def __init__(self, step_name: str, prompt_name: str) -> None:
        super().__init__(
            f"Prompt {prompt_name!r} not found (step {step_name!r}).",
            step_name=step_name,
        )
        self.prompt_name: str = prompt_name


class ReasoningServiceError(PipelineError):
    code = "reasoning_service_error"

    def __init__(self, step_name: str, prompt_name: str, cause: "ReasoningClientError") -> None:
        super().__init__(
            f"Reasoning service failed for step {step_name!r} (prompt {prompt_name!r}): {cause}",
            step_name=step_name,
        )
        self.prompt_name: str = prompt_name
        self.cause: ReasoningClientError = cause


class PromptStoreError(PipelineError):
    code = "prompt_store_error"


class PipelineStateError(PipelineError):
    code = "invalid_state"


class ReasoningClientError(Exception):
    """Failure reported by a reasoning client for a single call."""

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable: bool = retryable


class ReasoningTransportError(ReasoningClientError):
    def __init__(self, message: str, *, status_code: int | None = None, retryable: bool = False) -> None:
        super().__init__(message, retryable=retryable)
        self.status_code: int | None = status_code


class ReasoningParseError(ReasoningClientError):
    def __init__(self, message: str) -> None:
        # Malformed bodies are not transient.
        super().__init__(message, retryable=False)
