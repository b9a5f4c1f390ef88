"""Pipeline execution: resolve each step's prompt, call the reasoning service, record the output."""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import JsonValue

from aria_pipeline.errors import (
    PipelineStateError,
    PromptNotFoundError,
    PromptStoreError,
    ReasoningClientError,
    ReasoningServiceError,
)
from aria_pipeline.models.pipeline_step import PipelineStep
from aria_pipeline.models.prompt_config import PromptConfig
from aria_pipeline.models.reasoning_request import ReasoningRequest
from aria_pipeline.prompt_store import PromptStore
from aria_pipeline.reasoning_client import ReasoningClient


logger = logging.getLogger(__name__)


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class PipelineEngine:
    """
    Runs an ordered list of steps serially against a reasoning service.

    Each step's output is recorded on the step in place before the next step starts. The first
    unresolved prompt or failed call aborts the run; steps after it are never touched. An engine
    runs once; build a new one (for example over the steps that have no output yet) to retry.
    """

    def __init__(
        self,
        steps: list[PipelineStep],
        *,
        prompt_store: PromptStore,
        client: ReasoningClient,
    ) -> None:
        for step in steps:
            if step.has_output:
                raise ValueError(f"Step {step.name!r} already has an output; pass only steps that have not run.")
        self.steps: list[PipelineStep] = steps
        self._prompt_store: PromptStore = prompt_store
        self._client: ReasoningClient = client
        self.state: RunState = RunState.IDLE
        self.failed_step: PipelineStep | None = None

    async def run(self) -> list[PipelineStep]:
        if self.state is not RunState.IDLE:
            raise PipelineStateError(f"Pipeline run already {self.state.value}; construct a new engine to run again.")
        self.state = RunState.RUNNING
        total = len(self.steps)
        for index, step in enumerate(self.steps, start=1):
            try:
                await self._run_step(step, index=index, total=total)
            except BaseException:
                self.state = RunState.FAILED
                self.failed_step = step
                raise
        self.state = RunState.SUCCEEDED
        return self.steps

    async def _run_step(self, step: PipelineStep, *, index: int, total: int) -> None:
        logger.info("Step %d/%d %r: resolving prompt %r", index, total, step.name, step.prompt_name)
        prompt = await self._resolve_prompt(step)
        request = self._build_request(prompt, step)
        step.record_output(await self._invoke(step, request))
        logger.info("Step %d/%d %r: completed", index, total, step.name)

    async def _resolve_prompt(self, step: PipelineStep) -> PromptConfig:
        try:
            prompt = await self._prompt_store.get(step.prompt_name)
        except PromptStoreError as exc:
            if exc.step_name is None:
                exc.step_name = step.name
            logger.error("Prompt lookup %r failed for step %r: %s", step.prompt_name, step.name, exc)
            raise
        if prompt is None:
            logger.error("Prompt %r not found for step %r", step.prompt_name, step.name)
            raise PromptNotFoundError(step.name, step.prompt_name)
        return prompt

    def _build_request(self, prompt: PromptConfig, step: PipelineStep) -> ReasoningRequest:
        return ReasoningRequest(
            prompt_name=prompt.name,
            system_prompt=prompt.system_prompt,
            payload=step.input,
            output_schema=prompt.output_schema,
        )

    async def _invoke(self, step: PipelineStep, request: ReasoningRequest) -> JsonValue:
        try:
            return await self._client.invoke(request)
        except ReasoningClientError as exc:
            logger.error("Reasoning call failed for step %r: %s", step.name, exc)
            raise ReasoningServiceError(step.name, step.prompt_name, exc) from exc
