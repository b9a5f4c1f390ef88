"""Helper for running pipelines."""

from __future__ import annotations

from typing import Optional

from aria_pipeline.engine import PipelineEngine
from aria_pipeline.models.pipeline_config import PipelineConfig
from aria_pipeline.models.pipeline_request import PipelineRequest, PipelineResponse
from aria_pipeline.models.pipeline_step import PipelineStep
from aria_pipeline.prompt_store import PromptStore, build_prompt_store
from aria_pipeline.reasoning_client import ReasoningClient, build_reasoning_client


class Orchestrator:
    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        *,
        prompt_store: PromptStore | None = None,
        client: ReasoningClient | None = None,
    ) -> None:
        self.config: PipelineConfig = config or PipelineConfig()
        self.prompt_store: PromptStore = prompt_store or build_prompt_store(self.config.prompt_store)
        self.client: ReasoningClient = client or build_reasoning_client(self.config.reasoning)

    def engine(self, steps: list[PipelineStep]) -> PipelineEngine:
        return PipelineEngine(steps, prompt_store=self.prompt_store, client=self.client)

    async def run(self, steps: list[PipelineStep]) -> list[PipelineStep]:
        return await self.engine(steps).run()

    async def run_request(self, request: PipelineRequest) -> PipelineResponse:
        return PipelineResponse(steps=await self.run(request.steps))
