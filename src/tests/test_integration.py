import os

import anyio
import pytest

from aria_pipeline.models import PipelineConfig
from aria_pipeline.models import PipelineStep
from aria_pipeline.models import PromptConfig
from aria_pipeline.models import ReasoningServiceSpec
from aria_pipeline.orchestrator import Orchestrator
from aria_pipeline.prompt_store import InMemoryPromptStore


def _require_env(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        pytest.skip(f"Missing required env var: {name}")
    return value


def test_pipeline_runs_against_live_service() -> None:
    _require_env("GEMINI_API_KEY")
    provider = os.environ.get("ARIA_REASONING_PROVIDER") or "functions-http"
    model_name = os.environ.get("ARIA_MODEL") or "gemini-2.5-pro"

    config = PipelineConfig(reasoning=ReasoningServiceSpec(provider=provider, model_name=model_name))
    store = InMemoryPromptStore(
        [
            PromptConfig(
                name="literature-summarizer",
                system_prompt="Summarize what is known about the query. Reply with JSON only.",
                output_schema={
                    "name": "summarize",
                    "parameters": {
                        "type": "object",
                        "properties": {"summary": {"type": "string"}},
                        "required": ["summary"],
                    },
                },
            )
        ]
    )
    orchestrator = Orchestrator(config, prompt_store=store)
    steps = [PipelineStep(name="Literature", prompt_name="literature-summarizer", input={"query": "graphene"})]

    result = anyio.run(orchestrator.run, steps)

    assert result[0].has_output
    assert result[0].output is not None
