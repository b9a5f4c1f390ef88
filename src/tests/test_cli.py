import json
from pathlib import Path
from typing import Any

import pytest
from pydantic import JsonValue

from aria_pipeline import cli as cli_module
from aria_pipeline.errors import ReasoningParseError
from aria_pipeline.models import PipelineConfig
from aria_pipeline.models import PromptConfig
from aria_pipeline.models import ReasoningRequest
from aria_pipeline.orchestrator import Orchestrator
from aria_pipeline.prompt_store import InMemoryPromptStore
from aria_pipeline.reasoning_client import ReasoningClient


STEPS = [
    {"name": "Literature", "promptName": "literature-summarizer", "input": {"query": "graphene batteries"}},
    {"name": "Analysis", "promptName": "data-analyst", "input": {}},
]


class CannedClient(ReasoningClient):
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail

    async def invoke(self, request: ReasoningRequest) -> JsonValue:
        if self.fail:
            raise ReasoningParseError("not json")
        return {"from": request.prompt_name}


class OrchestratorFactory:
    def __init__(self, prompts: list[PromptConfig], client: ReasoningClient) -> None:
        self.prompts = prompts
        self.client = client
        self.configs: list[PipelineConfig] = []

    def __call__(self, config: PipelineConfig) -> Orchestrator:
        self.configs.append(config)
        return Orchestrator(config, prompt_store=InMemoryPromptStore(self.prompts), client=self.client)


def _prompts() -> list[PromptConfig]:
    return [
        PromptConfig(name="literature-summarizer", system_prompt="Summarize."),
        PromptConfig(name="data-analyst", system_prompt="Analyze."),
    ]


def _files_config(tmp_path: Path) -> Path:
    config_path = tmp_path / "pipeline.yaml"
    config_path.write_text(
        f"prompt_store:\n  kind: files\n  prompts_dir: {tmp_path / 'prompts'}\n",
        encoding="utf-8",
    )
    return config_path


def test_run_prints_steps_with_outputs(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    factory = OrchestratorFactory(_prompts(), CannedClient())
    monkeypatch.setattr(cli_module, "Orchestrator", factory)

    code = cli_module.main(["run", "--steps-json", json.dumps({"steps": STEPS})])

    assert code == 0
    result = json.loads(capsys.readouterr().out)
    assert [step["output"] for step in result["steps"]] == [
        {"from": "literature-summarizer"},
        {"from": "data-analyst"},
    ]
    assert len(factory.configs) == 1


def test_run_reads_steps_file_and_writes_output(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli_module, "Orchestrator", OrchestratorFactory(_prompts(), CannedClient()))
    steps_path = tmp_path / "steps.json"
    steps_path.write_text(json.dumps(STEPS), encoding="utf-8")
    out_path = tmp_path / "out" / "result.json"

    code = cli_module.main(["run", "--steps", str(steps_path), "--output", str(out_path)])

    assert code == 0
    written = json.loads(out_path.read_text(encoding="utf-8"))
    assert written == json.loads(capsys.readouterr().out)
    assert written["steps"][1]["promptName"] == "data-analyst"


def test_run_failure_exits_nonzero(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(cli_module, "Orchestrator", OrchestratorFactory(_prompts(), CannedClient(fail=True)))

    code = cli_module.main(["run", "--steps-json", json.dumps(STEPS)])

    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    assert "Literature" in captured.err
    assert "not json" in captured.err


def test_prompts_set_show_and_list_with_file_store(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config_path = _files_config(tmp_path)
    schema_path = tmp_path / "schema.json"
    schema: dict[str, Any] = {"name": "analyze", "parameters": {"type": "object"}}
    schema_path.write_text(json.dumps(schema), encoding="utf-8")
    prompt_path = tmp_path / "system.txt"
    prompt_path.write_text("Analyze the data.\n", encoding="utf-8")

    assert (
        cli_module.main(
            [
                "--config",
                str(config_path),
                "prompts",
                "set",
                "data-analyst",
                "--system-prompt-file",
                str(prompt_path),
                "--schema-file",
                str(schema_path),
            ]
        )
        == 0
    )
    assert (
        cli_module.main(["--config", str(config_path), "prompts", "set", "literature-summarizer", "--system-prompt", "Summarize."])
        == 0
    )
    capsys.readouterr()

    assert cli_module.main(["--config", str(config_path), "prompts", "show", "data-analyst"]) == 0
    shown = json.loads(capsys.readouterr().out)
    assert shown == {"name": "data-analyst", "system_prompt": "Analyze the data.", "output_schema": schema}

    assert cli_module.main(["--config", str(config_path), "prompts", "list"]) == 0
    listed = json.loads(capsys.readouterr().out)
    assert [prompt["name"] for prompt in listed] == ["data-analyst", "literature-summarizer"]


def test_prompts_show_missing_exits_nonzero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = cli_module.main(["--config", str(_files_config(tmp_path)), "prompts", "show", "nope"])

    assert code == 1
    assert "nope" in capsys.readouterr().err
