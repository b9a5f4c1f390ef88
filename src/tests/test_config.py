import logging
import os
from pathlib import Path

import pytest

from aria_pipeline.config import check_required_env
from aria_pipeline.config import load_config
from aria_pipeline.config import required_env_vars
from aria_pipeline.models import PipelineConfig
from aria_pipeline.models import PromptStoreSpec
from aria_pipeline.models import ReasoningServiceSpec


def test_load_config_without_file_returns_defaults() -> None:
    config = load_config(None, env_files=[])

    assert config == PipelineConfig()
    assert config.reasoning.model_name == "gemini-2.5-pro"
    assert config.reasoning.url == "https://api.gemini.com/v2/chat"
    assert config.prompt_store.kind == "supabase"
    assert config.prompt_store.table == "prompts"


def test_load_config_reads_yaml(tmp_path: Path) -> None:
    path = tmp_path / "pipeline.yaml"
    path.write_text(
        """
reasoning:
  provider: openai-compatible
  url: http://localhost:11434/v1
  model_name: llama3
  max_retries: 0
prompt_store:
  kind: files
  prompts_dir: prompts
log_level: DEBUG
""",
        encoding="utf-8",
    )

    config = load_config(path, env_files=[])

    assert config.reasoning.provider == "openai-compatible"
    assert config.reasoning.model_name == "llama3"
    assert config.reasoning.max_retries == 0
    assert config.reasoning.api_key_env == "GEMINI_API_KEY"
    assert config.prompt_store.kind == "files"
    assert config.log_level == "DEBUG"


def test_load_config_rejects_missing_and_non_mapping(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml", env_files=[])

    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path, env_files=[])


def test_load_config_loads_env_file_without_overriding(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("ARIA_TEST_FROM_FILE=file\nARIA_TEST_PRESET=file\n", encoding="utf-8")
    monkeypatch.delenv("ARIA_TEST_FROM_FILE", raising=False)
    monkeypatch.setenv("ARIA_TEST_PRESET", "process")

    load_config(None, env_files=[env_file])

    try:
        assert os.environ["ARIA_TEST_FROM_FILE"] == "file"
        assert os.environ["ARIA_TEST_PRESET"] == "process"
    finally:
        os.environ.pop("ARIA_TEST_FROM_FILE", None)


def test_required_env_vars_depend_on_store_kind() -> None:
    supabase_config = PipelineConfig()
    files_config = PipelineConfig(prompt_store=PromptStoreSpec(kind="files"))

    assert required_env_vars(supabase_config) == ["GEMINI_API_KEY", "SUPABASE_URL", "SUPABASE_KEY"]
    assert required_env_vars(files_config) == ["GEMINI_API_KEY"]


def test_check_required_env_warns_about_missing(caplog: pytest.LogCaptureFixture) -> None:
    config = PipelineConfig()

    with caplog.at_level(logging.WARNING, logger="aria_pipeline.config"):
        missing = check_required_env(config, {"GEMINI_API_KEY": "abc"})

    assert missing == ["SUPABASE_URL", "SUPABASE_KEY"]
    assert "SUPABASE_URL, SUPABASE_KEY" in caplog.text


def test_check_required_env_silent_when_complete(caplog: pytest.LogCaptureFixture) -> None:
    config = PipelineConfig(prompt_store=PromptStoreSpec(kind="memory"))

    with caplog.at_level(logging.WARNING, logger="aria_pipeline.config"):
        missing = check_required_env(config, {"GEMINI_API_KEY": "abc"})

    assert missing == []
    assert caplog.text == ""


def test_resolve_url_prefers_environment() -> None:
    spec = ReasoningServiceSpec(url="http://configured")

    assert spec.resolve_url({}) == "http://configured"
    assert spec.resolve_url({"GEMINI_API_URL": "http://env"}) == "http://env"
    assert spec.resolve_url({"GEMINI_API_URL": ""}) == "http://configured"
