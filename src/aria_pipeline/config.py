"""Configuration loading."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

import yaml
from dotenv import load_dotenv

from aria_pipeline.models.pipeline_config import PipelineConfig


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def load_config(path: Path | None = None, *, env_files: list[Path] | None = None) -> PipelineConfig:
    """
    Loads `.env` files (without overriding the process environment), then the YAML config file if given.
    """
    for env_file in env_files if env_files is not None else [Path(".env"), Path(".env.local")]:
        load_dotenv(env_file, override=False)
    if path is None:
        return PipelineConfig()
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping.")
    return PipelineConfig.model_validate(raw)


def required_env_vars(config: PipelineConfig) -> list[str]:
    names = [config.reasoning.api_key_env]
    if config.prompt_store.kind == "supabase":
        names.extend([config.prompt_store.url_env, config.prompt_store.key_env])
    return names


def check_required_env(config: PipelineConfig, environ: Mapping[str, str] | None = None) -> list[str]:
    env = os.environ if environ is None else environ
    missing = [name for name in required_env_vars(config) if not env.get(name)]
    if missing:
        logger.warning(
            "Missing required environment variables: %s. Check your .env file or deployment configuration.",
            ", ".join(missing),
        )
    return missing


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
