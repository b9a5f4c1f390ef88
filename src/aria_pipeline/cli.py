"""CLI entrypoint."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import anyio

from aria_pipeline.config import check_required_env, configure_logging, load_config
from aria_pipeline.errors import PipelineError
from aria_pipeline.io_utils import load_json_object, load_steps, parse_steps_json, write_output
from aria_pipeline.models.pipeline_config import PipelineConfig
from aria_pipeline.models.pipeline_request import PipelineRequest
from aria_pipeline.models.prompt_config import PromptConfig
from aria_pipeline.orchestrator import Orchestrator
from aria_pipeline.prompt_store import PromptStore, build_prompt_store


logger = logging.getLogger(__name__)


async def run_pipeline(orch: Orchestrator, request: PipelineRequest) -> dict[str, Any]:
    response = await orch.run_request(request)
    return response.to_wire()


async def list_prompts(store: PromptStore) -> list[dict[str, Any]]:
    return [prompt.model_dump() for prompt in await store.list_prompts()]


async def show_prompt(store: PromptStore, name: str) -> dict[str, Any] | None:
    prompt = await store.get(name)
    return prompt.model_dump() if prompt is not None else None


async def set_prompt(store: PromptStore, prompt: PromptConfig) -> None:
    await store.upsert(prompt)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="aria-pipeline")
    parser.add_argument("--config", type=str, default=None, help="Path to a YAML config file")
    parser.add_argument("--log-level", type=str, default=None)
    commands = parser.add_subparsers(dest="command", required=True)

    run_parser = commands.add_parser("run", help="Run a pipeline over a list of steps")
    steps_group = run_parser.add_mutually_exclusive_group(required=True)
    steps_group.add_argument("--steps", type=str, help="Path to a JSON file with the steps")
    steps_group.add_argument("--steps-json", type=str, help="Raw JSON steps")
    run_parser.add_argument("--output", type=str, default=None, help="Also write the result to this file")

    prompts_parser = commands.add_parser("prompts", help="Manage stored prompts")
    prompt_commands = prompts_parser.add_subparsers(dest="prompts_command", required=True)
    prompt_commands.add_parser("list")
    show_parser = prompt_commands.add_parser("show")
    show_parser.add_argument("name")
    set_parser = prompt_commands.add_parser("set")
    set_parser.add_argument("name")
    text_group = set_parser.add_mutually_exclusive_group(required=True)
    text_group.add_argument("--system-prompt", type=str)
    text_group.add_argument("--system-prompt-file", type=str)
    set_parser.add_argument("--schema-file", type=str, default=None, help="JSON file with the output schema")
    return parser


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _run_command(args: argparse.Namespace, config: PipelineConfig) -> int:
    if args.steps_json is not None:
        request = parse_steps_json(args.steps_json)
    else:
        request = load_steps(Path(args.steps))
    orch = Orchestrator(config)
    try:
        result = anyio.run(run_pipeline, orch, request)
    except PipelineError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    if args.output:
        write_output(Path(args.output), json.dumps(result, indent=2, ensure_ascii=False))
    _print_json(result)
    return 0


def _prompts_command(args: argparse.Namespace, config: PipelineConfig) -> int:
    store = build_prompt_store(config.prompt_store)
    if args.prompts_command == "list":
        _print_json(anyio.run(list_prompts, store))
        return 0
    if args.prompts_command == "show":
        prompt = anyio.run(show_prompt, store, args.name)
        if prompt is None:
            print(f"error: prompt {args.name!r} not found", file=sys.stderr)
            return 1
        _print_json(prompt)
        return 0

    if args.system_prompt_file is not None:
        system_prompt = Path(args.system_prompt_file).read_text(encoding="utf-8").strip()
    else:
        system_prompt = args.system_prompt
    output_schema = load_json_object(Path(args.schema_file)) if args.schema_file else {}
    prompt = PromptConfig(name=args.name, system_prompt=system_prompt, output_schema=output_schema)
    anyio.run(set_prompt, store, prompt)
    logger.info("Saved prompt %r", args.name)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(Path(args.config) if args.config else None)
    configure_logging(args.log_level or config.log_level)
    check_required_env(config)

    if args.command == "run":
        return _run_command(args, config)
    return _prompts_command(args, config)


if __name__ == "__main__":
    sys.exit(main())
