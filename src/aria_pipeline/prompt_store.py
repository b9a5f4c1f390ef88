"""Prompt stores: lookup and management of named prompt configurations."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping

import frontmatter
from postgrest.exceptions import APIError
from pydantic import ValidationError
from supabase import AsyncClient, acreate_client

from aria_pipeline.errors import PromptStoreError
from aria_pipeline.models.prompt_config import PromptConfig
from aria_pipeline.models.store_spec import PromptStoreSpec


logger = logging.getLogger(__name__)


class PromptStore:
    async def get(self, name: str) -> PromptConfig | None:
        raise NotImplementedError("PromptStore.get must be implemented by subclasses.")

    async def upsert(self, prompt: PromptConfig) -> None:
        raise NotImplementedError("PromptStore.upsert must be implemented by subclasses.")

    async def list_prompts(self) -> list[PromptConfig]:
        raise NotImplementedError("PromptStore.list_prompts must be implemented by subclasses.")


class InMemoryPromptStore(PromptStore):
    def __init__(self, prompts: list[PromptConfig] | None = None) -> None:
        self._prompts: dict[str, PromptConfig] = {prompt.name: prompt for prompt in prompts or []}

    async def get(self, name: str) -> PromptConfig | None:
        return self._prompts.get(name)

    async def upsert(self, prompt: PromptConfig) -> None:
        self._prompts[prompt.name] = prompt

    async def list_prompts(self) -> list[PromptConfig]:
        return [self._prompts[name] for name in sorted(self._prompts)]


def load_prompt_file(path: Path) -> PromptConfig:
    """
    Reads a markdown prompt: frontmatter carries name/output_schema, the body is the system prompt.
    """
    post = frontmatter.load(str(path))
    metadata: dict[str, Any] = dict(post.metadata)
    metadata.setdefault("name", path.stem)
    metadata["system_prompt"] = post.content.strip()
    return PromptConfig.model_validate(metadata)


def dump_prompt_file(prompt: PromptConfig) -> str:
    post = frontmatter.Post(prompt.system_prompt, name=prompt.name, output_schema=prompt.output_schema)
    return frontmatter.dumps(post) + "\n"


class FilePromptStore(PromptStore):
    def __init__(self, prompt_roots: list[Path]) -> None:
        self.prompt_roots = prompt_roots
        self._cache: dict[str, PromptConfig] = {}
        self._index: dict[str, Path] | None = None

    def _build_index(self) -> dict[str, Path]:
        index: dict[str, Path] = {}
        for root in self.prompt_roots:
            if not root.exists():
                continue
            for path in sorted(root.rglob("*.md")):
                name = str(frontmatter.load(str(path)).metadata.get("name") or path.stem)
                if name in index:
                    continue
                index[name] = path
        return index

    def _get_index(self) -> dict[str, Path]:
        if self._index is None:
            self._index = self._build_index()
        return self._index

    async def get(self, name: str) -> PromptConfig | None:
        if name in self._cache:
            return self._cache[name]
        path = self._get_index().get(name)
        if path is None:
            return None
        prompt = load_prompt_file(path)
        self._cache[name] = prompt
        return prompt

    async def upsert(self, prompt: PromptConfig) -> None:
        if not self.prompt_roots:
            raise PromptStoreError("No prompt directory configured.")
        index = self._get_index()
        path = index.get(prompt.name) or self.prompt_roots[0] / f"{prompt.name}.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_prompt_file(prompt), encoding="utf-8")
        index[prompt.name] = path
        self._cache[prompt.name] = prompt

    async def list_prompts(self) -> list[PromptConfig]:
        names = sorted(self._get_index())
        prompts: list[PromptConfig] = []
        for name in names:
            prompt = await self.get(name)
            if prompt is not None:
                prompts.append(prompt)
        return prompts


def _prompt_from_row(row: Mapping[str, Any]) -> PromptConfig:
    try:
        return PromptConfig.model_validate(row)
    except ValidationError as exc:
        raise PromptStoreError(f"Stored prompt {row.get('name')!r} is malformed: {exc}") from exc


class SupabasePromptStore(PromptStore):
    """
    Prompts kept in a Supabase table with columns name, system_prompt and function_schema.
    """

    def __init__(
        self,
        *,
        url: str | None = None,
        key: str | None = None,
        table: str = "prompts",
        client: AsyncClient | None = None,
    ) -> None:
        self._url: str | None = url
        self._key: str | None = key
        self._table: str = table
        self._client: AsyncClient | None = client

    async def _get_client(self) -> AsyncClient:
        if self._client is None:
            if not self._url or not self._key:
                raise PromptStoreError("Supabase URL and key are required for the prompt store.")
            self._client = await acreate_client(self._url, self._key)
        return self._client

    async def get(self, name: str) -> PromptConfig | None:
        client = await self._get_client()
        try:
            response = await client.table(self._table).select("*").eq("name", name).limit(1).execute()
        except APIError as exc:
            raise PromptStoreError(f"Prompt lookup for {name!r} failed: {exc.message}") from exc
        rows = response.data or []
        if not rows:
            return None
        return _prompt_from_row(rows[0])

    async def upsert(self, prompt: PromptConfig) -> None:
        client = await self._get_client()
        row = {
            "name": prompt.name,
            "system_prompt": prompt.system_prompt,
            "function_schema": prompt.output_schema,
        }
        try:
            await client.table(self._table).upsert(row, on_conflict="name").execute()
        except APIError as exc:
            raise PromptStoreError(f"Saving prompt {prompt.name!r} failed: {exc.message}") from exc

    async def list_prompts(self) -> list[PromptConfig]:
        client = await self._get_client()
        try:
            response = await client.table(self._table).select("*").order("name").execute()
        except APIError as exc:
            raise PromptStoreError(f"Listing prompts failed: {exc.message}") from exc
        return [_prompt_from_row(row) for row in response.data or []]


def build_prompt_store(spec: PromptStoreSpec, environ: Mapping[str, str] | None = None) -> PromptStore:
    env = os.environ if environ is None else environ
    if spec.kind == "supabase":
        return SupabasePromptStore(url=env.get(spec.url_env), key=env.get(spec.key_env), table=spec.table)
    if spec.kind == "files":
        return FilePromptStore([Path(spec.prompts_dir)])
    if spec.kind == "memory":
        logger.warning("Using an empty in-memory prompt store; prompts will not persist.")
        return InMemoryPromptStore()
    raise ValueError(f"Unknown prompt store kind: {spec.kind!r}")
