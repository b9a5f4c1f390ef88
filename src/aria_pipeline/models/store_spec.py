"""Pydantic model for prompt store configuration."""

from __future__ import annotations

from pydantic import BaseModel


class PromptStoreSpec(BaseModel):
    kind: str = "supabase"  # "supabase", "files" or "memory"
    url_env: str = "SUPABASE_URL"
    key_env: str = "SUPABASE_KEY"
    table: str = "prompts"
    prompts_dir: str = "prompts"
