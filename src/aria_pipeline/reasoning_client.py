"""Clients for the remote reasoning service."""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping

import httpx
from openai import APIConnectionError
from pydantic import JsonValue
from pydantic_ai import Agent, StructuredDict
from pydantic_ai.exceptions import ModelHTTPError, UnexpectedModelBehavior
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider
from pydantic_ai.settings import ModelSettings

from aria_pipeline.errors import ReasoningParseError, ReasoningTransportError
from aria_pipeline.json_utils import parse_json_reply
from aria_pipeline.models.reasoning_request import ReasoningRequest
from aria_pipeline.models.service_spec import ReasoningServiceSpec
from aria_pipeline.retry import RETRYABLE_STATUS_CODES, call_with_retries


logger = logging.getLogger(__name__)


class ReasoningClient:
    async def invoke(self, request: ReasoningRequest) -> JsonValue:
        raise NotImplementedError("ReasoningClient.invoke must be implemented by subclasses.")


class HttpReasoningClient(ReasoningClient):
    """
    Posts a chat request with a function schema and returns the JSON response body as-is.
    """

    def __init__(
        self,
        *,
        url: str,
        api_key: str | None,
        model_name: str,
        timeout_seconds: float = 60.0,
        max_retries: int = 2,
        backoff_seconds: float = 0.5,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url: str = url
        self._api_key: str | None = api_key
        self._model_name: str = model_name
        self._timeout: float = timeout_seconds
        self._max_retries: int = max_retries
        self._backoff_seconds: float = backoff_seconds
        self._http_client: httpx.AsyncClient | None = http_client

    @property
    def url(self) -> str:
        return self._url

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def invoke(self, request: ReasoningRequest) -> JsonValue:
        body = request.chat_body(self._model_name)
        return await call_with_retries(
            lambda: self._post(body),
            retries=self._max_retries,
            base_seconds=self._backoff_seconds,
        )

    async def _send(self, client: httpx.AsyncClient, body: dict[str, Any]) -> httpx.Response:
        try:
            return await client.post(self._url, json=body, headers=self._headers(), timeout=self._timeout)
        except httpx.TimeoutException as exc:
            raise ReasoningTransportError(f"Request to {self._url} timed out.", retryable=True) from exc
        except httpx.HTTPError as exc:
            raise ReasoningTransportError(f"Request to {self._url} failed: {exc}", retryable=True) from exc

    async def _post(self, body: dict[str, Any]) -> JsonValue:
        if self._http_client is not None:
            response = await self._send(self._http_client, body)
        else:
            async with httpx.AsyncClient() as client:
                response = await self._send(client, body)

        if not response.is_success:
            raise ReasoningTransportError(
                f"Reasoning service returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
                retryable=response.status_code in RETRYABLE_STATUS_CODES,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise ReasoningParseError(f"Reasoning service returned a non-JSON body: {response.text[:200]!r}") from exc


class PydanticAIReasoningClient(ReasoningClient):
    """
    Runs each request through a pydantic-ai agent on an OpenAI-compatible endpoint.
    The output schema becomes the agent's structured output tool.
    """

    def __init__(
        self,
        model: OpenAIChatModel,
        *,
        model_settings: ModelSettings | None = None,
        max_retries: int = 2,
        backoff_seconds: float = 0.5,
    ) -> None:
        self.model: OpenAIChatModel = model
        self.model_settings: ModelSettings | None = model_settings
        self._max_retries: int = max_retries
        self._backoff_seconds: float = backoff_seconds

    def _build_agent(self, request: ReasoningRequest) -> Agent[None, Any]:
        parameters = request.parameters_schema()
        output_type: Any = str
        if parameters is not None:
            description = request.output_schema.get("description")
            output_type = StructuredDict(
                parameters,
                name=request.function_name(),
                description=description if isinstance(description, str) else None,
            )
        return Agent(
            self.model,
            system_prompt=request.system_prompt,
            output_type=output_type,
            model_settings=self.model_settings,
        )

    async def invoke(self, request: ReasoningRequest) -> JsonValue:
        return await call_with_retries(
            lambda: self._run(request),
            retries=self._max_retries,
            base_seconds=self._backoff_seconds,
        )

    async def _run(self, request: ReasoningRequest) -> JsonValue:
        agent = self._build_agent(request)
        try:
            result = await agent.run(request.user_content())
        except ModelHTTPError as exc:
            raise ReasoningTransportError(
                f"Reasoning service returned HTTP {exc.status_code}: {exc}",
                status_code=exc.status_code,
                retryable=exc.status_code in RETRYABLE_STATUS_CODES,
            ) from exc
        except UnexpectedModelBehavior as exc:
            raise ReasoningParseError(f"Reasoning service returned unusable output: {exc}") from exc
        except (APIConnectionError, httpx.HTTPError) as exc:
            raise ReasoningTransportError(f"Reasoning service request failed: {exc}", retryable=True) from exc
        output = result.output
        if isinstance(output, str):
            return parse_json_reply(output)
        return output


def build_model(spec: ReasoningServiceSpec, api_key: str | None, base_url: str) -> OpenAIChatModel:
    provider = OpenAIProvider(base_url=base_url, api_key=api_key or "noop")
    return OpenAIChatModel(spec.model_name, provider=provider)


def build_model_settings(spec: ReasoningServiceSpec) -> ModelSettings:
    settings: ModelSettings = {}
    if spec.temperature is not None:
        settings["temperature"] = spec.temperature
    if spec.max_tokens is not None:
        settings["max_tokens"] = spec.max_tokens
    settings["timeout"] = spec.timeout_seconds
    return settings


def build_reasoning_client(
    spec: ReasoningServiceSpec,
    environ: Mapping[str, str] | None = None,
) -> ReasoningClient:
    env = os.environ if environ is None else environ
    api_key = env.get(spec.api_key_env)
    url = spec.resolve_url(env)
    if not api_key:
        logger.warning("%s is not set; reasoning calls will be unauthenticated.", spec.api_key_env)

    if spec.provider == "functions-http":
        return HttpReasoningClient(
            url=url,
            api_key=api_key,
            model_name=spec.model_name,
            timeout_seconds=spec.timeout_seconds,
            max_retries=spec.max_retries,
            backoff_seconds=spec.backoff_seconds,
        )
    if spec.provider == "openai-compatible":
        return PydanticAIReasoningClient(
            build_model(spec, api_key, url),
            model_settings=build_model_settings(spec),
            max_retries=spec.max_retries,
            backoff_seconds=spec.backoff_seconds,
        )
    raise ValueError(f"Unknown reasoning provider: {spec.provider!r}")
