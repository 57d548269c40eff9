from __future__ import annotations

import logging

import httpx

from app.core.errors import UpstreamError
from app.infra.ports.llm import LLMPort

logger = logging.getLogger(__name__)


class OpenAIChatLLM(LLMPort):
    """Chat Completions client. Each call is a fresh, single-turn conversation."""

    provider_name = "openai"

    def __init__(
        self,
        *,
        api_key: str,
        model_name: str,
        base_url: str = "https://api.openai.com/v1",
        timeout_seconds: int = 0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.base_url = base_url.rstrip("/")
        # 0 disables the timeout entirely.
        self.timeout_seconds = max(0, int(timeout_seconds))
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout_seconds or None,
            headers={"Authorization": f"Bearer {self.api_key}"},
            transport=self._transport,
        )

    def complete(
        self,
        *,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        model: str | None = None,
    ) -> str:
        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload: dict[str, object] = {"model": model or self.model_name, "messages": messages}
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        try:
            with self._client() as client:
                resp = client.post("/chat/completions", json=payload)
        except httpx.HTTPError as exc:
            raise UpstreamError(f"OpenAI API connection error: {exc}") from exc

        if resp.status_code >= 400:
            raise UpstreamError(f"OpenAI API error ({resp.status_code}): {resp.text[:500]}")

        try:
            body = resp.json()
            content = body["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise UpstreamError("OpenAI response has no message content") from exc

        if not isinstance(content, str):
            raise UpstreamError("OpenAI response content is not text")

        usage = body.get("usage") or {}
        logger.debug(
            "Completion done: model=%s prompt_tokens=%s completion_tokens=%s",
            payload["model"],
            usage.get("prompt_tokens"),
            usage.get("completion_tokens"),
        )
        return content
