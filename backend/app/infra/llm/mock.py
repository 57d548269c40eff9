from __future__ import annotations

from app.infra.ports.llm import LLMPort


class MockLLM(LLMPort):
    """Offline stand-in used when no API key is configured.

    Instructions that demand JSON get an empty array, so the HTML pipeline
    runs end to end and reports that no questions were found.
    """

    provider_name = "mock"
    model_name = "mock-llm"

    def complete(
        self,
        *,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        model: str | None = None,
    ) -> str:
        if system_prompt and "JSON" in system_prompt:
            return "[]"
        return f"[mock] {prompt[:80]}"
