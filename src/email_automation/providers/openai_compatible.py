"""
Adapter for OpenAI-compatible chat-completions APIs (OpenAI, Groq).

POST {base_url}/chat/completions with a bearer token. Groq exposes the same
dialect under https://api.groq.com/openai/v1, so both providers share this
adapter and differ only in their ProviderEntry.
"""

import time
from typing import Any, Dict

import structlog

from email_automation.models.provider_models import CompletionRequest, CompletionResponse
from email_automation.providers.base_adapter import BaseProviderAdapter
from email_automation.providers.exceptions import ProviderResponseError


logger = structlog.get_logger(__name__)


class OpenAICompatibleAdapter(BaseProviderAdapter):
    """
    Chat-completions adapter.

    Request:
    {
        "model": "gpt-3.5-turbo",
        "messages": [{"role": "system", ...}, {"role": "user", "content": "..."}],
        "temperature": 0.1,
        "max_tokens": 1500,
        "response_format": {"type": "json_object"}   # JSON operations only
    }

    Response:
    {
        "model": "...",
        "choices": [{"message": {"content": "..."}, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 50, "completion_tokens": 150}
    }
    """

    def _default_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.entry.api_key}"}

    def _build_payload(self, request: CompletionRequest) -> Dict[str, Any]:
        messages = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.append({"role": "user", "content": request.prompt})

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }
        if request.json_mode:
            payload["response_format"] = {"type": "json_object"}
        return payload

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        start_time = time.perf_counter()
        data = await self._post_json("/chat/completions", self._build_payload(request))

        try:
            content = data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderResponseError(
                f"Unexpected chat-completions body from {self.name}",
                details={"provider": self.name, "keys": sorted(data) if isinstance(data, dict) else None},
            ) from e

        usage = data.get("usage") or {}
        return CompletionResponse(
            content=content,
            model=data.get("model", self.model),
            latency_ms=int((time.perf_counter() - start_time) * 1000),
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
        )

    async def health_check(self) -> bool:
        """GET /models with the configured key."""
        try:
            client = await self._get_client()
            response = await client.get("/models", headers=self._default_headers(), timeout=5.0)
            response.raise_for_status()
            return True
        except Exception as e:
            logger.warning("Provider health check failed", provider=self.name, error=str(e))
            return False
