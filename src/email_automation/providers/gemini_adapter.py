"""
Adapter for the Google Gemini generateContent API.

POST {base_url}/models/{model}:generateContent?key=...
"""

import time
from typing import Any, Dict

import structlog

from email_automation.models.provider_models import CompletionRequest, CompletionResponse
from email_automation.providers.base_adapter import BaseProviderAdapter
from email_automation.providers.exceptions import ProviderResponseError


logger = structlog.get_logger(__name__)


class GeminiAdapter(BaseProviderAdapter):
    """
    generateContent adapter.

    Response:
    {
        "candidates": [{"content": {"parts": [{"text": "..."}]}, "finishReason": "STOP"}],
        "usageMetadata": {"promptTokenCount": 50, "candidatesTokenCount": 150}
    }
    """

    def _key_params(self) -> Dict[str, str]:
        return {"key": self.entry.api_key or ""}

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        start_time = time.perf_counter()
        generation_config: Dict[str, Any] = {
            "temperature": request.temperature,
            "maxOutputTokens": request.max_tokens,
        }
        if request.json_mode:
            generation_config["responseMimeType"] = "application/json"

        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": request.prompt}]}],
            "generationConfig": generation_config,
        }
        if request.system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": request.system_prompt}]}

        data = await self._post_json(
            f"/models/{self.model}:generateContent",
            payload,
            params=self._key_params(),
        )

        try:
            parts = data["candidates"][0]["content"]["parts"]
            content = "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderResponseError(
                f"Unexpected generateContent body from {self.name}",
                details={"provider": self.name, "finish_reason": _finish_reason(data)},
            ) from e

        usage = data.get("usageMetadata") or {}
        return CompletionResponse(
            content=content,
            model=data.get("modelVersion", self.model),
            latency_ms=int((time.perf_counter() - start_time) * 1000),
            prompt_tokens=usage.get("promptTokenCount"),
            completion_tokens=usage.get("candidatesTokenCount"),
        )

    async def health_check(self) -> bool:
        """GET /models/{model}."""
        try:
            client = await self._get_client()
            response = await client.get(f"/models/{self.model}", params=self._key_params(), timeout=5.0)
            response.raise_for_status()
            return True
        except Exception as e:
            # str(e) would include the key in the URL
            logger.warning("Provider health check failed", provider=self.name, error_type=type(e).__name__)
            return False


def _finish_reason(data: Any) -> Any:
    try:
        return data["candidates"][0].get("finishReason")
    except (KeyError, IndexError, TypeError, AttributeError):
        return None
