"""
Ollama adapter: the self-hosted step of the cascade.

Structured operations pass their JSON schema as Ollama's `format` field so
the server constrains decoding; reply drafts are plain text.
"""

import time
from typing import Any, Dict

import structlog

from email_automation.models.provider_models import CompletionRequest, CompletionResponse
from email_automation.providers.base_adapter import BaseProviderAdapter
from email_automation.providers.exceptions import ProviderConnectionError, ProviderResponseError


logger = structlog.get_logger(__name__)


class OllamaAdapter(BaseProviderAdapter):
    """Talks to `/api/generate` (completions) and `/api/tags` (health, models)."""

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """
        Non-streaming POST /api/generate.

        Token counts come from `prompt_eval_count` and `eval_count`; an empty
        `response` field is treated as a malformed answer.
        """
        start_time = time.perf_counter()

        payload: Dict[str, Any] = {
            "model": self.model,
            "prompt": request.prompt,
            "stream": False,
            "options": {
                "temperature": request.temperature,
                "num_predict": request.max_tokens,
            },
        }
        if request.system_prompt:
            payload["system"] = request.system_prompt
        if request.format_schema:
            payload["format"] = request.format_schema
        elif request.json_mode:
            payload["format"] = "json"

        logger.debug(
            "Sending generation request to Ollama",
            model=self.model,
            prompt_length=len(request.prompt),
            json_mode=request.json_mode,
        )

        data = await self._post_json("/api/generate", payload)

        content = data.get("response", "") if isinstance(data, dict) else ""
        if not content:
            raise ProviderResponseError(
                "Empty response from Ollama",
                details={"provider": self.name, "done": data.get("done") if isinstance(data, dict) else None},
            )

        return CompletionResponse(
            content=content,
            model=data.get("model", self.model),
            latency_ms=int((time.perf_counter() - start_time) * 1000),
            prompt_tokens=data.get("prompt_eval_count"),
            completion_tokens=data.get("eval_count"),
        )

    async def health_check(self) -> bool:
        """GET /api/tags; False on any failure."""
        try:
            client = await self._get_client()
            response = await client.get("/api/tags", timeout=5.0)
            response.raise_for_status()
            return True
        except Exception as e:
            logger.warning("Provider health check failed", provider=self.name, error=str(e))
            return False

    async def list_models(self) -> list[str]:
        """Names of the models pulled on the Ollama server."""
        try:
            client = await self._get_client()
            response = await client.get("/api/tags", timeout=10.0)
            response.raise_for_status()
            data = response.json()
        except Exception as e:
            logger.error("Failed to list models", provider=self.name, error=str(e))
            raise ProviderConnectionError(
                f"Failed to list models: {e}",
                details={"provider": self.name},
            ) from e

        return [m["name"] for m in data.get("models", [])]
