"""
Adapter for the Anthropic Messages API.

POST {base_url}/v1/messages with `x-api-key` and `anthropic-version` headers.
The Messages API has no JSON mode; JSON is requested in the prompt itself.
"""

import time
from typing import Any, Dict

import structlog

from email_automation.models.provider_models import CompletionRequest, CompletionResponse
from email_automation.providers.base_adapter import BaseProviderAdapter
from email_automation.providers.exceptions import ProviderResponseError


logger = structlog.get_logger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicAdapter(BaseProviderAdapter):
    """
    Messages API adapter.

    Response:
    {
        "model": "claude-3-5-haiku-20241022",
        "content": [{"type": "text", "text": "..."}],
        "stop_reason": "end_turn",
        "usage": {"input_tokens": 50, "output_tokens": 150}
    }
    """

    def _default_headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.entry.api_key or "",
            "anthropic-version": ANTHROPIC_VERSION,
        }

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        start_time = time.perf_counter()
        payload: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        if request.system_prompt:
            payload["system"] = request.system_prompt

        data = await self._post_json("/v1/messages", payload)

        blocks = data.get("content") if isinstance(data, dict) else None
        if not isinstance(blocks, list):
            raise ProviderResponseError(
                f"Unexpected messages body from {self.name}",
                details={"provider": self.name},
            )
        content = "".join(
            block.get("text", "") for block in blocks
            if isinstance(block, dict) and block.get("type") == "text"
        )

        usage = data.get("usage") or {}
        return CompletionResponse(
            content=content,
            model=data.get("model", self.model),
            latency_ms=int((time.perf_counter() - start_time) * 1000),
            prompt_tokens=usage.get("input_tokens"),
            completion_tokens=usage.get("output_tokens"),
        )

    async def health_check(self) -> bool:
        """GET /v1/models with the configured key."""
        try:
            client = await self._get_client()
            response = await client.get("/v1/models", headers=self._default_headers(), timeout=5.0)
            response.raise_for_status()
            return True
        except Exception as e:
            logger.warning("Provider health check failed", provider=self.name, error=str(e))
            return False
