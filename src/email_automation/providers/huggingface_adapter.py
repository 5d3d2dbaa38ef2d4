"""
Adapter for the Hugging Face hosted inference API (text-generation task).

POST {base_url}/models/{model} with a bearer token. The API has no system
role or JSON mode, so the system prompt is prepended to the user prompt.
"""

import time
from typing import Any, Dict

import structlog

from email_automation.models.provider_models import CompletionRequest, CompletionResponse
from email_automation.providers.base_adapter import BaseProviderAdapter
from email_automation.providers.exceptions import ProviderGenerationError, ProviderResponseError


logger = structlog.get_logger(__name__)


class HuggingFaceAdapter(BaseProviderAdapter):
    """
    Text-generation adapter.

    Response is either [{"generated_text": "..."}] or {"generated_text": "..."};
    a model that is still loading answers {"error": "...", "estimated_time": 20}.
    """

    def _default_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.entry.api_key}"}

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        start_time = time.perf_counter()
        prompt = request.prompt
        if request.system_prompt:
            prompt = f"{request.system_prompt}\n\n{request.prompt}"

        payload: Dict[str, Any] = {
            "inputs": prompt,
            "parameters": {
                "max_new_tokens": request.max_tokens,
                "temperature": max(request.temperature, 0.01),
                "return_full_text": False,
            },
            "options": {"wait_for_model": True},
        }
        data = await self._post_json(f"/models/{self.model}", payload)

        if isinstance(data, dict) and "error" in data:
            raise ProviderGenerationError(
                f"{self.name} error: {data['error']}",
                details={"provider": self.name, "estimated_time": data.get("estimated_time")},
            )

        item = data[0] if isinstance(data, list) and data else data
        if not isinstance(item, dict) or "generated_text" not in item:
            raise ProviderResponseError(
                f"Unexpected text-generation body from {self.name}",
                details={"provider": self.name},
            )

        return CompletionResponse(
            content=str(item["generated_text"]),
            model=self.model,
            latency_ms=int((time.perf_counter() - start_time) * 1000),
        )

    async def health_check(self) -> bool:
        """GET /models/{model} (model status)."""
        try:
            client = await self._get_client()
            response = await client.get(f"/models/{self.model}", headers=self._default_headers(), timeout=5.0)
            response.raise_for_status()
            return True
        except Exception as e:
            logger.warning("Provider health check failed", provider=self.name, error=str(e))
            return False
