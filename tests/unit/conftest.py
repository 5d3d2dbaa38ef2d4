"""Unit test fixtures (mocks and stubs).

Provides mock adapters and HTTP transports for testing without external
services.
"""

import json
from typing import Callable, Optional
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from email_automation.models.provider_models import ProviderEntry
from email_automation.providers.prompt_builder import PromptBuilder


@pytest.fixture
def prompt_builder() -> PromptBuilder:
    """Real prompt builder over the bundled templates."""
    return PromptBuilder(body_truncation_limit=8000)


@pytest.fixture
def make_entry():
    """Factory fixture to create ProviderEntry for a given adapter kind."""
    def _create(
        name: str = "groq",
        kind: str = "openai_compatible",
        model: str = "test-model",
        base_url: str = "https://provider.test/v1",
        api_key: Optional[str] = "test-key",
        timeout_seconds: float = 5.0,
    ) -> ProviderEntry:
        return ProviderEntry(
            name=name,
            kind=kind,
            model=model,
            base_url=base_url,
            api_key=api_key,
            timeout_seconds=timeout_seconds,
        )

    return _create


@pytest.fixture
def mock_adapter():
    """Factory fixture for orchestrator tests: an adapter mock with async capabilities.

    Usage:
        adapter = mock_adapter("groq", analyze=AsyncMock(side_effect=ProviderTimeoutError("x")))
    """
    def _create(name: str, timeout: float = 1.0, **methods) -> MagicMock:
        adapter = MagicMock()
        # `name` is reserved by the Mock constructor
        adapter.name = name
        adapter.timeout = timeout
        adapter.analyze = AsyncMock()
        adapter.generate_response = AsyncMock(return_value=f"Reply from {name}")
        adapter.extract_actions = AsyncMock()
        adapter.summarize_thread = AsyncMock()
        adapter.health_check = AsyncMock(return_value=True)
        adapter.close = AsyncMock()
        for method_name, mock in methods.items():
            setattr(adapter, method_name, mock)
        return adapter

    return _create


@pytest.fixture
def json_transport():
    """Factory fixture: httpx.MockTransport answering with a fixed status and JSON body.

    Every request is appended to the returned `requests` list.
    """
    def _create(body, status_code: int = 200, handler: Optional[Callable] = None):
        requests: list[httpx.Request] = []

        def _handle(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if handler is not None:
                return handler(request)
            if isinstance(body, (dict, list)):
                return httpx.Response(status_code, json=body)
            return httpx.Response(status_code, text=body)

        return httpx.MockTransport(_handle), requests

    return _create


def request_json(request: httpx.Request) -> dict:
    return json.loads(request.content.decode("utf-8"))


@pytest.fixture
def read_request_json():
    return request_json
