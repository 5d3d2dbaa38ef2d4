"""Integration test fixtures (application wiring with mocked collaborators).

The FastAPI app runs in-process with TestClient. Provider HTTP traffic goes
through httpx.MockTransport into real adapters; the mailbox and browser are
the in-memory fakes from the shared conftest.
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from email_automation.api.dependencies import (
    get_browser_launcher,
    get_mailbox,
    get_orchestrator,
    get_settings,
)
from email_automation.main import app
from email_automation.models.provider_models import ProviderConfig
from email_automation.orchestration.orchestrator import CascadingOrchestrator
from email_automation.providers.prompt_builder import PromptBuilder


PROVIDER_ANALYSIS = {
    "category": "support",
    "priority": "high",
    "sentiment": "negative",
    "urgency_score": 8,
    "key_topics": ["login"],
    "action_items": ["Reset the password"],
    "summary": "Customer cannot log in.",
    "requires_human_review": False,
    "detected_language": "en",
    "confidence": 0.88,
}

PROVIDER_ACTIONS = {
    "action_items": [{"task": "Send the signed contract", "deadline": "Friday", "priority": "high"}],
}

PROVIDER_SUMMARY = {
    "summary": "The launch moves to Friday.",
    "key_points": ["Marketing needs two more days"],
    "participants": ["alice@example.com", "bob@example.com"],
    "next_actions": ["Confirm with support by Thursday"],
}

PROVIDER_REPLY = "Hi, thanks for reaching out. I have reset your password."


def _chat_completion(content: str) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "model": "llama3-test",
            "choices": [{"message": {"content": content}, "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 100, "completion_tokens": 50},
        },
    )


def chat_completions_handler(request: httpx.Request) -> httpx.Response:
    """Answer like an OpenAI-compatible vendor, picking the payload from the prompt."""
    if request.method == "GET":
        return httpx.Response(200, json={"data": [{"id": "llama3-test"}]})

    prompt = json.loads(request.content)["messages"][-1]["content"]
    if prompt.startswith("Summarize this email thread"):
        return _chat_completion(json.dumps(PROVIDER_SUMMARY))
    if prompt.startswith("Extract action items"):
        return _chat_completion(json.dumps(PROVIDER_ACTIONS))
    if prompt.startswith("Generate a"):
        return _chat_completion(PROVIDER_REPLY)
    return _chat_completion(json.dumps(PROVIDER_ANALYSIS))


@pytest.fixture
def make_orchestrator(test_settings):
    """Factory fixture: orchestrator with a groq adapter on a mock transport.

    Usage:
        orchestrator = make_orchestrator()                 # provider answers
        orchestrator = make_orchestrator(status_code=503)  # provider always fails
        orchestrator = make_orchestrator(remote=False)     # local engine only
    """
    def _create(remote: bool = True, status_code: int = 200) -> CascadingOrchestrator:
        if not remote:
            return CascadingOrchestrator([])

        def _handle(request: httpx.Request) -> httpx.Response:
            if status_code != 200:
                return httpx.Response(status_code, json={"error": {"message": "unavailable"}})
            return chat_completions_handler(request)

        test_settings.GROQ_API_KEY = "gsk-test"
        return CascadingOrchestrator.from_config(
            ProviderConfig.from_settings(test_settings),
            PromptBuilder(),
            transport=httpx.MockTransport(_handle),
        )

    return _create


@pytest.fixture
def override_dependencies(test_settings, make_orchestrator, make_mailbox, make_browser_launcher):
    """Swap application singletons for test doubles.

    Usage:
        def test_something(client, override_dependencies):
            deps = override_dependencies(mailbox=make_mailbox([[message]]))
            client.post(...)
            assert deps["mailbox"].connect_calls == 1
    """
    def _override(orchestrator=None, mailbox=None, browser_launcher=None) -> dict:
        deps = {
            "settings": test_settings,
            "orchestrator": orchestrator or make_orchestrator(),
            "mailbox": mailbox or make_mailbox(),
            "browser_launcher": browser_launcher or make_browser_launcher(),
        }
        app.dependency_overrides[get_settings] = lambda: deps["settings"]
        app.dependency_overrides[get_orchestrator] = lambda: deps["orchestrator"]
        app.dependency_overrides[get_mailbox] = lambda: deps["mailbox"]
        app.dependency_overrides[get_browser_launcher] = lambda: deps["browser_launcher"]
        return deps

    yield _override
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    """TestClient that returns 500 responses instead of re-raising server errors."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def api_headers(test_settings) -> dict:
    """Enable API key checks and return matching headers."""
    test_settings.API_KEYS = ["integration-key"]
    return {"X-API-Key": "integration-key"}
