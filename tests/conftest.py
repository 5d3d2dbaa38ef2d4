"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests:
settings, sample messages, and in-memory fakes of the mailbox and browser
collaborators.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from email_automation.config import Settings
from email_automation.models.analysis_models import AnalysisRequest, ThreadMessage
from email_automation.models.enums import AnalysisDepth
from email_automation.models.mail_models import MailMessage, SearchCriteria


FIXED_NOW = datetime(2026, 3, 2, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    No provider keys are set, so no remote provider is enabled unless a test
    opts in:
        def test_something(test_settings):
            test_settings.GROQ_API_KEY = "gsk-test"
    """
    return Settings(
        # === Application ===
        APP_NAME="Email Automation Service (Test)",
        APP_VERSION="0.1.0",
        ENVIRONMENT="development",
        DEBUG=True,
        LOG_LEVEL="DEBUG",

        # === Providers ===
        PROVIDER_ORDER=["groq", "openai", "anthropic", "gemini", "huggingface", "ollama"],
        PROVIDER_TIMEOUT_SECONDS=5.0,
        PROVIDER_TIMEOUTS={},
        PROVIDER_MAX_RETRIES=1,
        GROQ_API_KEY=None,
        OPENAI_API_KEY=None,
        ANTHROPIC_API_KEY=None,
        GEMINI_API_KEY=None,
        HUGGINGFACE_API_TOKEN=None,
        OLLAMA_ENABLED=False,

        # === Mailbox ===
        EMAIL_HOST="imap.example.com",
        EMAIL_USER="robot@example.com",
        EMAIL_PASSWORD="secret",

        # === API ===
        API_KEYS=[],
        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def now() -> datetime:
    """Fixed, timezone-aware 'current time' for deterministic tests."""
    return FIXED_NOW


@pytest.fixture
def create_analysis_request():
    """Factory fixture to create AnalysisRequest with custom text.

    Usage:
        def test_something(create_analysis_request):
            request = create_analysis_request(text="Please call me", depth=AnalysisDepth.QUICK)
    """
    def _create(
        text: str = "Hello, could you send the quarterly report?",
        subject: Optional[str] = None,
        sender: Optional[str] = "client@example.com",
        depth: AnalysisDepth = AnalysisDepth.COMPREHENSIVE,
    ) -> AnalysisRequest:
        return AnalysisRequest(text=text, subject=subject, sender=sender, depth=depth)

    return _create


@pytest.fixture
def create_mail_message():
    """Factory fixture to create MailMessage with custom body and date."""
    def _create(
        text: Optional[str] = None,
        html: Optional[str] = None,
        date: datetime = FIXED_NOW,
        subject: str = "Confirm your email",
        sender: str = "noreply@service.example",
    ) -> MailMessage:
        return MailMessage(subject=subject, sender=sender, date=date, text=text, html=html)

    return _create


@pytest.fixture
def sample_thread() -> list[ThreadMessage]:
    """Three-message thread, oldest first."""
    return [
        ThreadMessage(
            sender="alice@example.com",
            subject="Launch plan",
            date=FIXED_NOW - timedelta(days=2),
            text="Can we move the launch to Friday? Marketing needs two more days.",
        ),
        ThreadMessage(
            sender="bob@example.com",
            subject="Re: Launch plan",
            date=FIXED_NOW - timedelta(days=1),
            text="Friday works for engineering. I will update the release checklist.",
        ),
        ThreadMessage(
            sender="alice@example.com",
            subject="Re: Launch plan",
            date=FIXED_NOW,
            text="Great, Friday it is. Please confirm with support by Thursday.",
        ),
    ]


# ============================================================================
# Collaborator fakes
# ============================================================================


class FakeClock:
    """Manually advanced clock; `sleep` advances it instead of waiting."""

    def __init__(self, start: datetime):
        self.current = start
        self.sleeps: list[float] = []

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.advance(seconds)


class FakeMailboxSession:
    """Returns queued search results in order; the last one repeats.

    A queued exception instance is raised instead of returned.
    """

    def __init__(self, responses=None, clock: Optional[FakeClock] = None, query_seconds: float = 0.0):
        self.responses = list(responses) if responses is not None else [[]]
        self.clock = clock
        self.query_seconds = query_seconds
        self.search_calls = 0
        self.disconnect_calls = 0
        self.criteria = []

    async def search(self, criteria, limit: int = 10):
        self.criteria.append(criteria)
        index = min(self.search_calls, len(self.responses) - 1)
        self.search_calls += 1
        if self.clock is not None and self.query_seconds:
            self.clock.advance(self.query_seconds)
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        return response[:limit]

    async def search_recent_from(self, sender: str, limit: int = 1):
        return await self.search(SearchCriteria(sender=sender), limit)

    async def disconnect(self) -> None:
        self.disconnect_calls += 1


class FakeMailbox:
    def __init__(self, session: Optional[FakeMailboxSession] = None, connect_error: Optional[Exception] = None):
        self.session = session or FakeMailboxSession()
        self.connect_error = connect_error
        self.connect_calls = 0

    async def connect(self) -> FakeMailboxSession:
        self.connect_calls += 1
        if self.connect_error is not None:
            raise self.connect_error
        return self.session

    async def latest_from(self, sender: str, limit: int = 5):
        session = await self.connect()
        try:
            return await session.search_recent_from(sender, limit)
        finally:
            await session.disconnect()

    async def search(self, criteria, limit: int = 10):
        session = await self.connect()
        try:
            return await session.search(criteria, limit)
        finally:
            await session.disconnect()


class FakeBrowserSession:
    def __init__(
        self,
        completion_text: str = "Email verified successfully",
        navigate_error: Optional[Exception] = None,
        wait_error: Optional[Exception] = None,
    ):
        self.completion_text = completion_text
        self.navigate_error = navigate_error
        self.wait_error = wait_error
        self.navigated: list[str] = []
        self.wait_timeouts: list[float] = []
        self.close_calls = 0

    async def navigate(self, url: str):
        self.navigated.append(url)
        if self.navigate_error is not None:
            raise self.navigate_error
        return {"url": url}

    async def wait_for_completion_signal(self, page, timeout: float) -> str:
        self.wait_timeouts.append(timeout)
        if self.wait_error is not None:
            raise self.wait_error
        return self.completion_text

    async def close(self) -> None:
        self.close_calls += 1


class FakeBrowserLauncher:
    def __init__(self, session: Optional[FakeBrowserSession] = None, launch_error: Optional[Exception] = None):
        self.session = session or FakeBrowserSession()
        self.launch_error = launch_error
        self.launch_calls = 0

    async def launch(self) -> FakeBrowserSession:
        self.launch_calls += 1
        if self.launch_error is not None:
            raise self.launch_error
        return self.session


@pytest.fixture
def fake_clock(now: datetime) -> FakeClock:
    return FakeClock(now)


@pytest.fixture
def make_mailbox():
    """Factory fixture: make_mailbox(responses, clock=None, connect_error=None, query_seconds=0)."""
    def _create(responses=None, clock=None, connect_error=None, query_seconds: float = 0.0) -> FakeMailbox:
        session = FakeMailboxSession(responses, clock=clock, query_seconds=query_seconds)
        return FakeMailbox(session, connect_error=connect_error)

    return _create


@pytest.fixture
def make_browser_launcher():
    """Factory fixture: make_browser_launcher(completion_text=..., navigate_error=..., wait_error=..., launch_error=...)."""
    def _create(
        completion_text: str = "Email verified successfully",
        navigate_error: Optional[Exception] = None,
        wait_error: Optional[Exception] = None,
        launch_error: Optional[Exception] = None,
    ) -> FakeBrowserLauncher:
        session = FakeBrowserSession(completion_text, navigate_error=navigate_error, wait_error=wait_error)
        return FakeBrowserLauncher(session, launch_error=launch_error)

    return _create
