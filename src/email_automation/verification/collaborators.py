"""
Interfaces of the external collaborators used by the verification workflow.

The workflow depends only on these protocols; ImapMailbox and
PlaywrightBrowserLauncher are the production implementations, tests use
in-memory fakes.
"""

from typing import Any, Protocol, Sequence, runtime_checkable

from email_automation.models.mail_models import MailMessage, SearchCriteria


@runtime_checkable
class MailboxSession(Protocol):
    """A connected mailbox. Owned by exactly one workflow run."""

    async def search(self, criteria: SearchCriteria, limit: int = 10) -> Sequence[MailMessage]:
        """Most recent messages matching every criterion, newest first."""
        ...

    async def search_recent_from(self, sender: str, limit: int = 1) -> Sequence[MailMessage]:
        """Most recent messages from `sender`, newest first."""
        ...

    async def disconnect(self) -> None:
        ...


@runtime_checkable
class Mailbox(Protocol):
    """Factory for mailbox sessions."""

    async def connect(self) -> MailboxSession:
        """
        Raises:
            MailboxError: connection or login failed
        """
        ...


@runtime_checkable
class BrowserSession(Protocol):
    """A launched headless browser. Owned by exactly one workflow run."""

    async def navigate(self, url: str) -> Any:
        """Open `url` and return a page handle."""
        ...

    async def wait_for_completion_signal(self, page: Any, timeout: float) -> str:
        """Wait up to `timeout` seconds for the success marker and return its text."""
        ...

    async def close(self) -> None:
        ...


@runtime_checkable
class BrowserLauncher(Protocol):
    """Factory for browser sessions."""

    async def launch(self) -> BrowserSession:
        """
        Raises:
            BrowserAutomationError: the browser could not be started
        """
        ...
