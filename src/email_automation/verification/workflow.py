"""
Email verification workflow.

Polls a mailbox for a fresh message from a sender, extracts the verification
link and code, and completes the verification page in a headless browser.

States:
    Idle -> Polling -> MatchFound -> Verifying -> Completed
                    |            |             -> AutomationFailed
                    |            -> NoVerificationLinkFound
                    -> VerificationTimedOut

Every acquired resource (mailbox session, browser session) is registered on an
AsyncExitStack as soon as it exists, so it is released exactly once whichever
state the run ends in. The browser is only launched in Verifying.
"""

import asyncio
from contextlib import AsyncExitStack
from datetime import datetime
from typing import Awaitable, Callable, Optional

import structlog

from email_automation.models.mail_models import (
    MailMessage,
    VerificationOutcome,
    VerificationTask,
    utcnow,
)
from email_automation.monitoring.metrics import (
    verification_outcomes_total,
    verification_polls_total,
)
from email_automation.verification.collaborators import (
    BrowserLauncher,
    Mailbox,
    MailboxSession,
)
from email_automation.verification.exceptions import (
    AutomationFailed,
    MailboxError,
    MailboxUnavailable,
    NoVerificationLinkFound,
    VerificationError,
    VerificationTimedOut,
)
from email_automation.verification.extraction import extract_artifacts


logger = structlog.get_logger(__name__)

OUTCOME_LABELS = {
    NoVerificationLinkFound: "no_link",
    VerificationTimedOut: "timed_out",
    AutomationFailed: "automation_failed",
    MailboxUnavailable: "mailbox_unavailable",
}


class VerificationWorkflow:
    """
    Runs verification tasks against a mailbox and a browser launcher.

    Args:
        mailbox: Mailbox collaborator; one session is opened per run
        browser_launcher: Browser collaborator; launched only once a link is found
        poll_interval: Seconds between mailbox queries
        completion_timeout: Seconds to wait for the success marker after navigation
        clock: Returns the current aware datetime
        sleep: Coroutine used to wait between polls
    """

    def __init__(
        self,
        mailbox: Mailbox,
        browser_launcher: BrowserLauncher,
        poll_interval: float = 5.0,
        completion_timeout: float = 10.0,
        clock: Callable[[], datetime] = utcnow,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self.mailbox = mailbox
        self.browser_launcher = browser_launcher
        self.poll_interval = poll_interval
        self.completion_timeout = completion_timeout
        self._clock = clock
        self._sleep = sleep

    async def run(self, task: VerificationTask) -> VerificationOutcome:
        """
        Execute one verification run.

        Args:
            task: Sender, absolute deadline and freshness window

        Returns:
            VerificationOutcome with the link followed and the completion text

        Raises:
            MailboxUnavailable: mailbox connection or query failed
            VerificationTimedOut: deadline reached without a fresh message
            NoVerificationLinkFound: fresh message carries no verification link
            AutomationFailed: browser could not complete the page
        """
        started = self._clock()
        log = logger.bind(sender=task.sender, deadline=task.deadline.isoformat())
        log.info("Verification started")

        try:
            self._check_deadline(task, polls=0)
            async with AsyncExitStack() as stack:
                session = await self._open_mailbox()
                stack.push_async_callback(session.disconnect)

                message, polls = await self._poll(session, task)
                log.info("Verification message found", subject=message.subject, polls=polls)

                artifacts = extract_artifacts(message)
                if artifacts.link is None:
                    raise NoVerificationLinkFound(
                        "Message contains no verification link",
                        details={"sender": task.sender, "subject": message.subject},
                    )

                completion_text = await self._complete(stack, artifacts.link)

        except VerificationError as e:
            verification_outcomes_total.labels(outcome=OUTCOME_LABELS.get(type(e), "error")).inc()
            log.warning("Verification failed", error_type=type(e).__name__, error=e.message)
            raise

        elapsed = max(0.0, (self._clock() - started).total_seconds())
        verification_outcomes_total.labels(outcome="completed").inc()
        log.info("Verification completed", link=artifacts.link, elapsed_seconds=elapsed)

        return VerificationOutcome(
            sender=task.sender,
            link=artifacts.link,
            code=artifacts.code,
            completion_text=completion_text,
            message_subject=message.subject,
            polls=polls,
            elapsed_seconds=elapsed,
        )

    async def _open_mailbox(self) -> MailboxSession:
        try:
            return await self.mailbox.connect()
        except MailboxError as e:
            raise MailboxUnavailable(
                f"Mailbox unavailable: {e.message}",
                details=e.details,
            ) from e
        except Exception as e:
            raise MailboxUnavailable(
                f"Mailbox unavailable: {e}",
                details={"error_type": type(e).__name__},
            ) from e

    def _check_deadline(self, task: VerificationTask, polls: int) -> float:
        """Seconds left before the deadline; raises once it has passed."""
        remaining = (task.deadline - self._clock()).total_seconds()
        if remaining <= 0:
            raise VerificationTimedOut(
                f"No fresh message from {task.sender} before the deadline",
                details={"sender": task.sender, "polls": polls},
            )
        return remaining

    async def _poll(self, session: MailboxSession, task: VerificationTask) -> tuple[MailMessage, int]:
        """
        Query until a fresh message arrives or the deadline passes.

        The deadline is checked before every query. Query failures of any kind
        surface as MailboxUnavailable.
        """
        polls = 0
        while True:
            remaining = self._check_deadline(task, polls)

            polls += 1
            verification_polls_total.inc()
            try:
                messages = await asyncio.wait_for(
                    session.search_recent_from(task.sender, limit=1),
                    timeout=remaining,
                )
            except asyncio.TimeoutError as e:
                raise VerificationTimedOut(
                    f"Mailbox query for {task.sender} did not finish before the deadline",
                    details={"sender": task.sender, "polls": polls},
                ) from e
            except MailboxError as e:
                raise MailboxUnavailable(
                    f"Mailbox query failed: {e.message}",
                    details={"sender": task.sender, "polls": polls, **e.details},
                ) from e
            except Exception as e:
                raise MailboxUnavailable(
                    f"Mailbox query failed: {e}",
                    details={"sender": task.sender, "polls": polls, "error_type": type(e).__name__},
                ) from e

            now = self._clock()
            fresh = self._first_fresh(messages, now, task)
            if fresh is not None:
                return fresh, polls

            remaining = (task.deadline - now).total_seconds()
            if remaining > 0:
                logger.debug("No fresh message yet", sender=task.sender, polls=polls)
                await self._sleep(min(self.poll_interval, remaining))

    @staticmethod
    def _first_fresh(messages, now: datetime, task: VerificationTask) -> Optional[MailMessage]:
        # age equal to the window is still fresh
        for message in messages:
            if now - message.date <= task.freshness_window:
                return message
        return None

    async def _complete(self, stack: AsyncExitStack, link: str) -> str:
        """Launch a browser, follow `link` and wait for the success marker."""
        try:
            browser = await self.browser_launcher.launch()
            stack.push_async_callback(browser.close)

            page = await browser.navigate(link)
            text = await browser.wait_for_completion_signal(page, self.completion_timeout)
        except Exception as e:
            raise AutomationFailed(
                f"Browser automation failed: {e}",
                details={"link": link, "error_type": type(e).__name__},
            ) from e

        return text
