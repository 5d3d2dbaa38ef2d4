"""
Email verification: mailbox polling, artifact extraction, browser completion.
"""

from email_automation.verification.browser import PlaywrightBrowserLauncher, PlaywrightBrowserSession
from email_automation.verification.collaborators import (
    BrowserLauncher,
    BrowserSession,
    Mailbox,
    MailboxSession,
)
from email_automation.verification.exceptions import (
    AutomationFailed,
    BrowserAutomationError,
    MailboxError,
    MailboxUnavailable,
    NoVerificationLinkFound,
    VerificationError,
    VerificationTimedOut,
)
from email_automation.verification.extraction import (
    extract_artifacts,
    extract_verification_code,
    extract_verification_links,
)
from email_automation.verification.mailbox import ImapMailbox, ImapMailboxSession, parse_message
from email_automation.verification.workflow import VerificationWorkflow

__all__ = [
    "AutomationFailed",
    "BrowserAutomationError",
    "BrowserLauncher",
    "BrowserSession",
    "ImapMailbox",
    "ImapMailboxSession",
    "Mailbox",
    "MailboxError",
    "MailboxSession",
    "MailboxUnavailable",
    "NoVerificationLinkFound",
    "PlaywrightBrowserLauncher",
    "PlaywrightBrowserSession",
    "VerificationError",
    "VerificationTimedOut",
    "VerificationWorkflow",
    "extract_artifacts",
    "extract_verification_code",
    "extract_verification_links",
    "parse_message",
]
