"""
Verification workflow exceptions.

The four VerificationError kinds are distinct so callers can decide whether a
retry makes sense. MailboxError and BrowserAutomationError are raised by the
collaborators and translated by the workflow.
"""


class VerificationError(Exception):
    """
    Base exception for verification workflow failures.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NoVerificationLinkFound(VerificationError):
    """
    A fresh message from the sender arrived but contains no verification link.

    Not retried: the same message would be matched again.
    """
    pass


class VerificationTimedOut(VerificationError):
    """
    Polling reached the deadline without a fresh matching message.
    """
    pass


class AutomationFailed(VerificationError):
    """
    The browser could not complete verification (navigation error, missing
    completion signal, timeout). The browser error is the `__cause__`.
    """
    pass


class MailboxUnavailable(VerificationError):
    """
    The mailbox could not be reached or queried.
    """
    pass


class MailboxError(Exception):
    """
    Raised by mailbox collaborators on connection or query failures.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class BrowserAutomationError(Exception):
    """
    Raised by browser collaborators on launch, navigation or wait failures.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
