"""
Exceptions raised by the cascading orchestrator.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProviderFailure:
    """One failed provider attempt within a cascade."""
    provider: str
    error_type: str
    message: str

    def as_dict(self) -> dict:
        return {"provider": self.provider, "error_type": self.error_type, "message": self.message}


class AllProvidersFailed(Exception):
    """
    Every configured provider failed for an operation without a local fallback.

    Raised with the last provider error as `__cause__`. Only thread
    summarization can surface this to callers; the other operations are
    answered by the local inference engine instead.
    """

    def __init__(self, operation: str, failures: list[ProviderFailure]):
        if failures:
            message = f"All providers failed for {operation}: " + ", ".join(f.provider for f in failures)
        else:
            message = f"No providers configured for {operation}"
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.failures = list(failures)
        self.details = {
            "operation": operation,
            "failures": [failure.as_dict() for failure in self.failures],
        }
