"""
Parsing-specific exceptions.

Parsing stages report their result as a ParseOutcome; an exception is raised
only when an outcome is turned into a result model and nothing usable was
recovered. Adapters wrap it into ProviderResponseError so the orchestrator
moves on to the next provider.
"""

from typing import Any


class ParseError(Exception):
    """
    Base exception for all parsing errors.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize parse error.

        Args:
            message: Human-readable error description
            details: Structured error data for logging/metrics
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class UnparseableResponseError(ParseError):
    """
    Neither the structured stages nor keyword recovery produced a usable payload.
    """

    def __init__(self, message: str, raw_content: str | None = None, errors: list[str] | None = None):
        """
        Initialize unparseable response error.

        Args:
            message: Error description
            raw_content: Raw provider text (first 500 chars are kept)
            errors: Messages collected by the failed stages
        """
        details: dict[str, Any] = {}
        if raw_content:
            details["content_snippet"] = raw_content[:500]
        if errors:
            details["errors"] = errors[:10]
        super().__init__(message, details)
