"""
Custom exceptions for the provider adapter layer.

Every adapter failure surfaces as a ProviderError subclass so the orchestrator
can log the failure kind and move on to the next provider. None of these reach
API callers for operations that have a local fallback.
"""


class ProviderError(Exception):
    """
    Base exception for all provider adapter errors.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ProviderConnectionError(ProviderError):
    """
    Raised when the vendor endpoint cannot be reached.

    Includes network errors, DNS failures, refused connections.
    Retried with backoff up to PROVIDER_MAX_RETRIES.
    """
    pass


class ProviderTimeoutError(ProviderConnectionError):
    """
    Raised when the vendor HTTP request exceeds its timeout.
    """
    pass


class ProviderAuthenticationError(ProviderError):
    """
    Raised on 401/403: missing, invalid or revoked credentials.

    Never retried.
    """
    pass


class ProviderRateLimitError(ProviderError):
    """
    Raised on 429 responses.

    Not retried against the same provider; the orchestrator moves on instead.
    """
    pass


class ProviderGenerationError(ProviderError):
    """
    Raised when the vendor returns an error status during generation.
    """
    pass


class ProviderModelNotAvailableError(ProviderGenerationError):
    """
    Raised on 404: the configured model does not exist for this vendor.
    """
    pass


class ProviderResponseError(ProviderError):
    """
    Raised when the vendor answered but the answer is unusable.

    Examples:
    - HTTP body is not JSON or lacks the generated text
    - Generated text contains no recoverable structure
    """
    pass
