"""
Abstract base adapter for remote AI providers.

Defines the uniform capability interface (analyze, generate_response,
extract_actions, summarize_thread) and implements it once on top of a single
vendor hook, `complete()`. Concrete adapters only translate a
CompletionRequest into their vendor's HTTP call and read the generated text
back; prompt construction and response parsing are shared.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence

import httpx
import structlog

from email_automation.models.analysis_models import (
    ActionItemsResult,
    AnalysisRequest,
    AnalysisResult,
    ThreadMessage,
    ThreadSummary,
)
from email_automation.models.enums import Tone
from email_automation.models.provider_models import (
    CompletionRequest,
    CompletionResponse,
    ProviderEntry,
)
from email_automation.monitoring.metrics import parse_outcomes_total
from email_automation.parsing.exceptions import UnparseableResponseError
from email_automation.parsing.response_parser import (
    ParseOutcome,
    build_action_items_result,
    build_analysis_result,
    build_thread_summary,
    parse_action_items,
    parse_analysis,
    parse_thread_summary,
)
from email_automation.providers.exceptions import (
    ProviderAuthenticationError,
    ProviderConnectionError,
    ProviderGenerationError,
    ProviderModelNotAvailableError,
    ProviderRateLimitError,
    ProviderResponseError,
    ProviderTimeoutError,
)
from email_automation.providers.prompt_builder import PromptBuilder


logger = structlog.get_logger(__name__)


class BaseProviderAdapter(ABC):
    """
    Abstract base class for provider adapters.

    All concrete implementations (OpenAI-compatible, Anthropic, Gemini,
    Hugging Face, Ollama) inherit from this and implement `complete()` and
    `health_check()`.

    Responsibilities:
    - Own a pooled httpx.AsyncClient for the vendor base URL
    - Map HTTP failures to ProviderError subclasses
    - Connection-level retries for timeouts, network errors and 5xx

    Does NOT handle:
    - Falling back to another provider (that's the orchestrator's job)
    - Enforcing the review invariant (also the orchestrator)
    """

    def __init__(
        self,
        entry: ProviderEntry,
        prompt_builder: PromptBuilder,
        max_retries: int = 1,
        connection_limits: Optional[httpx.Limits] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize adapter.

        Args:
            entry: Provider configuration (name, model, credentials, timeout)
            prompt_builder: Shared prompt builder
            max_retries: Connection-level attempts per call (1 = no retry)
            connection_limits: httpx connection pool limits
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.entry = entry
        self.name = entry.name
        self.model = entry.model
        self.base_url = entry.base_url.rstrip('/')
        self.timeout = entry.timeout_seconds
        self.max_retries = max(1, max_retries)
        self.prompt_builder = prompt_builder

        if connection_limits is None:
            connection_limits = httpx.Limits(
                max_keepalive_connections=5,
                max_connections=10,
                keepalive_expiry=30.0
            )
        self._connection_limits = connection_limits
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        logger.info(
            "Initialized provider adapter",
            provider=self.name,
            adapter_class=self.__class__.__name__,
            model=self.model,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=self.max_retries
        )

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                transport=self._transport,
                follow_redirects=True
            )
            logger.debug("Created new httpx AsyncClient", provider=self.name)
        return self._client

    def _default_headers(self) -> Dict[str, str]:
        """Vendor authentication headers. Override per vendor."""
        return {}

    async def _retry_or_raise(self, error, attempt: int) -> None:
        if attempt >= self.max_retries:
            raise error
        backoff = 2 ** (attempt - 1)
        logger.info("Retrying provider request", provider=self.name, attempt=attempt, backoff=backoff)
        await asyncio.sleep(backoff)

    async def _post_json(
        self,
        path: str,
        payload: Dict[str, Any],
        params: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        POST a JSON payload and return the decoded JSON body.

        Raises:
            ProviderTimeoutError: Request exceeded the adapter timeout
            ProviderConnectionError: Network failure
            ProviderAuthenticationError: 401/403
            ProviderModelNotAvailableError: 404
            ProviderRateLimitError: 429
            ProviderGenerationError: Any other error status
            ProviderResponseError: Body is not JSON
        """
        for attempt in range(1, self.max_retries + 1):
            try:
                client = await self._get_client()
                response = await client.post(
                    path,
                    json=payload,
                    params=params,
                    headers=self._default_headers(),
                )
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                logger.warning(
                    "Provider request timeout",
                    provider=self.name,
                    attempt=attempt,
                    timeout=self.timeout,
                    error=str(e)
                )
                await self._retry_or_raise(
                    ProviderTimeoutError(
                        f"{self.name} request timeout after {self.timeout}s",
                        details={"provider": self.name, "attempt": attempt},
                    ),
                    attempt,
                )

            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                details = {"provider": self.name, "status": status_code, "error": e.response.text[:500]}
                logger.warning("Provider HTTP error", provider=self.name, status_code=status_code, attempt=attempt)

                if status_code in (401, 403):
                    raise ProviderAuthenticationError(f"{self.name} rejected credentials", details=details) from e
                if status_code == 404:
                    raise ProviderModelNotAvailableError(f"Model not found: {self.model}", details=details) from e
                if status_code == 429:
                    raise ProviderRateLimitError(f"{self.name} rate limit exceeded", details=details) from e
                if status_code >= 500:
                    await self._retry_or_raise(
                        ProviderGenerationError(f"{self.name} server error: {status_code}", details=details),
                        attempt,
                    )
                    continue
                raise ProviderGenerationError(f"{self.name} client error: {status_code}", details=details) from e

            except httpx.TransportError as e:
                logger.warning(
                    "Provider network error",
                    provider=self.name,
                    attempt=attempt,
                    error=str(e)
                )
                await self._retry_or_raise(
                    ProviderConnectionError(
                        f"{self.name} network error: {e}",
                        details={"provider": self.name, "attempt": attempt, "error_type": type(e).__name__},
                    ),
                    attempt,
                )

            except ValueError as e:
                raise ProviderResponseError(
                    f"Invalid JSON body from {self.name}",
                    details={"provider": self.name, "parse_error": str(e)},
                ) from e

        raise ProviderGenerationError(f"{self.name} request failed after {self.max_retries} attempts")

    # ------------------------------------------------------------------
    # Vendor hooks
    # ------------------------------------------------------------------

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """
        Send one completion request to the vendor.

        Implementations should:
        1. Translate the request into the vendor payload
        2. Call `_post_json` (error mapping and retries are handled there)
        3. Extract the generated text; raise ProviderResponseError if missing

        Args:
            request: Vendor-neutral completion request

        Returns:
            CompletionResponse with the generated text
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Lightweight reachability check.

        Returns:
            True if the vendor answers, False otherwise (never raises)
        """
        pass

    # ------------------------------------------------------------------
    # Capability interface
    # ------------------------------------------------------------------

    async def _timed_complete(self, request: CompletionRequest, operation: str) -> CompletionResponse:
        start_time = time.perf_counter()
        completion = await self.complete(request)
        logger.info(
            "Provider completion received",
            provider=self.name,
            operation=operation,
            model=completion.model,
            latency_ms=int((time.perf_counter() - start_time) * 1000),
            content_length=len(completion.content),
        )
        return completion

    def _record_parse(self, outcome: ParseOutcome, operation: str) -> None:
        parse_outcomes_total.labels(provider=self.name, status=outcome.status.value).inc()
        if outcome.errors:
            logger.debug(
                "Provider response parse issues",
                provider=self.name,
                operation=operation,
                status=outcome.status.value,
                errors=list(outcome.errors),
            )

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """
        Analyze a message.

        Raises:
            ProviderError: Any vendor failure, or a response with no usable content
        """
        completion = await self._timed_complete(
            self.prompt_builder.build_analysis_request(request), "analyze"
        )
        outcome = parse_analysis(completion.content)
        self._record_parse(outcome, "analyze")
        try:
            return build_analysis_result(outcome, self.name, request.depth)
        except UnparseableResponseError as e:
            raise ProviderResponseError(e.message, details=e.details) from e

    async def generate_response(
        self,
        original_text: str,
        context: str = "",
        tone: str = Tone.PROFESSIONAL.value,
    ) -> str:
        """Draft a reply; the generated text is returned as-is (stripped)."""
        completion = await self._timed_complete(
            self.prompt_builder.build_response_request(original_text, context, tone),
            "generate_response",
        )
        text = completion.content.strip()
        if not text:
            raise ProviderResponseError(f"Empty response draft from {self.name}", details={"provider": self.name})
        return text

    async def extract_actions(self, text: str) -> ActionItemsResult:
        completion = await self._timed_complete(
            self.prompt_builder.build_action_items_request(text), "extract_actions"
        )
        outcome = parse_action_items(completion.content)
        self._record_parse(outcome, "extract_actions")
        try:
            return build_action_items_result(outcome, self.name)
        except UnparseableResponseError as e:
            raise ProviderResponseError(e.message, details=e.details) from e

    async def summarize_thread(self, messages: Sequence[ThreadMessage]) -> ThreadSummary:
        completion = await self._timed_complete(
            self.prompt_builder.build_thread_summary_request(messages), "summarize_thread"
        )
        outcome = parse_thread_summary(completion.content)
        self._record_parse(outcome, "summarize_thread")
        try:
            return build_thread_summary(outcome, self.name, len(messages))
        except UnparseableResponseError as e:
            raise ProviderResponseError(e.message, details=e.details) from e

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed provider client connection", provider=self.name)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"name={self.name}, "
            f"model={self.model}, "
            f"timeout={self.timeout}s)"
        )
