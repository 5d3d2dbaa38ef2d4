"""
Cascading orchestrator: ordered provider fallback ending in the local engine.

For every capability call the enabled adapters are tried strictly in
configured order, one at a time, each bounded by its own timeout. The first
success wins. A failure (any exception, or exceeding the timeout) is logged
with the provider name and the next adapter is tried. When the list is
exhausted, the local inference engine answers; thread summarization has no
local equivalent and raises AllProvidersFailed instead.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional, Sequence, TypeVar, Union

import httpx
import structlog

from email_automation.inference.local_engine import LocalInferenceEngine, assess_security
from email_automation.models.analysis_models import (
    ActionItemsResult,
    AnalysisRequest,
    AnalysisResult,
    ResponseDraft,
    ThreadMessage,
    ThreadSummary,
)
from email_automation.models.enums import AnalysisDepth, Tone
from email_automation.models.provider_models import ProviderConfig
from email_automation.monitoring.metrics import (
    local_fallbacks_total,
    provider_attempts_total,
    provider_latency_seconds,
)
from email_automation.orchestration.exceptions import AllProvidersFailed, ProviderFailure
from email_automation.providers.base_adapter import BaseProviderAdapter
from email_automation.providers.prompt_builder import PromptBuilder
from email_automation.providers.registry import build_adapters


logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_ADAPTER_TIMEOUT = 30.0


class CascadingOrchestrator:
    """
    Capability interface consumed by the HTTP layer.

    Holds an immutable, ordered tuple of adapters plus the local engine. It
    keeps no per-call state, so one instance serves concurrent requests.
    """

    def __init__(
        self,
        adapters: Sequence[BaseProviderAdapter],
        local_engine: Optional[LocalInferenceEngine] = None,
        default_timeout: float = DEFAULT_ADAPTER_TIMEOUT,
    ):
        """
        Initialize orchestrator.

        Args:
            adapters: Enabled adapters in priority order
            local_engine: Terminal fallback (a default engine if omitted)
            default_timeout: Per-attempt timeout for adapters without a `timeout` attribute
        """
        self.adapters = tuple(adapters)
        self.local_engine = local_engine or LocalInferenceEngine()
        self.default_timeout = default_timeout

        logger.info(
            "Cascading orchestrator initialized",
            providers=[adapter.name for adapter in self.adapters],
            fallback=self.local_engine.name,
        )

    @classmethod
    def from_config(
        cls,
        config: ProviderConfig,
        prompt_builder: PromptBuilder,
        max_retries: int = 1,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "CascadingOrchestrator":
        """Build adapters for every enabled entry of `config`."""
        adapters = build_adapters(config, prompt_builder, max_retries=max_retries, transport=transport)
        return cls(adapters)

    def available_providers(self) -> list[str]:
        """Provider names in the order they are tried, ending with the local engine."""
        return [adapter.name for adapter in self.adapters] + [self.local_engine.name]

    # ------------------------------------------------------------------
    # Cascade
    # ------------------------------------------------------------------

    async def _cascade(
        self,
        operation: str,
        call: Callable[[BaseProviderAdapter], Awaitable[T]],
    ) -> tuple[str, T]:
        """
        Try `call` against each adapter in order.

        Returns:
            (provider name, result) of the first adapter that succeeded

        Raises:
            AllProvidersFailed: every adapter failed (or none is configured),
                chained to the last adapter error
        """
        failures: list[ProviderFailure] = []
        last_error: Optional[BaseException] = None

        for adapter in self.adapters:
            timeout = getattr(adapter, "timeout", None) or self.default_timeout
            start_time = time.perf_counter()
            try:
                result = await asyncio.wait_for(call(adapter), timeout=timeout)
            except asyncio.TimeoutError as e:
                outcome = "timeout"
                last_error = e
                failures.append(
                    ProviderFailure(adapter.name, "timeout", f"no answer within {timeout}s")
                )
            except Exception as e:
                outcome = "error"
                last_error = e
                failures.append(ProviderFailure(adapter.name, type(e).__name__, str(e)))
            else:
                provider_attempts_total.labels(provider=adapter.name, operation=operation, outcome="success").inc()
                provider_latency_seconds.labels(provider=adapter.name, operation=operation).observe(
                    time.perf_counter() - start_time
                )
                logger.info("Provider succeeded", provider=adapter.name, operation=operation, attempts=len(failures) + 1)
                return adapter.name, result

            provider_attempts_total.labels(provider=adapter.name, operation=operation, outcome=outcome).inc()
            provider_latency_seconds.labels(provider=adapter.name, operation=operation).observe(
                time.perf_counter() - start_time
            )
            logger.warning(
                "Provider failed, trying next",
                provider=adapter.name,
                operation=operation,
                outcome=outcome,
                error_type=failures[-1].error_type,
                error=failures[-1].message,
            )

        raise AllProvidersFailed(operation, failures) from last_error

    def _local_fallback(self, operation: str, exhausted: AllProvidersFailed) -> None:
        local_fallbacks_total.labels(operation=operation).inc()
        logger.warning(
            "All providers failed, using local inference engine",
            operation=operation,
            failed_providers=[failure.provider for failure in exhausted.failures],
        )

    # ------------------------------------------------------------------
    # Capability interface
    # ------------------------------------------------------------------

    async def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """
        Analyze a message. Never raises.

        The review flag is re-derived on every result, whoever produced it.
        SECURITY-depth results without a provider assessment get the local
        heuristic assessment.
        """
        try:
            _, result = await self._cascade("analyze", lambda adapter: adapter.analyze(request))
        except AllProvidersFailed as exhausted:
            self._local_fallback("analyze", exhausted)
            result = self.local_engine.analyze(request)

        if request.depth == AnalysisDepth.SECURITY and result.security is None:
            result = result.model_copy(update={"security": assess_security(request.content)})
        return result.with_review_invariant()

    async def draft_response(
        self,
        original_text: str,
        context: str = "",
        tone: Union[Tone, str] = Tone.PROFESSIONAL,
    ) -> ResponseDraft:
        """Draft a reply and report who wrote it. Never raises."""
        tone_value = tone.value if isinstance(tone, Tone) else str(tone)
        try:
            provider, text = await self._cascade(
                "generate_response",
                lambda adapter: adapter.generate_response(original_text, context, tone_value),
            )
        except AllProvidersFailed as exhausted:
            self._local_fallback("generate_response", exhausted)
            return self.local_engine.draft_response(original_text, tone_value)

        try:
            tone_enum = Tone(tone_value.lower())
        except ValueError:
            tone_enum = Tone.PROFESSIONAL
        return ResponseDraft(response=text, tone=tone_enum, provider_used=provider)

    async def generate_response(
        self,
        original_text: str,
        context: str = "",
        tone: Union[Tone, str] = Tone.PROFESSIONAL,
    ) -> str:
        """Reply text only. Never raises."""
        draft = await self.draft_response(original_text, context, tone)
        return draft.response

    async def extract_action_items(self, text: str) -> ActionItemsResult:
        """Action items, deadlines and urgent items. Never raises."""
        try:
            _, result = await self._cascade("extract_actions", lambda adapter: adapter.extract_actions(text))
        except AllProvidersFailed as exhausted:
            self._local_fallback("extract_actions", exhausted)
            result = self.local_engine.extract_actions(text)
        return result

    async def summarize_thread(self, messages: Sequence[ThreadMessage]) -> ThreadSummary:
        """
        Summarize a thread with the first provider that succeeds.

        Raises:
            ValueError: `messages` is empty
            AllProvidersFailed: every provider failed; there is no local summarizer
        """
        if not messages:
            raise ValueError("Thread must contain at least one message")

        messages = list(messages)
        _, summary = await self._cascade(
            "summarize_thread", lambda adapter: adapter.summarize_thread(messages)
        )
        return summary

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def health(self) -> dict[str, bool]:
        """Reachability of every configured provider (the local engine is always up)."""
        results = await asyncio.gather(*(adapter.health_check() for adapter in self.adapters))
        status = {adapter.name: bool(ok) for adapter, ok in zip(self.adapters, results)}
        status[self.local_engine.name] = True
        return status

    async def aclose(self) -> None:
        """Close every adapter's HTTP client."""
        results = await asyncio.gather(
            *(adapter.close() for adapter in self.adapters), return_exceptions=True
        )
        for adapter, result in zip(self.adapters, results):
            if isinstance(result, Exception):
                logger.error("Failed to close provider adapter", provider=adapter.name, error=str(result))
