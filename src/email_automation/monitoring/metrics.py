"""Custom Prometheus metrics for the Email Automation Service.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
Alert rules should be configured for:
- local_fallbacks_total (every remote provider failed for a call)
- provider_attempts_total{outcome!="success"} (provider instability)
- verification_outcomes_total{outcome="mailbox_unavailable"} (IMAP outage)
"""

from prometheus_client import Counter, Histogram

# === Provider Cascade Metrics ===

provider_attempts_total = Counter(
    "provider_attempts_total",
    "Total provider attempts by provider, operation and outcome",
    ["provider", "operation", "outcome"],
)
"""
Provider attempts counter.

Labels:
- provider: groq, openai, anthropic, gemini, huggingface, ollama
- operation: analyze, generate_response, extract_actions, summarize_thread
- outcome: success, timeout, error
"""

provider_latency_seconds = Histogram(
    "provider_latency_seconds",
    "Provider call latency in seconds",
    ["provider", "operation"],
    buckets=[0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)
"""
Provider latency histogram (successful and failed attempts).

Alert thresholds:
- WARN: p95 > 10s
"""

local_fallbacks_total = Counter(
    "local_fallbacks_total",
    "Calls answered by the local inference engine after all providers failed",
    ["operation"],
)
"""
Local fallback counter.

A steady rate means no remote provider is healthy or configured.

Alert thresholds:
- WARN: rate > 10% of analysis calls
"""

parse_outcomes_total = Counter(
    "parse_outcomes_total",
    "Provider response parse outcomes",
    ["provider", "status"],
)
"""
Parse outcome counter.

Labels:
- status: parsed, partially_recovered, unparseable
"""

# === Verification Metrics ===

verification_outcomes_total = Counter(
    "verification_outcomes_total",
    "Verification workflow terminal states",
    ["outcome"],
)
"""
Verification outcome counter.

Labels:
- outcome: completed, timed_out, no_link, automation_failed, mailbox_unavailable
"""

verification_polls_total = Counter(
    "verification_polls_total",
    "Mailbox queries issued by the verification workflow",
)
