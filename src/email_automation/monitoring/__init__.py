"""Monitoring and metrics instrumentation for the Email Automation Service.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from email_automation.monitoring.metrics import (
    local_fallbacks_total,
    parse_outcomes_total,
    provider_attempts_total,
    provider_latency_seconds,
    verification_outcomes_total,
    verification_polls_total,
)

__all__ = [
    "provider_attempts_total",
    "provider_latency_seconds",
    "local_fallbacks_total",
    "parse_outcomes_total",
    "verification_outcomes_total",
    "verification_polls_total",
]
