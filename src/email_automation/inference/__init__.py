"""
Deterministic local inference engine (the cascade's guaranteed last step).

Components:
- rules: static keyword/stop-word tables
- templates: summary and reply templates
- local_engine: scoring/extraction functions and LocalInferenceEngine
"""

from email_automation.inference.local_engine import (
    LOCAL_CONFIDENCE,
    LocalInferenceEngine,
    action_items,
    assess_security,
    categorize,
    classify_intent,
    detect_language,
    extract_actions,
    generate_response,
    key_topics,
    priority,
    sentiment,
    summarize,
    urgency_score,
)

__all__ = [
    "LOCAL_CONFIDENCE",
    "LocalInferenceEngine",
    "action_items",
    "assess_security",
    "categorize",
    "classify_intent",
    "detect_language",
    "extract_actions",
    "generate_response",
    "key_topics",
    "priority",
    "sentiment",
    "summarize",
    "urgency_score",
]
