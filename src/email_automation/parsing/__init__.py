"""
Staged parsing of provider responses.

Stages:
1. Structured: extract and decode the JSON object
2. Schema: JSON Schema (Draft 7) validation
3. Recovery: keyword-based partial extraction (analysis only)
"""

from email_automation.parsing.exceptions import ParseError, UnparseableResponseError
from email_automation.parsing.response_parser import (
    ParseOutcome,
    ParseStatus,
    build_action_items_result,
    build_analysis_result,
    build_thread_summary,
    extract_json_object,
    parse_action_items,
    parse_analysis,
    parse_structured,
    parse_thread_summary,
    recover_analysis_signals,
)

__all__ = [
    "ParseError",
    "UnparseableResponseError",
    "ParseOutcome",
    "ParseStatus",
    "build_action_items_result",
    "build_analysis_result",
    "build_thread_summary",
    "extract_json_object",
    "parse_action_items",
    "parse_analysis",
    "parse_structured",
    "parse_thread_summary",
    "recover_analysis_signals",
]
