"""
Staged parsing of raw provider text into result models.

Provider output is free text that usually, but not always, embeds a JSON
object. Parsing is an explicit three-stage contract instead of nested
try/except:

1. Structured: locate the outermost JSON object and decode it
2. Schema: validate the object against the operation's JSON Schema
3. Recovery (analysis only): keyword scan of the raw text for priority and
   sentiment signals

Each stage reports through a ParseOutcome so callers and tests can target
them independently. Only turning an UNPARSEABLE outcome into a result model
raises.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Optional

import structlog
from jsonschema import Draft7Validator

from email_automation.models.analysis_models import (
    MAX_ACTION_ITEMS,
    MAX_KEY_TOPICS,
    ActionItemsResult,
    AnalysisResult,
    SecurityAssessment,
    ThreadSummary,
)
from email_automation.models.enums import (
    AnalysisDepth,
    Category,
    ParseStatus,
    Priority,
    RiskLevel,
    Sentiment,
)
from email_automation.parsing.exceptions import UnparseableResponseError
from email_automation.parsing.schemas import (
    ACTION_ITEMS_SCHEMA,
    ANALYSIS_SCHEMA,
    THREAD_SUMMARY_SCHEMA,
)


logger = structlog.get_logger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")
_LANGUAGE_CODE = re.compile(r"^([a-z]{2})(?:[-_][a-z]{2})?$")

PARSED_CONFIDENCE = 0.9
RECOVERED_CONFIDENCE = 0.5

LANGUAGE_NAMES = {
    "english": "en",
    "spanish": "es",
    "french": "fr",
    "german": "de",
    "italian": "it",
    "portuguese": "pt",
    "dutch": "nl",
}

PRIORITY_ALIASES = {"urgent": Priority.HIGH, "critical": Priority.HIGH, "normal": Priority.MEDIUM}

# Stage 3 keyword signals (substring match on lowercased raw text)
RECOVERY_URGENT = ("urgent", "asap", "immediate")
RECOVERY_POSITIVE = ("positive", "good", "thank")
RECOVERY_NEGATIVE = ("negative", "bad", "complaint")


@dataclass(frozen=True)
class ParseOutcome:
    """
    Result of running the parsing stages over one raw provider response.

    Attributes:
        status: Which stage produced the payload (or that none did)
        payload: Decoded (or recovered) fields, empty when UNPARSEABLE
        errors: Messages from the stages that failed
        raw: The raw provider text
    """
    status: ParseStatus
    payload: dict = field(default_factory=dict)
    errors: tuple[str, ...] = ()
    raw: str = ""

    @property
    def usable(self) -> bool:
        return self.status != ParseStatus.UNPARSEABLE


# ============================================================================
# Stages
# ============================================================================


def _snake_case_keys(payload: dict) -> dict:
    """Providers sometimes answer in camelCase (urgencyScore, keyTopics)."""
    return {_CAMEL_BOUNDARY.sub("_", key).lower(): value for key, value in payload.items()}


def extract_json_object(raw: str) -> tuple[Optional[dict], Optional[str]]:
    """
    Stage 1: decode the JSON object embedded in `raw`.

    Tries the whole text first, then the span from the first "{" to the last
    "}" (which also strips Markdown code fences and chatter around the object).

    Returns:
        (payload, None) on success, (None, error message) otherwise
    """
    if not raw or not raw.strip():
        return None, "empty response"

    candidates = [raw.strip()]
    match = _JSON_OBJECT.search(raw)
    if match and match.group(0) != candidates[0]:
        candidates.append(match.group(0))

    last_error = "no JSON object found"
    for candidate in candidates:
        try:
            decoded = json.loads(candidate)
        except json.JSONDecodeError as e:
            last_error = f"{e.msg} at line {e.lineno} col {e.colno}"
            continue
        if isinstance(decoded, dict):
            return _snake_case_keys(decoded), None
        last_error = f"expected JSON object, got {type(decoded).__name__}"
    return None, last_error


_VALIDATORS: dict[str, Draft7Validator] = {}


def _validator_for(schema: dict) -> Draft7Validator:
    key = schema.get("title", str(id(schema)))
    if key not in _VALIDATORS:
        _VALIDATORS[key] = Draft7Validator(schema)
    return _VALIDATORS[key]


def schema_errors(payload: dict, schema: dict) -> list[str]:
    """
    Stage 2: validate `payload` against `schema`.

    Returns:
        Formatted error messages (empty when valid), at most 10
    """
    messages = []
    for error in list(_validator_for(schema).iter_errors(payload))[:10]:
        path = ".".join(str(p) for p in error.path) if error.path else "root"
        messages.append(f"{path}: {error.message}")
    return messages


def parse_structured(raw: str, schema: dict) -> ParseOutcome:
    """Run stages 1 and 2; PARSED or UNPARSEABLE."""
    payload, error = extract_json_object(raw)
    if payload is None:
        return ParseOutcome(status=ParseStatus.UNPARSEABLE, errors=(f"json: {error}",), raw=raw)

    errors = schema_errors(payload, schema)
    if errors:
        return ParseOutcome(
            status=ParseStatus.UNPARSEABLE,
            errors=tuple(f"schema: {message}" for message in errors),
            raw=raw,
        )
    return ParseOutcome(status=ParseStatus.PARSED, payload=payload, raw=raw)


def recover_analysis_signals(raw: str) -> Optional[dict]:
    """
    Stage 3: keyword recovery for analysis responses.

    urgent/asap/immediate -> high priority, urgent category;
    positive/good/thank -> positive, otherwise negative/bad/complaint -> negative.

    Returns:
        Recovered fields, or None when the text carries no signal at all
    """
    lowered = (raw or "").lower()
    recovered: dict[str, Any] = {}

    if any(keyword in lowered for keyword in RECOVERY_URGENT):
        recovered["priority"] = Priority.HIGH.value
        recovered["category"] = Category.URGENT.value

    if any(keyword in lowered for keyword in RECOVERY_POSITIVE):
        recovered["sentiment"] = Sentiment.POSITIVE.value
    elif any(keyword in lowered for keyword in RECOVERY_NEGATIVE):
        recovered["sentiment"] = Sentiment.NEGATIVE.value

    if not recovered:
        return None

    recovered.setdefault("category", Category.GENERAL.value)
    recovered.setdefault("priority", Priority.MEDIUM.value)
    recovered.setdefault("sentiment", Sentiment.NEUTRAL.value)
    return recovered


def parse_analysis(raw: str) -> ParseOutcome:
    """All three stages for an analysis response."""
    outcome = parse_structured(raw, ANALYSIS_SCHEMA)
    if outcome.usable:
        return outcome

    recovered = recover_analysis_signals(raw)
    if recovered is None:
        return outcome
    return ParseOutcome(
        status=ParseStatus.PARTIALLY_RECOVERED,
        payload=recovered,
        errors=outcome.errors,
        raw=raw,
    )


def parse_action_items(raw: str) -> ParseOutcome:
    return parse_structured(raw, ACTION_ITEMS_SCHEMA)


def parse_thread_summary(raw: str) -> ParseOutcome:
    """
    Stages 1-2; plain prose that is not an attempted JSON object is accepted
    as the summary itself.
    """
    outcome = parse_structured(raw, THREAD_SUMMARY_SCHEMA)
    if outcome.usable:
        return outcome

    text = (raw or "").strip()
    if text and "{" not in text:
        return ParseOutcome(
            status=ParseStatus.PARTIALLY_RECOVERED,
            payload={"summary": text},
            errors=outcome.errors,
            raw=raw,
        )
    return outcome


# ============================================================================
# Result builders
# ============================================================================


def _coerce_enum(value: Any, enum_cls, default, aliases: Optional[dict] = None):
    if isinstance(value, str):
        normalized = value.strip().lower()
        if aliases and normalized in aliases:
            return aliases[normalized]
        try:
            return enum_cls(normalized)
        except ValueError:
            pass
    return default


def _string_list(value: Any, limit: Optional[int] = None) -> list[str]:
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        if isinstance(item, dict):
            item = item.get("task") or item.get("text") or ""
        text = str(item).strip()
        if text:
            items.append(text)
    return items[:limit] if limit is not None else items


def _language_code(value: Any) -> str:
    if not isinstance(value, str):
        return "en"
    normalized = value.strip().lower()
    match = _LANGUAGE_CODE.match(normalized)
    if match:
        return match.group(1)
    return LANGUAGE_NAMES.get(normalized, "en")


def _urgency(value: Any) -> int:
    try:
        return max(1, min(10, int(round(float(value)))))
    except (TypeError, ValueError):
        return 5


def _confidence(value: Any, default: float) -> float:
    try:
        return max(0.0, min(1.0, float(value)))
    except (TypeError, ValueError):
        return default


def _require_usable(outcome: ParseOutcome, provider: str, operation: str) -> None:
    if not outcome.usable:
        raise UnparseableResponseError(
            f"Unparseable {operation} response from {provider}",
            raw_content=outcome.raw,
            errors=list(outcome.errors),
        )


def build_analysis_result(
    outcome: ParseOutcome,
    provider: str,
    depth: AnalysisDepth = AnalysisDepth.COMPREHENSIVE,
) -> AnalysisResult:
    """
    Normalize a parsed or recovered payload into an AnalysisResult.

    Unknown enum values fall back to defaults, the urgency score is clamped,
    lists are cut to their limits and language names are mapped to codes. The
    review flag is taken as reported; the orchestrator re-derives it.

    Raises:
        UnparseableResponseError: outcome is UNPARSEABLE
    """
    _require_usable(outcome, provider, "analysis")
    payload = outcome.payload
    recovered = outcome.status == ParseStatus.PARTIALLY_RECOVERED

    security = None
    if depth == AnalysisDepth.SECURITY and ("is_safe" in payload or "threats" in payload):
        threats = _string_list(payload.get("threats"))
        security = SecurityAssessment(
            is_safe=bool(payload.get("is_safe", not threats)),
            threats=threats,
            risk_level=_coerce_enum(payload.get("risk_level"), RiskLevel, RiskLevel.LOW),
        )

    summary = payload.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        summary = "Analysis recovered from an unstructured provider response." if recovered else ""

    return AnalysisResult(
        category=_coerce_enum(payload.get("category"), Category, Category.GENERAL),
        priority=_coerce_enum(payload.get("priority"), Priority, Priority.MEDIUM, PRIORITY_ALIASES),
        sentiment=_coerce_enum(payload.get("sentiment"), Sentiment, Sentiment.NEUTRAL),
        urgency_score=_urgency(payload.get("urgency_score")),
        key_topics=_string_list(payload.get("key_topics"), MAX_KEY_TOPICS),
        action_items=_string_list(payload.get("action_items"), MAX_ACTION_ITEMS),
        summary=summary.strip(),
        requires_human_review=bool(payload.get("requires_human_review", False)),
        detected_language=_language_code(payload.get("detected_language")),
        confidence=_confidence(
            payload.get("confidence"),
            RECOVERED_CONFIDENCE if recovered else PARSED_CONFIDENCE,
        ),
        provider_used=provider,
        security=security,
    )


def build_action_items_result(outcome: ParseOutcome, provider: str) -> ActionItemsResult:
    """
    Raises:
        UnparseableResponseError: outcome is UNPARSEABLE
    """
    _require_usable(outcome, provider, "action items")
    payload = outcome.payload
    raw_items = payload.get("action_items") or []

    has_deadlines = payload.get("has_deadlines")
    if not isinstance(has_deadlines, bool):
        has_deadlines = any(isinstance(item, dict) and item.get("deadline") for item in raw_items)

    urgent_items = _string_list(payload.get("urgent_items"))
    if not urgent_items:
        urgent_items = [
            str(item["task"]).strip()
            for item in raw_items
            if isinstance(item, dict) and str(item.get("priority", "")).lower() in ("high", "urgent")
        ]

    return ActionItemsResult(
        action_items=_string_list(raw_items),
        has_deadlines=has_deadlines,
        urgent_items=urgent_items,
        provider_used=provider,
    )


def build_thread_summary(outcome: ParseOutcome, provider: str, thread_length: int) -> ThreadSummary:
    """
    Raises:
        UnparseableResponseError: outcome is UNPARSEABLE
    """
    _require_usable(outcome, provider, "thread summary")
    payload = outcome.payload
    return ThreadSummary(
        summary=str(payload["summary"]).strip(),
        key_points=_string_list(payload.get("key_points")),
        participants=_string_list(payload.get("participants")),
        next_actions=_string_list(payload.get("next_actions")),
        thread_length=thread_length,
        provider_used=provider,
    )
