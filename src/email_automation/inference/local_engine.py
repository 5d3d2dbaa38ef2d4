"""
Deterministic local inference engine.

Rule-based analysis that needs no network access and always succeeds. It is
the terminal step of every orchestrator cascade, so every function here is
total: any string, including the empty string, produces a value within the
declared enum/range.

Responsible for:
- Category, priority, sentiment and urgency scoring (unweighted keyword counts)
- Key topic and action item extraction
- Language guess from stop words
- Template-based summaries and reply drafts
- Heuristic security assessment
"""

import re
import string
from functools import lru_cache
from typing import Iterable, Optional, Union

import structlog

from email_automation.inference import rules
from email_automation.inference.templates import (
    DEFAULT_RESPONSE_KEY,
    RESPONSE_TEMPLATES,
    SUMMARY_TEMPLATES,
)
from email_automation.models.analysis_models import (
    LOCAL_PROVIDER,
    ActionItemsResult,
    AnalysisRequest,
    AnalysisResult,
    ResponseDraft,
    SecurityAssessment,
    needs_human_review,
)
from email_automation.models.enums import (
    AnalysisDepth,
    Category,
    Priority,
    ResponseIntent,
    RiskLevel,
    Sentiment,
    Tone,
)


logger = structlog.get_logger(__name__)

LOCAL_CONFIDENCE = 0.85

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+|\n+")
_CAPS_WORD = re.compile(r"\b[A-Z]{%d,}\b" % rules.SHOUT_CAPS_MIN_LENGTH)
_WORD = re.compile(r"[^\W\d_]+")
_EDGE_PUNCTUATION = string.punctuation + "“”‘’"


@lru_cache(maxsize=512)
def _keyword_pattern(keyword: str) -> re.Pattern:
    """Case-insensitive match of `keyword` at the start of a word."""
    return re.compile(r"\b" + re.escape(keyword), re.IGNORECASE)


def count_keywords(text: str, keywords: Iterable[str]) -> int:
    """Total number of occurrences of any of `keywords` in `text`."""
    return sum(len(_keyword_pattern(keyword).findall(text)) for keyword in keywords)


def contains_keyword(text: str, keywords: Iterable[str]) -> bool:
    return any(_keyword_pattern(keyword).search(text) for keyword in keywords)


# ============================================================================
# Scoring
# ============================================================================


def categorize(text: str) -> Category:
    """
    Pick the category with the most keyword hits.

    Ties, including the all-zero case, resolve to GENERAL. Counts are not
    normalized by length.
    """
    scores = {
        category: count_keywords(text, keywords)
        for category, keywords in rules.CATEGORY_KEYWORDS.items()
    }
    best = max(scores.values(), default=0)
    if best == 0:
        return Category.GENERAL

    winners = [category for category, score in scores.items() if score == best]
    if len(winners) > 1:
        return Category.GENERAL
    return winners[0]


def has_shout_signal(text: str) -> bool:
    """More than two exclamation marks, or an all-caps word longer than three letters."""
    return (
        text.count("!") > rules.SHOUT_EXCLAMATION_THRESHOLD
        or _CAPS_WORD.search(text) is not None
    )


def priority(text: str) -> Priority:
    """
    HIGH on two or more high-priority keywords or a shout signal; LOW when a
    low-priority keyword is present without a high signal; MEDIUM otherwise.
    """
    high_count = count_keywords(text, rules.HIGH_PRIORITY_KEYWORDS)
    if high_count >= 2 or has_shout_signal(text):
        return Priority.HIGH
    if count_keywords(text, rules.LOW_PRIORITY_KEYWORDS) > 0:
        return Priority.LOW
    return Priority.MEDIUM


def sentiment(text: str) -> Sentiment:
    """Strictly greater keyword count wins; ties are NEUTRAL."""
    positive = count_keywords(text, rules.POSITIVE_KEYWORDS)
    negative = count_keywords(text, rules.NEGATIVE_KEYWORDS)
    if positive > negative:
        return Sentiment.POSITIVE
    if negative > positive:
        return Sentiment.NEGATIVE
    return Sentiment.NEUTRAL


def urgency_score(text: str) -> int:
    """Baseline 5 plus keyword bonuses, clamped to [1, 10]."""
    lowered = text.lower()
    score = rules.URGENCY_BASELINE
    for keyword, bonus in rules.URGENCY_BONUSES:
        if keyword in lowered:
            score += bonus
    if text.count("!") > 1:
        score += rules.URGENCY_EXCLAMATION_BONUS
    return max(1, min(10, score))


# ============================================================================
# Extraction
# ============================================================================


def key_topics(text: str) -> list[str]:
    """
    Up to five topic words, in order of first appearance.

    Stop words, non-alphabetic tokens and tokens of three characters or fewer
    are dropped; only the first eight candidates are considered.
    """
    candidates = []
    for raw_token in text.split():
        token = raw_token.strip(_EDGE_PUNCTUATION).lower()
        if len(token) < rules.KEY_TOPIC_MIN_LENGTH or not token.isalpha():
            continue
        if token in rules.STOP_WORDS:
            continue
        candidates.append(token)
        if len(candidates) == rules.KEY_TOPIC_CANDIDATES:
            break

    return list(dict.fromkeys(candidates))[:5]


def split_sentences(text: str) -> list[str]:
    return [sentence.strip() for sentence in _SENTENCE_SPLIT.split(text) if sentence.strip()]


def action_items(text: str) -> list[str]:
    """First three sentences containing an action verb, cut to 80 characters."""
    items = []
    for sentence in split_sentences(text):
        if not contains_keyword(sentence, rules.ACTION_VERBS):
            continue
        if len(sentence) > rules.ACTION_ITEM_MAX_LENGTH:
            keep = rules.ACTION_ITEM_MAX_LENGTH - len(rules.ACTION_ITEM_ELLIPSIS)
            sentence = sentence[:keep] + rules.ACTION_ITEM_ELLIPSIS
        items.append(sentence)
        if len(items) == 3:
            break
    return items


def detect_language(text: str) -> str:
    """
    Two-letter language guess.

    The non-English language with the most stop-word hits wins (earlier table
    entries win ties); "en" when nothing matches.
    """
    tokens = _WORD.findall(text.lower())
    best_language = rules.DEFAULT_LANGUAGE
    best_count = 0
    for language, stop_words in rules.LANGUAGE_STOP_WORDS:
        hits = sum(1 for token in tokens if token in stop_words)
        if hits > best_count:
            best_language, best_count = language, hits
    return best_language


def summarize(category: Category, priority_level: Priority) -> str:
    """Fixed per-category summary, parameterized by priority."""
    return SUMMARY_TEMPLATES[category].format(priority=priority_level.value)


def classify_intent(text: str) -> ResponseIntent:
    """First intent (meeting, thanks, question, request, complaint) whose keyword appears."""
    lowered = text.lower()
    for intent, keywords in rules.INTENT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return intent
    return ResponseIntent.GENERAL


def _coerce_tone(tone: Union[Tone, str, None]) -> Optional[Tone]:
    if isinstance(tone, Tone):
        return tone
    try:
        return Tone((tone or "").strip().lower())
    except ValueError:
        return None


def generate_response(original_text: str, tone: Union[Tone, str] = Tone.PROFESSIONAL) -> str:
    """
    Reply template for the message intent and requested tone.

    Unknown tones and (intent, tone) pairs without a template fall back to the
    general/professional template.
    """
    key = (classify_intent(original_text), _coerce_tone(tone))
    return RESPONSE_TEMPLATES.get(key, RESPONSE_TEMPLATES[DEFAULT_RESPONSE_KEY])


def extract_actions(text: str) -> ActionItemsResult:
    """Action items plus deadline and urgency flags."""
    items = action_items(text)
    return ActionItemsResult(
        action_items=items,
        has_deadlines=contains_keyword(text, rules.DEADLINE_KEYWORDS),
        urgent_items=[item for item in items if contains_keyword(item, rules.HIGH_PRIORITY_KEYWORDS)],
        provider_used=LOCAL_PROVIDER,
    )


def assess_security(text: str) -> SecurityAssessment:
    """
    Threat heuristics: each threat kind is flagged when one of its indicator
    phrases appears. Two or more kinds are HIGH risk, one is MEDIUM.
    """
    lowered = text.lower()
    threats = [
        kind
        for kind, indicators in rules.THREAT_INDICATORS
        if any(indicator in lowered for indicator in indicators)
    ]
    if len(threats) >= 2:
        risk = RiskLevel.HIGH
    elif threats:
        risk = RiskLevel.MEDIUM
    else:
        risk = RiskLevel.LOW
    return SecurityAssessment(is_safe=not threats, threats=threats, risk_level=risk)


# ============================================================================
# Engine
# ============================================================================


class LocalInferenceEngine:
    """
    Facade over the rule functions, shaped like a provider.

    The orchestrator calls it once every configured provider has failed. None
    of its methods perform I/O or raise for any string input.
    """

    name = LOCAL_PROVIDER
    confidence = LOCAL_CONFIDENCE

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """
        Build a complete AnalysisResult from the request text alone.

        Args:
            request: Analysis request (subject is scored together with the body)

        Returns:
            AnalysisResult with provider_used="local" and confidence 0.85
        """
        content = request.content
        category = categorize(content)
        priority_level = priority(content)
        mood = sentiment(content)

        security = None
        if request.depth == AnalysisDepth.SECURITY:
            security = assess_security(content)

        result = AnalysisResult(
            category=category,
            priority=priority_level,
            sentiment=mood,
            urgency_score=urgency_score(content),
            key_topics=key_topics(content),
            action_items=action_items(request.text),
            summary=summarize(category, priority_level),
            requires_human_review=needs_human_review(priority_level, category, mood),
            detected_language=detect_language(content),
            confidence=self.confidence,
            provider_used=self.name,
            security=security,
        )

        logger.debug(
            "Local analysis complete",
            category=result.category.value,
            priority=result.priority.value,
            sentiment=result.sentiment.value,
            depth=request.depth.value,
        )
        return result

    def generate_response(self, original_text: str, tone: Union[Tone, str] = Tone.PROFESSIONAL) -> str:
        return generate_response(original_text, tone)

    def draft_response(self, original_text: str, tone: Union[Tone, str] = Tone.PROFESSIONAL) -> ResponseDraft:
        return ResponseDraft(
            response=generate_response(original_text, tone),
            tone=_coerce_tone(tone) or Tone.PROFESSIONAL,
            provider_used=self.name,
        )

    def extract_actions(self, text: str) -> ActionItemsResult:
        return extract_actions(text)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(confidence={self.confidence})"
