"""
Enumerations for Email Automation data models.

All enums are closed taxonomies - provider output outside these sets is
coerced to the documented default during parsing.
"""

from enum import Enum


class Category(str, Enum):
    """
    Single-label message category.

    GENERAL is the tie-breaker and the default for unrecognized values.
    """

    URGENT = "urgent"
    SUPPORT = "support"
    SALES = "sales"
    MEETING = "meeting"
    REPORT = "report"
    COMPLAINT = "complaint"
    GENERAL = "general"


class Priority(str, Enum):
    """Message priority."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Sentiment(str, Enum):
    """Message sentiment (single-label)."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class AnalysisDepth(str, Enum):
    """
    How much analysis is requested.

    - QUICK: category/priority/sentiment with a short prompt
    - COMPREHENSIVE: full result (topics, action items, summary, language)
    - SECURITY: comprehensive result plus a threat assessment
    """

    QUICK = "quick"
    COMPREHENSIVE = "comprehensive"
    SECURITY = "security"


class ResponseIntent(str, Enum):
    """Intent of an incoming message, used to pick a reply template."""

    MEETING = "meeting"
    THANKS = "thanks"
    QUESTION = "question"
    REQUEST = "request"
    COMPLAINT = "complaint"
    GENERAL = "general"


class Tone(str, Enum):
    """Tone of a drafted reply."""

    PROFESSIONAL = "professional"
    FRIENDLY = "friendly"
    FORMAL = "formal"
    CASUAL = "casual"


class RiskLevel(str, Enum):
    """Risk level of a security assessment."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ParseStatus(str, Enum):
    """Which parsing stage produced a provider payload."""

    PARSED = "parsed"
    PARTIALLY_RECOVERED = "partially_recovered"
    UNPARSEABLE = "unparseable"
