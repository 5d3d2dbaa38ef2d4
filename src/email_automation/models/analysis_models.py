"""
Analysis data models shared by the local engine, provider adapters and API.

Every producer of an AnalysisResult (remote provider or local engine) returns
these models; the orchestrator re-derives `requires_human_review` before any
result leaves it.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from email_automation.models.enums import (
    AnalysisDepth,
    Category,
    Priority,
    RiskLevel,
    Sentiment,
    Tone,
)


MAX_KEY_TOPICS = 5
MAX_ACTION_ITEMS = 3
LOCAL_PROVIDER = "local"


def needs_human_review(priority: Priority, category: Category, sentiment: Sentiment) -> bool:
    """Review is required for high priority, urgent category or negative sentiment."""
    return (
        priority == Priority.HIGH
        or category == Category.URGENT
        or sentiment == Sentiment.NEGATIVE
    )


class AnalysisRequest(BaseModel):
    """
    Immutable input to a single analysis call.

    Has no identity beyond the call it is created for.
    """
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Raw message text")
    sender: Optional[str] = Field(default=None, description="Sender address or display name")
    subject: Optional[str] = Field(default=None, description="Message subject")
    depth: AnalysisDepth = Field(default=AnalysisDepth.COMPREHENSIVE)

    @property
    def content(self) -> str:
        """Subject and body as one block of text (what the local engine scores)."""
        if self.subject:
            return f"{self.subject}\n{self.text}"
        return self.text


class SecurityAssessment(BaseModel):
    """Threat assessment attached to SECURITY-depth results."""

    is_safe: bool = Field(..., description="True when no threat indicator was found")
    threats: list[str] = Field(default_factory=list, description="Detected threat kinds")
    risk_level: RiskLevel = Field(default=RiskLevel.LOW)


class AnalysisResult(BaseModel):
    """
    Output of any analysis producer.

    Invariant (enforced by the orchestrator via `with_review_invariant`):
        requires_human_review == (priority == high
                                  or category == urgent
                                  or sentiment == negative)
    """

    category: Category = Field(default=Category.GENERAL)
    priority: Priority = Field(default=Priority.MEDIUM)
    sentiment: Sentiment = Field(default=Sentiment.NEUTRAL)
    urgency_score: int = Field(default=5, ge=1, le=10)
    key_topics: list[str] = Field(default_factory=list, max_length=MAX_KEY_TOPICS)
    action_items: list[str] = Field(default_factory=list, max_length=MAX_ACTION_ITEMS)
    summary: str = Field(default="")
    requires_human_review: bool = Field(default=False)
    detected_language: str = Field(default="en", pattern=r"^[a-z]{2}$")
    confidence: float = Field(..., ge=0.0, le=1.0)
    provider_used: str = Field(..., description="Adapter name or 'local'")
    security: Optional[SecurityAssessment] = Field(default=None)

    def with_review_invariant(self) -> "AnalysisResult":
        """Return a copy whose review flag is derived from priority/category/sentiment."""
        expected = needs_human_review(self.priority, self.category, self.sentiment)
        if expected == self.requires_human_review:
            return self
        return self.model_copy(update={"requires_human_review": expected})


class ActionItemsResult(BaseModel):
    """Action items extracted from a single message."""

    action_items: list[str] = Field(default_factory=list)
    has_deadlines: bool = Field(default=False)
    urgent_items: list[str] = Field(default_factory=list)
    provider_used: str = Field(...)


class ResponseDraft(BaseModel):
    """Drafted reply plus the producer that wrote it."""

    response: str = Field(...)
    tone: Tone = Field(default=Tone.PROFESSIONAL)
    provider_used: str = Field(...)


class ThreadMessage(BaseModel):
    """One message of a conversation thread."""

    sender: str = Field(default="")
    subject: str = Field(default="")
    date: Optional[datetime] = Field(default=None)
    text: str = Field(...)


class ThreadSummary(BaseModel):
    """Summary of a whole thread. Only remote providers can produce one."""

    summary: str = Field(...)
    key_points: list[str] = Field(default_factory=list)
    participants: list[str] = Field(default_factory=list)
    next_actions: list[str] = Field(default_factory=list)
    thread_length: int = Field(..., ge=0)
    provider_used: str = Field(...)
