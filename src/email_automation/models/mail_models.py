"""
Mailbox and verification data models.

MailMessage is what the mailbox collaborator returns; VerificationTask and
VerificationOutcome are the input and output of one verification run.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


DEFAULT_FRESHNESS_WINDOW = timedelta(minutes=5)


def utcnow() -> datetime:
    """Timezone-aware current time (UTC)."""
    return datetime.now(timezone.utc)


class MessageContent(BaseModel):
    """Plain-text and/or HTML body of a message."""

    text: Optional[str] = Field(default=None)
    html: Optional[str] = Field(default=None)


class MailMessage(MessageContent):
    """A message returned by the mailbox collaborator."""

    subject: str = Field(default="")
    sender: str = Field(default="", description="From header as received")
    date: datetime = Field(..., description="Message date (timezone aware)")
    message_id: Optional[str] = Field(default=None)

    @field_validator("date")
    @classmethod
    def ensure_aware(cls, value: datetime) -> datetime:
        """Naive dates are treated as UTC so freshness arithmetic never mixes kinds."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class SearchCriteria(BaseModel):
    """
    Mailbox search filters, combined with AND.

    Dates are whole days as IMAP defines them: SINCE is inclusive, BEFORE is
    exclusive.
    """
    model_config = ConfigDict(frozen=True)

    sender: Optional[str] = Field(default=None)
    subject: Optional[str] = Field(default=None)
    text: Optional[str] = Field(default=None, description="Matches headers and body")
    since: Optional[date] = Field(default=None)
    before: Optional[date] = Field(default=None)

    @model_validator(mode="after")
    def check_filters(self) -> "SearchCriteria":
        if not any((self.sender, self.subject, self.text, self.since, self.before)):
            raise ValueError("at least one search criterion is required")
        if self.since and self.before and self.since >= self.before:
            raise ValueError("since must be earlier than before")
        return self

    def to_imap(self) -> list:
        """Criteria list in the form IMAPClient.search() accepts."""
        criteria: list = []
        for keyword, value in (
            ("FROM", self.sender),
            ("SUBJECT", self.subject),
            ("TEXT", self.text),
            ("SINCE", self.since),
            ("BEFORE", self.before),
        ):
            if value:
                criteria += [keyword, value]
        return criteria


class VerificationTask(BaseModel):
    """
    One invocation of the verification workflow.

    Attributes:
        sender: Address to wait for
        deadline: Absolute, timezone-aware point in time after which polling stops
        freshness_window: Maximum accepted message age
    """
    model_config = ConfigDict(frozen=True)

    sender: str = Field(..., min_length=1)
    deadline: datetime = Field(...)
    freshness_window: timedelta = Field(default=DEFAULT_FRESHNESS_WINDOW)

    @field_validator("deadline")
    @classmethod
    def ensure_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def within(
        cls,
        sender: str,
        timeout_seconds: float,
        freshness_window: timedelta = DEFAULT_FRESHNESS_WINDOW,
        now: Optional[datetime] = None,
    ) -> "VerificationTask":
        """Create a task whose deadline is `timeout_seconds` from `now`."""
        start = now or utcnow()
        return cls(
            sender=sender,
            deadline=start + timedelta(seconds=timeout_seconds),
            freshness_window=freshness_window,
        )


class ExtractedArtifact(BaseModel):
    """Verification artifacts found in a message."""

    links: list[str] = Field(default_factory=list)
    code: Optional[str] = Field(default=None)

    @property
    def link(self) -> Optional[str]:
        """First verification link, if any."""
        return self.links[0] if self.links else None


class VerificationOutcome(BaseModel):
    """Result of a completed verification run."""

    sender: str = Field(...)
    link: str = Field(...)
    code: Optional[str] = Field(default=None)
    completion_text: Optional[str] = Field(default=None)
    message_subject: str = Field(default="")
    polls: int = Field(..., ge=1)
    elapsed_seconds: float = Field(..., ge=0.0)
