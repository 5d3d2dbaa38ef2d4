"""
API-specific request and response models for FastAPI endpoints.

Request bodies accept the camelCase field names used by existing clients
(`emailContent`, `senderEmail`, `maxWaitTime`) as well as snake_case. Responses
wrap the core domain models with a `success` flag.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from email_automation.models.analysis_models import (
    ActionItemsResult,
    AnalysisResult,
    ResponseDraft,
    ThreadMessage,
    ThreadSummary,
)
from email_automation.models.enums import AnalysisDepth, Tone
from email_automation.models.mail_models import (
    MailMessage,
    MessageContent,
    SearchCriteria,
    VerificationOutcome,
    utcnow,
)


class ApiRequest(BaseModel):
    """Base for request bodies: camelCase aliases, snake_case names also accepted."""

    model_config = ConfigDict(populate_by_name=True)


# === AI ===


class AnalyzeEmailRequest(ApiRequest):
    """Request for single-message analysis."""

    email_content: str = Field(..., alias="emailContent", min_length=1)
    subject: Optional[str] = Field(default=None)
    sender: Optional[str] = Field(default=None)
    analysis_type: AnalysisDepth = Field(
        default=AnalysisDepth.COMPREHENSIVE,
        alias="analysisType",
        examples=["quick", "comprehensive", "security"],
    )
    include_response: bool = Field(default=False, alias="includeResponse")
    tone: Tone = Field(default=Tone.PROFESSIONAL)


class GenerateResponseRequest(ApiRequest):
    """Request for a reply draft."""

    original_email: str = Field(..., alias="originalEmail", min_length=1)
    context: str = Field(default="")
    tone: Tone = Field(default=Tone.PROFESSIONAL)


class EmailPayload(ApiRequest):
    """A message supplied inline by the client."""

    subject: str = Field(default="")
    sender: str = Field(default="", alias="from")
    text: Optional[str] = Field(default=None)
    html: Optional[str] = Field(default=None)

    @property
    def body(self) -> str:
        return self.text or self.html or ""


class CategorizeEmailsRequest(ApiRequest):
    """
    Request for bulk categorization.

    Either `emails` is given, or `senderEmail` to fetch the sender's latest
    messages from the mailbox.
    """

    emails: Optional[list[EmailPayload]] = Field(default=None, max_length=50)
    sender_email: Optional[str] = Field(default=None, alias="senderEmail")

    @model_validator(mode="after")
    def require_source(self) -> "CategorizeEmailsRequest":
        if not self.emails and not self.sender_email:
            raise ValueError("emails array or senderEmail is required")
        return self


class ExtractActionsRequest(ApiRequest):
    email_content: str = Field(..., alias="emailContent", min_length=1)


class SummarizeThreadRequest(ApiRequest):
    """Thread supplied inline, or fetched by sender."""

    emails: Optional[list[ThreadMessage]] = Field(default=None, max_length=100)
    sender_email: Optional[str] = Field(default=None, alias="senderEmail")

    @model_validator(mode="after")
    def require_source(self) -> "SummarizeThreadRequest":
        if not self.emails and not self.sender_email:
            raise ValueError("emails array or senderEmail is required")
        return self


class SmartProcessRequest(ApiRequest):
    """Comprehensive analysis plus an optional reply draft."""

    email_content: str = Field(..., alias="emailContent", min_length=1)
    generate_response: bool = Field(default=False, alias="generateResponse")
    tone: Tone = Field(default=Tone.PROFESSIONAL)


class AnalyzeEmailResponse(BaseModel):
    success: bool = Field(default=True)
    analysis: AnalysisResult
    response: Optional[ResponseDraft] = Field(default=None)


class GenerateResponseResponse(BaseModel):
    success: bool = Field(default=True)
    draft: ResponseDraft


class CategorizedEmail(BaseModel):
    subject: str
    sender: str
    analysis: AnalysisResult


class CategorizeEmailsResponse(BaseModel):
    success: bool = Field(default=True)
    results: list[CategorizedEmail]
    summary: dict[str, int] = Field(
        description="Message count per category plus the total",
        examples=[{"total": 3, "support": 2, "sales": 1}],
    )


class ExtractActionsResponse(BaseModel):
    success: bool = Field(default=True)
    data: ActionItemsResult


class SummarizeThreadResponse(BaseModel):
    success: bool = Field(default=True)
    summary: ThreadSummary


class SmartProcessResponse(BaseModel):
    success: bool = Field(default=True)
    analysis: AnalysisResult
    response: Optional[ResponseDraft] = Field(default=None)


class ProviderStatusResponse(BaseModel):
    """Providers in the order they are tried; the last one is always the local engine."""

    providers: list[str]
    remote_providers: int = Field(ge=0)
    timestamp: datetime = Field(default_factory=utcnow)


# === Email ===


class ExtractContentRequest(ApiRequest):
    """Message body to scan: `emailContent` (plain text) and/or `html`."""

    email_content: Optional[str] = Field(default=None, alias="emailContent")
    html: Optional[str] = Field(default=None)

    @model_validator(mode="after")
    def require_content(self) -> "ExtractContentRequest":
        if not self.email_content and not self.html:
            raise ValueError("emailContent or html is required")
        return self

    def to_content(self) -> MessageContent:
        return MessageContent(text=self.email_content, html=self.html)


class SearchOptions(ApiRequest):
    limit: int = Field(default=10, ge=1, le=50)


class SearchEmailsRequest(ApiRequest):
    """
    Mailbox search: `criteria` filters are combined with AND, e.g.
    `{"criteria": {"subject": "Invoice", "since": "2026-03-01"}, "options": {"limit": 5}}`.
    """

    criteria: SearchCriteria
    options: SearchOptions = Field(default_factory=SearchOptions)


class LatestEmailsResponse(BaseModel):
    success: bool = Field(default=True)
    emails: list[MailMessage]


class ExtractLinksResponse(BaseModel):
    success: bool = Field(default=True)
    links: list[str]


class ExtractCodeResponse(BaseModel):
    success: bool = Field(default=True)
    code: Optional[str] = Field(default=None)


# === Automation ===


class VerifyEmailRequest(ApiRequest):
    """Verification run request; `maxWaitTime` is in milliseconds."""

    sender_email: str = Field(..., alias="senderEmail", min_length=3)
    max_wait_time: Optional[int] = Field(default=None, alias="maxWaitTime", gt=0)


class VerifyEmailResponse(BaseModel):
    success: bool = Field(default=True)
    result: VerificationOutcome


# === Service ===


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(
        description="Overall health status",
        examples=["healthy", "degraded"]
    )
    version: str = Field(
        description="Service version",
        examples=["0.1.0"]
    )
    services: dict[str, str] = Field(
        description="Service-specific health status",
        examples=[{"groq": "ok", "local": "ok", "mailbox": "configured"}]
    )
    timestamp: datetime = Field(
        default_factory=utcnow,
        description="Health check timestamp (UTC)"
    )


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str = Field(
        description="Error code",
        examples=["invalid_request", "verification_timed_out", "internal_error"]
    )
    message: str = Field(
        description="Human-readable error message"
    )
    details: Optional[dict] = Field(
        default=None,
        description="Additional error details"
    )
    timestamp: datetime = Field(
        default_factory=utcnow,
        description="Error timestamp (UTC)"
    )
