"""
Pydantic data models for the Email Automation Service.

Includes:
- Enums (Category, Priority, Sentiment, AnalysisDepth, ResponseIntent, Tone)
- Analysis models (AnalysisRequest, AnalysisResult, ActionItemsResult, ...)
- Provider models (ProviderEntry, ProviderConfig, CompletionRequest/Response)
- Mail models (MessageContent, MailMessage, VerificationTask, ...)
"""

from email_automation.models.enums import (
    AnalysisDepth,
    Category,
    ParseStatus,
    Priority,
    ResponseIntent,
    RiskLevel,
    Sentiment,
    Tone,
)
from email_automation.models.analysis_models import (
    LOCAL_PROVIDER,
    ActionItemsResult,
    AnalysisRequest,
    AnalysisResult,
    ResponseDraft,
    SecurityAssessment,
    ThreadMessage,
    ThreadSummary,
    needs_human_review,
)
from email_automation.models.provider_models import (
    CompletionRequest,
    CompletionResponse,
    ProviderConfig,
    ProviderEntry,
)
from email_automation.models.mail_models import (
    ExtractedArtifact,
    MailMessage,
    MessageContent,
    SearchCriteria,
    VerificationOutcome,
    VerificationTask,
)

__all__ = [
    # Enums
    "AnalysisDepth",
    "Category",
    "ParseStatus",
    "Priority",
    "ResponseIntent",
    "RiskLevel",
    "Sentiment",
    "Tone",
    # Analysis models
    "LOCAL_PROVIDER",
    "ActionItemsResult",
    "AnalysisRequest",
    "AnalysisResult",
    "ResponseDraft",
    "SecurityAssessment",
    "ThreadMessage",
    "ThreadSummary",
    "needs_human_review",
    # Provider models
    "CompletionRequest",
    "CompletionResponse",
    "ProviderConfig",
    "ProviderEntry",
    # Mail models
    "ExtractedArtifact",
    "MailMessage",
    "MessageContent",
    "SearchCriteria",
    "VerificationOutcome",
    "VerificationTask",
]
