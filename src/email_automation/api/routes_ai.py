"""
AI routes: analysis, reply drafting, categorization, action items and thread
summaries.

Every route except thread summarization always answers: when no remote
provider succeeds the local inference engine does.
"""

from collections import Counter

import structlog
from fastapi import APIRouter, Depends, status

from email_automation.api.dependencies import get_mailbox, get_orchestrator
from email_automation.api.models import (
    AnalyzeEmailRequest,
    AnalyzeEmailResponse,
    CategorizedEmail,
    CategorizeEmailsRequest,
    CategorizeEmailsResponse,
    ExtractActionsRequest,
    ExtractActionsResponse,
    GenerateResponseRequest,
    GenerateResponseResponse,
    ProviderStatusResponse,
    SmartProcessRequest,
    SmartProcessResponse,
    SummarizeThreadRequest,
    SummarizeThreadResponse,
)
from email_automation.models.analysis_models import AnalysisRequest, ThreadMessage
from email_automation.models.enums import AnalysisDepth
from email_automation.orchestration.orchestrator import CascadingOrchestrator
from email_automation.verification.mailbox import ImapMailbox

logger = structlog.get_logger(__name__)

CATEGORIZE_FETCH_LIMIT = 10
THREAD_FETCH_LIMIT = 20

router = APIRouter()


@router.post(
    "/analyze-email",
    response_model=AnalyzeEmailResponse,
    status_code=status.HTTP_200_OK,
    summary="Analyze a single email",
    responses={
        200: {"description": "Analysis completed (remote provider or local engine)"},
        400: {"description": "Invalid request format"},
    },
)
async def analyze_email(
    request: AnalyzeEmailRequest,
    orchestrator: CascadingOrchestrator = Depends(get_orchestrator),
) -> AnalyzeEmailResponse:
    """
    Analyze an email: category, priority, sentiment, urgency, topics, action
    items and review flag. `security` depth adds a threat assessment.
    """
    logger.info(
        "Email analysis requested",
        analysis_type=request.analysis_type.value,
        content_length=len(request.email_content),
    )

    analysis = await orchestrator.analyze(
        AnalysisRequest(
            text=request.email_content,
            sender=request.sender,
            subject=request.subject,
            depth=request.analysis_type,
        )
    )

    draft = None
    if request.include_response:
        draft = await orchestrator.draft_response(request.email_content, "", request.tone)

    logger.info(
        "Email analysis completed",
        category=analysis.category.value,
        priority=analysis.priority.value,
        provider_used=analysis.provider_used,
    )
    return AnalyzeEmailResponse(analysis=analysis, response=draft)


@router.post(
    "/generate-response",
    response_model=GenerateResponseResponse,
    summary="Draft a reply",
)
async def generate_response(
    request: GenerateResponseRequest,
    orchestrator: CascadingOrchestrator = Depends(get_orchestrator),
) -> GenerateResponseResponse:
    logger.info("Response generation requested", tone=request.tone.value, context_length=len(request.context))

    draft = await orchestrator.draft_response(request.original_email, request.context, request.tone)

    logger.info("Response generated", response_length=len(draft.response), provider_used=draft.provider_used)
    return GenerateResponseResponse(draft=draft)


@router.post(
    "/categorize-emails",
    response_model=CategorizeEmailsResponse,
    summary="Categorize several emails",
    responses={503: {"description": "Mailbox unavailable (senderEmail mode)"}},
)
async def categorize_emails(
    request: CategorizeEmailsRequest,
    orchestrator: CascadingOrchestrator = Depends(get_orchestrator),
    mailbox: ImapMailbox = Depends(get_mailbox),
) -> CategorizeEmailsResponse:
    """
    Quick analysis of each email, one after another.

    Emails come from the body, or the latest messages of `senderEmail`.
    """
    if request.emails:
        items = [(email.subject, email.sender, email.body) for email in request.emails]
    else:
        messages = await mailbox.latest_from(request.sender_email, CATEGORIZE_FETCH_LIMIT)
        items = [(m.subject, m.sender, m.text or m.html or "") for m in messages]

    logger.info("Email categorization requested", email_count=len(items))

    results = []
    for subject, sender, body in items:
        analysis = await orchestrator.analyze(
            AnalysisRequest(text=body, sender=sender, subject=subject, depth=AnalysisDepth.QUICK)
        )
        results.append(CategorizedEmail(subject=subject, sender=sender, analysis=analysis))

    summary = {"total": len(results)}
    summary.update(Counter(result.analysis.category.value for result in results))

    logger.info("Email categorization completed", **summary)
    return CategorizeEmailsResponse(results=results, summary=summary)


@router.post(
    "/extract-actions",
    response_model=ExtractActionsResponse,
    summary="Extract action items",
)
async def extract_actions(
    request: ExtractActionsRequest,
    orchestrator: CascadingOrchestrator = Depends(get_orchestrator),
) -> ExtractActionsResponse:
    result = await orchestrator.extract_action_items(request.email_content)

    logger.info(
        "Action items extracted",
        action_items_count=len(result.action_items),
        has_deadlines=result.has_deadlines,
        provider_used=result.provider_used,
    )
    return ExtractActionsResponse(data=result)


@router.post(
    "/summarize-thread",
    response_model=SummarizeThreadResponse,
    summary="Summarize an email thread",
    responses={
        503: {"description": "No AI provider could summarize the thread, or mailbox unavailable"},
    },
)
async def summarize_thread(
    request: SummarizeThreadRequest,
    orchestrator: CascadingOrchestrator = Depends(get_orchestrator),
    mailbox: ImapMailbox = Depends(get_mailbox),
) -> SummarizeThreadResponse:
    """
    Summarize a thread with a remote provider. There is no local fallback, so
    this route answers 503 when every provider fails.
    """
    if request.emails:
        messages = request.emails
    else:
        fetched = await mailbox.latest_from(request.sender_email, THREAD_FETCH_LIMIT)
        # mailbox returns newest first; threads read oldest first
        messages = [
            ThreadMessage(sender=m.sender, subject=m.subject, date=m.date, text=m.text or m.html or "")
            for m in reversed(fetched)
        ]

    logger.info("Thread summarization requested", thread_length=len(messages))
    summary = await orchestrator.summarize_thread(messages)

    logger.info("Thread summarized", thread_length=summary.thread_length, provider_used=summary.provider_used)
    return SummarizeThreadResponse(summary=summary)


@router.post(
    "/smart-process",
    response_model=SmartProcessResponse,
    summary="Analyze and optionally draft a reply",
)
async def smart_process(
    request: SmartProcessRequest,
    orchestrator: CascadingOrchestrator = Depends(get_orchestrator),
) -> SmartProcessResponse:
    analysis = await orchestrator.analyze(
        AnalysisRequest(text=request.email_content, depth=AnalysisDepth.COMPREHENSIVE)
    )

    draft = None
    if request.generate_response:
        draft = await orchestrator.draft_response(request.email_content, "", request.tone)

    logger.info(
        "Smart processing completed",
        provider_used=analysis.provider_used,
        response_generated=draft is not None,
    )
    return SmartProcessResponse(analysis=analysis, response=draft)


@router.get(
    "/status",
    response_model=ProviderStatusResponse,
    summary="Configured providers",
)
async def ai_status(
    orchestrator: CascadingOrchestrator = Depends(get_orchestrator),
) -> ProviderStatusResponse:
    """Providers in cascade order; the local engine is always last."""
    providers = orchestrator.available_providers()
    return ProviderStatusResponse(providers=providers, remote_providers=len(providers) - 1)
