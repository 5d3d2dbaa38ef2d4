"""
Automation routes: end-to-end email verification.
"""

from datetime import timedelta

import structlog
from fastapi import APIRouter, Depends

from email_automation.api.dependencies import (
    get_freshness_window,
    get_settings,
    get_verification_workflow,
)
from email_automation.api.models import VerifyEmailRequest, VerifyEmailResponse
from email_automation.config import Settings
from email_automation.models.mail_models import VerificationTask
from email_automation.verification.workflow import VerificationWorkflow

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/verify-email",
    response_model=VerifyEmailResponse,
    summary="Wait for a verification email and complete it",
    responses={
        422: {"description": "Fresh message found but it has no verification link"},
        502: {"description": "Browser automation failed"},
        503: {"description": "Mailbox unavailable"},
        504: {"description": "No fresh message before the deadline"},
    },
)
async def verify_email(
    request: VerifyEmailRequest,
    workflow: VerificationWorkflow = Depends(get_verification_workflow),
    freshness_window: timedelta = Depends(get_freshness_window),
    settings: Settings = Depends(get_settings),
) -> VerifyEmailResponse:
    """
    Poll the mailbox for a fresh message from `senderEmail`, follow its
    verification link in a headless browser and report the outcome.

    `maxWaitTime` (milliseconds) bounds the polling; it is capped by
    VERIFICATION_MAX_TIMEOUT_SECONDS.
    """
    if request.max_wait_time is None:
        timeout_seconds = settings.VERIFICATION_DEFAULT_TIMEOUT_SECONDS
    else:
        timeout_seconds = min(request.max_wait_time / 1000, settings.VERIFICATION_MAX_TIMEOUT_SECONDS)

    task = VerificationTask.within(
        request.sender_email,
        timeout_seconds,
        freshness_window=freshness_window,
    )
    logger.info("Email verification requested", sender=task.sender, timeout_seconds=timeout_seconds)

    outcome = await workflow.run(task)
    return VerifyEmailResponse(result=outcome)
