"""
Email routes: latest messages from a sender, mailbox search and artifact
extraction.
"""

import structlog
from fastapi import APIRouter, Depends, Path, Query

from email_automation.api.dependencies import get_mailbox
from email_automation.api.models import (
    ExtractCodeResponse,
    ExtractContentRequest,
    ExtractLinksResponse,
    LatestEmailsResponse,
    SearchEmailsRequest,
)
from email_automation.verification.extraction import (
    extract_verification_code,
    extract_verification_links,
)
from email_automation.verification.mailbox import ImapMailbox

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get(
    "/latest/{sender}",
    response_model=LatestEmailsResponse,
    summary="Latest messages from a sender",
    responses={503: {"description": "Mailbox unavailable"}},
)
async def latest_emails(
    sender: str = Path(..., min_length=3),
    limit: int = Query(default=5, ge=1, le=50),
    mailbox: ImapMailbox = Depends(get_mailbox),
) -> LatestEmailsResponse:
    """Most recent messages from `sender`, newest first."""
    emails = await mailbox.latest_from(sender, limit)
    logger.info("Latest emails fetched", sender=sender, count=len(emails))
    return LatestEmailsResponse(emails=list(emails))


@router.post(
    "/search",
    response_model=LatestEmailsResponse,
    summary="Search the mailbox",
    responses={503: {"description": "Mailbox unavailable"}},
)
async def search_emails(
    request: SearchEmailsRequest,
    mailbox: ImapMailbox = Depends(get_mailbox),
) -> LatestEmailsResponse:
    """Messages matching every criterion, newest first."""
    emails = await mailbox.search(request.criteria, request.options.limit)
    logger.info("Mailbox search completed", count=len(emails))
    return LatestEmailsResponse(emails=list(emails))


@router.post(
    "/extract-links",
    response_model=ExtractLinksResponse,
    summary="Extract verification links",
)
async def extract_links(request: ExtractContentRequest) -> ExtractLinksResponse:
    links = extract_verification_links(request.to_content())
    return ExtractLinksResponse(links=links)


@router.post(
    "/extract-code",
    response_model=ExtractCodeResponse,
    summary="Extract a verification code",
)
async def extract_code(request: ExtractContentRequest) -> ExtractCodeResponse:
    code = extract_verification_code(request.to_content())
    return ExtractCodeResponse(code=code)
