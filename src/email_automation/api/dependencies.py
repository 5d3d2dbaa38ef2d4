"""
FastAPI dependency injection for the email automation service.

Provides singleton instances of expensive resources (prompt builder,
orchestrator with its pooled HTTP clients, mailbox, browser launcher) and
factory functions for per-request components.
"""

import secrets
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Optional

from fastapi import Depends, HTTPException, Query, Security, status
from fastapi.security import APIKeyHeader

from email_automation.config import Settings, settings
from email_automation.models.provider_models import ProviderConfig
from email_automation.orchestration.orchestrator import CascadingOrchestrator
from email_automation.providers.prompt_builder import PromptBuilder
from email_automation.verification.browser import PlaywrightBrowserLauncher
from email_automation.verification.mailbox import ImapMailbox
from email_automation.verification.workflow import VerificationWorkflow


api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance
    """
    return settings


@lru_cache()
def get_prompt_builder() -> PromptBuilder:
    """
    Get singleton prompt builder.

    Loads Jinja2 templates once and reuses them across requests.
    """
    config = get_settings()
    templates_dir = Path(config.PROMPT_TEMPLATES_DIR) if config.PROMPT_TEMPLATES_DIR else None
    return PromptBuilder(
        templates_dir=templates_dir,
        body_truncation_limit=config.BODY_TRUNCATION_LIMIT,
    )


@lru_cache()
def get_orchestrator() -> CascadingOrchestrator:
    """
    Get singleton orchestrator.

    Adapters keep pooled HTTP clients, so there is exactly one orchestrator per
    process; it is closed on application shutdown.

    Returns:
        CascadingOrchestrator over the enabled providers in configured order
    """
    config = get_settings()
    return CascadingOrchestrator.from_config(
        ProviderConfig.from_settings(config),
        get_prompt_builder(),
        max_retries=config.PROVIDER_MAX_RETRIES,
    )


@lru_cache()
def get_mailbox() -> ImapMailbox:
    """Get singleton mailbox collaborator (each use opens its own session)."""
    return ImapMailbox.from_settings(get_settings())


@lru_cache()
def get_browser_launcher() -> PlaywrightBrowserLauncher:
    """Get singleton browser launcher (each run launches its own browser)."""
    return PlaywrightBrowserLauncher.from_settings(get_settings())


def get_verification_workflow(
    mailbox: ImapMailbox = Depends(get_mailbox),
    browser_launcher: PlaywrightBrowserLauncher = Depends(get_browser_launcher),
    settings: Settings = Depends(get_settings),
) -> VerificationWorkflow:
    """
    Create verification workflow with injected collaborators.

    Note: the workflow is NOT cached; it is lightweight and holds no state
    between runs.
    """
    return VerificationWorkflow(
        mailbox=mailbox,
        browser_launcher=browser_launcher,
        poll_interval=settings.VERIFICATION_POLL_INTERVAL_SECONDS,
        completion_timeout=settings.VERIFICATION_COMPLETION_TIMEOUT_SECONDS,
    )


def get_freshness_window(settings: Settings = Depends(get_settings)) -> timedelta:
    return timedelta(seconds=settings.VERIFICATION_FRESHNESS_WINDOW_SECONDS)


async def require_api_key(
    header_key: Optional[str] = Security(api_key_header),
    query_key: Optional[str] = Query(default=None, alias="api_key", include_in_schema=False),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Check the X-API-Key header (or `api_key` query parameter).

    Disabled when no API keys are configured.

    Raises:
        HTTPException: 401 when keys are configured and none matches
    """
    if not settings.API_KEYS:
        return

    provided = header_key or query_key
    if provided and any(secrets.compare_digest(provided.encode(), key.encode()) for key in settings.API_KEYS):
        return

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or missing API key",
    )
