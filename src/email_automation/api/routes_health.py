"""
Liveness and health routes (no API key required).
"""

import structlog
from fastapi import APIRouter, Depends

from email_automation.api.dependencies import get_orchestrator, get_settings
from email_automation.api.models import HealthResponse
from email_automation.config import Settings
from email_automation.orchestration.orchestrator import CascadingOrchestrator

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/live", summary="Liveness check")
async def live() -> dict:
    return {"status": "alive"}


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health(
    orchestrator: CascadingOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
) -> HealthResponse:
    """
    Report provider reachability and mailbox configuration.

    The service is "healthy" when at least one remote provider is reachable
    and the mailbox is configured, "degraded" otherwise. Analysis still works
    when degraded (local engine), so the status code stays 200.
    """
    provider_health = await orchestrator.health()
    services = {name: "ok" if ok else "unreachable" for name, ok in provider_health.items()}
    services["mailbox"] = "configured" if settings.mailbox_configured else "not_configured"

    remote_ok = any(ok for name, ok in provider_health.items() if name != orchestrator.local_engine.name)
    overall = "healthy" if remote_ok and settings.mailbox_configured else "degraded"

    if overall != "healthy":
        logger.warning("Service degraded", services=services)

    return HealthResponse(status=overall, version=settings.APP_VERSION, services=services)
