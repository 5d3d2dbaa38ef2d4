"""
FastAPI API routes and endpoints.

- routes_ai.py: AI endpoints (/api/ai/...)
- routes_email.py: Mailbox and extraction endpoints (/api/emails/...)
- routes_automation.py: Verification workflow endpoint (/api/automation/verify-email)
- routes_health.py: /live and /health
- dependencies.py: Dependency injection for orchestrator, mailbox, browser, API key check
- models.py: API-specific request/response models
- error_handlers.py: Exception handlers for structured error responses
"""

from email_automation.api import dependencies, error_handlers, models
from email_automation.api.routes_ai import router as ai_router
from email_automation.api.routes_automation import router as automation_router
from email_automation.api.routes_email import router as email_router
from email_automation.api.routes_health import router as health_router

__all__ = [
    "ai_router",
    "automation_router",
    "email_router",
    "health_router",
    "dependencies",
    "error_handlers",
    "models",
]
