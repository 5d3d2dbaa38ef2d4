"""
FastAPI application entry point for the Email Automation Service.
"""

import structlog
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from email_automation.api.dependencies import get_orchestrator, get_prompt_builder, require_api_key
from email_automation.api.error_handlers import EXCEPTION_HANDLERS
from email_automation.api.middleware import RequestTracingMiddleware
from email_automation.api.routes_ai import router as ai_router
from email_automation.api.routes_automation import router as automation_router
from email_automation.api.routes_email import router as email_router
from email_automation.api.routes_health import router as health_router
from email_automation.config import settings
from email_automation.logging_config import configure_logging

# Configure structured logging before any other imports
configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
logger = structlog.get_logger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Email analysis, reply drafting and verification automation with cascading AI providers",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Request tracing middleware (must be first for request_id in all logs)
app.add_middleware(RequestTracingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOWED_ORIGINS,
    allow_credentials="*" not in settings.CORS_ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

# Include routers
api_key_check = [Depends(require_api_key)]
app.include_router(health_router, tags=["health"])
app.include_router(ai_router, prefix="/api/ai", tags=["ai"], dependencies=api_key_check)
app.include_router(email_router, prefix="/api/emails", tags=["emails"], dependencies=api_key_check)
app.include_router(automation_router, prefix="/api/automation", tags=["automation"], dependencies=api_key_check)


# Startup event
@app.on_event("startup")
async def startup():
    """Application startup - build shared resources and report configuration."""
    # Fails fast on missing or broken prompt templates
    get_prompt_builder()
    orchestrator = get_orchestrator()

    logger.info(
        "Application startup",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        providers=orchestrator.available_providers(),
        mailbox_configured=settings.mailbox_configured,
        api_key_required=bool(settings.API_KEYS),
    )

    if len(orchestrator.adapters) == 0:
        logger.warning("No remote AI provider configured; every call will use the local engine")
    if not settings.mailbox_configured:
        logger.warning("Mailbox credentials missing; email and automation routes will answer 503")

    logger.info("Application startup complete")


# Shutdown event
@app.on_event("shutdown")
async def shutdown():
    """Application shutdown - close pooled provider HTTP clients."""
    logger.info("Application shutdown")
    await get_orchestrator().aclose()
    logger.info("Application shutdown complete")


# Prometheus metrics instrumentation
if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    """Root endpoint with service info and documentation links."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "ai": "/api/ai",
            "emails": "/api/emails",
            "automation": "/api/automation",
        },
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "email_automation.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
