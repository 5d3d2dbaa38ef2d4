"""Request tracing middleware: request ids in every log line and response."""

import time
import uuid
from typing import Callable, Optional

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from email_automation.logging_config import REDACTED, SECRET_KEYS

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def masked_query(request: Request) -> Optional[dict]:
    """Query parameters for logging, with `api_key` and similar values masked."""
    if not request.query_params:
        return None
    return {
        key: REDACTED if key.lower() in SECRET_KEYS else value
        for key, value in request.query_params.items()
    }


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """
    Bind a request id to the structlog context for the duration of a request.

    A caller-supplied X-Request-ID is reused so ids can be followed across
    services; otherwise a UUID4 is generated. The id is echoed in the
    response header. Client errors are logged at warning level, server errors
    at error level.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        logger.info("Request started", query_params=masked_query(request))

        started = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

            log = logger.info
            if response.status_code >= 500:
                log = logger.error
            elif response.status_code >= 400:
                log = logger.warning
            log("Request completed", status_code=response.status_code, duration_ms=elapsed_ms)

            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception as exc:
            logger.error(
                "Request failed",
                exc_info=exc,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        finally:
            # contextvars would otherwise leak into the next request on this task
            structlog.contextvars.clear_contextvars()
