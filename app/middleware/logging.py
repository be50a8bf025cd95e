import logging
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One log line per request, tagged with a request id echoed back to the caller."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()
        context = {"request_id": request_id, "method": request.method, "path": request.url.path}

        try:
            response = await call_next(request)
        except Exception:
            context["duration_ms"] = _elapsed_ms(started)
            logger.exception(f"[{request_id}] {request.method} {request.url.path} failed", extra=context)
            raise

        context["status_code"] = response.status_code
        context["duration_ms"] = _elapsed_ms(started)
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            f"[{request_id}] {request.method} {request.url.path} {response.status_code} in {context['duration_ms']}ms",
            extra=context,
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
