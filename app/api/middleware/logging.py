# 📄 File: app/api/middleware/logging.py
# 🧭 Purpose (Layman Explanation):
# Keeps a diary of every request made to the identification service: what was asked for, how
# long it took and how it ended, with a tracking number attached to each request.
# 🧪 Purpose (Technical Summary):
# Request logging middleware assigning/propagating X-Request-ID, binding request context
# variables for structured logs, and emitting one http_request performance event per request.
# 🔗 Dependencies:
# FastAPI/Starlette BaseHTTPMiddleware, app.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# app.main (middleware registration), error handlers (request_id in envelopes)

import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.shared.utils.logging import get_logger, log_context

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Probes are too chatty to log
EXCLUDED_PATHS = {"/health/live"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Request logging middleware.

    Features:
    - Request ID generation and propagation (X-Request-ID)
    - Request context for every log line emitted while handling the request
    - Method/path/status/duration performance events
    - Slow request warnings
    """

    def __init__(self, app: ASGIApp, slow_request_threshold_ms: float = 2000.0):
        super().__init__(app)
        self.slow_request_threshold_ms = slow_request_threshold_ms

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = self._get_or_create_request_id(request)
        request.state.request_id = request_id

        with log_context(request_id=request_id):
            start_time = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception as e:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.error(
                    f"❌ Unhandled error on {request.method} {request.url.path}: {type(e).__name__}",
                    extra={"duration_ms": round(duration_ms, 2)},
                    exc_info=True,
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            response.headers[REQUEST_ID_HEADER] = request_id

            if request.url.path not in EXCLUDED_PATHS:
                logger.performance.log_request(
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=duration_ms,
                    user_id=getattr(request.state, "user_id", None),
                )
                if duration_ms > self.slow_request_threshold_ms:
                    logger.warning(f"Slow request: {request.method} {request.url.path} took {duration_ms:.0f}ms")

            return response

    @staticmethod
    def _get_or_create_request_id(request: Request) -> str:
        incoming = request.headers.get(REQUEST_ID_HEADER)
        if incoming and len(incoming) <= 128:
            return incoming
        return str(uuid.uuid4())
