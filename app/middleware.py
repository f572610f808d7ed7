# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP middleware: request ID propagation, Prometheus metrics, 405 dispatch.
"""
import time
import uuid
from typing import Dict, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.metrics import HTTP_ERRORS, REQUEST_COUNT, REQUEST_LATENCY

KNOWN_PATHS = ("/events",)

SKIP_PATHS = (
    "/health", "/health/ready", "/metrics", "/openapi.json", "/docs", "/redoc",
)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Propagate or generate X-Request-ID."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Track request count, latency, and error rate."""

    async def dispatch(self, request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = time.time() - start

        path = request.url.path
        if path in SKIP_PATHS:
            return response
        # unknown paths share one label so scanners cannot blow up cardinality
        endpoint = path if path in KNOWN_PATHS else "other"

        REQUEST_COUNT.labels(
            method=request.method, endpoint=endpoint, status=str(response.status_code),
        ).inc()
        REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(duration)
        if response.status_code >= 400:
            HTTP_ERRORS.labels(
                method=request.method, endpoint=endpoint, status=str(response.status_code),
            ).inc()
        return response


class AllowedMethodsMiddleware(BaseHTTPMiddleware):
    """Answer any method a resource does not serve with 405 and its Allow list.

    Runs before routing so unknown and extension methods (PROPFIND, FOO)
    get the same response as PUT or DELETE.
    """

    def __init__(self, app, allowed: Dict[str, Tuple[str, ...]]):
        super().__init__(app)
        self._allowed = allowed

    async def dispatch(self, request: Request, call_next):
        methods = self._allowed.get(request.url.path)
        if methods is not None and request.method not in methods:
            return JSONResponse(
                status_code=405,
                content={"error": "method_not_allowed", "detail": "method not allowed"},
                headers={"Allow": ", ".join(methods)},
            )
        return await call_next(request)
