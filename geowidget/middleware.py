import time
import uuid
import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .config import HTTP_LOG_EXCLUDE_PATHS
from .logging_config import trace_id_var
from .services.prometheus_metrics import prometheus_metrics

logger = logging.getLogger("geowidget.access")


class TracingMiddleware(BaseHTTPMiddleware):
    """ASGI middleware for request tracing and access logging"""

    def __init__(self, app: ASGIApp, exclude_paths=None):
        super().__init__(app)
        self.exclude_paths = set(HTTP_LOG_EXCLUDE_PATHS if exclude_paths is None else exclude_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Generate or reuse trace ID
        trace_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = trace_id_var.set(trace_id)

        # transport peer only, forwarded headers are not trusted here
        peer = request.client.host if request.client else "-"
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            latency = time.perf_counter() - start_time
            logger.error(f"Request failed: {e}", extra={
                "method": request.method,
                "path": request.url.path,
                "status": 500,
                "latency_ms": round(latency * 1000, 2),
                "client_ip": peer,
            })
            prometheus_metrics.increment_requests(500, request.url.path)
            raise
        else:
            latency = time.perf_counter() - start_time
            prometheus_metrics.increment_requests(response.status_code, request.url.path)
            prometheus_metrics.observe_request_latency(request.url.path, latency)
            self._log_request(request, response.status_code, latency, peer)
            response.headers["X-Request-ID"] = trace_id
            return response
        finally:
            trace_id_var.reset(token)

    def _log_request(self, request: Request, status: int, latency: float, peer: str):
        """Log one access line: %a "%r" %s "%{Referer}i" "%{User-Agent}i" %T"""
        path = request.url.path
        if path in self.exclude_paths and status < 400:
            return

        request_line = f"{request.method} {path} HTTP/{request.scope.get('http_version', '1.1')}"
        level = logging.INFO
        if status >= 500:
            level = logging.ERROR
        elif status >= 400:
            level = logging.WARNING

        logger.log(level, '%s "%s" %s "%s" "%s" %.6f',
                   peer, request_line, status,
                   request.headers.get("referer", "-"),
                   request.headers.get("user-agent", "-"),
                   latency,
                   extra={
                       "method": request.method,
                       "path": path,
                       "status": status,
                       "latency_ms": round(latency * 1000, 2),
                       "client_ip": peer,
                       "component": "access",
                   })
