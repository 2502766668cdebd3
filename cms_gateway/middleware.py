import random
import time
import uuid
import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .logging_config import get_request_log_config, trace_id_var

logger = logging.getLogger("cms.http")


class TracingMiddleware(BaseHTTPMiddleware):
    """Request tracing and one structured log line per request"""

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.log_config = get_request_log_config()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        trace_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = trace_id_var.set(trace_id)

        client_ip = request.client.host if request.client else "unknown"
        tenant_id = request.headers.get("X-Tenant-ID", "unknown")
        start_time = time.time()

        try:
            response = await call_next(request)
            latency_ms = round((time.time() - start_time) * 1000, 2)
            self._log_request(
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                latency_ms=latency_ms,
                client_ip=client_ip,
                tenant_id=tenant_id,
            )
            response.headers["X-Request-ID"] = trace_id
            return response

        except Exception as e:
            latency_ms = round((time.time() - start_time) * 1000, 2)
            logger.error("Request failed: %s", e, extra={
                "method": request.method,
                "path": request.url.path,
                "status": 500,
                "latency_ms": latency_ms,
                "client_ip": client_ip,
                "tenant_id": tenant_id,
            })
            raise
        finally:
            trace_id_var.reset(token)

    def _log_request(self, method: str, path: str, status: int, latency_ms: float,
                     client_ip: str, tenant_id: str):
        """Log HTTP request with sampling; errors are always logged"""
        if path in self.log_config["exclude_paths"]:
            return

        extra = {
            "method": method,
            "path": path,
            "status": status,
            "latency_ms": latency_ms,
            "client_ip": client_ip,
            "tenant_id": tenant_id,
        }
        if status >= 400:
            logger.log(logging.ERROR if status >= 500 else logging.WARNING, "HTTP Request", extra=extra)
            return

        if random.random() > self.log_config["sample_rate"]:
            return
        logger.info("HTTP Request", extra=extra)
