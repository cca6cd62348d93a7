"""
Plant API — Request Logging Middleware
=======================================

What:  One access log line per request on the `plant_api.access` logger.
How:   Measures wall time around the downstream app and picks the level from
       the status code (5xx → ERROR, 4xx → WARNING, else INFO).

Logged:     method, path, status, duration, request id, client ip
Not logged: bodies, Authorization headers, uploaded bytes
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from plant_api.middleware.request_id import request_id_var

logger = logging.getLogger("plant_api.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    # Probed every few seconds by orchestrators; not worth a log line
    SKIPPED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method

        rid = request_id_var.get("")
        try:
            response = await call_next(request)
        except Exception:
            # Answered by the catch-all handler outside this middleware
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "%s %s 500 %.1fms [%s] from %s (unhandled exception)",
                method,
                path,
                duration_ms,
                rid,
                client_ip,
                extra={
                    "request_id": rid,
                    "method": method,
                    "path": path,
                    "status": 500,
                    "duration_ms": round(duration_ms, 2),
                    "client_ip": client_ip,
                },
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
