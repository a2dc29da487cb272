"""
Request timing middleware.

Measures each request end to end and how much of it was spent waiting on
the backend. Response headers:

    X-Request-ID            caller's id, or a generated one
    X-Request-Duration-Ms   total time in this process
    X-Backend-Calls         number of backend round-trips made
    X-Backend-Duration-Ms   summed time of those round-trips
"""

import logging
import time
import uuid

from flask import Flask, g, has_request_context, request

logger = logging.getLogger(__name__)

# Health endpoints hit every few seconds by the load balancer
_SKIP_LOG = frozenset({"/api/v1/health/ready"})

# A list view is one backend round-trip; search fans out to four
SLOW_THRESHOLD_MS = 1500


def record_backend_call(duration_ms: float) -> None:
    """Account one backend round-trip against the current request."""
    if not has_request_context():
        return
    g.backend_calls = g.get("backend_calls", 0) + 1
    g.backend_ms = g.get("backend_ms", 0.0) + duration_ms


def init_request_timing(app: Flask):
    """Register before/after hooks for request timing."""

    @app.before_request
    def _start_timer():
        g.request_start = time.perf_counter()
        g.request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        g.backend_calls = 0
        g.backend_ms = 0.0

    @app.after_request
    def _stamp_and_log(response):
        start = g.get("request_start")
        if start is None:
            return response

        duration_ms = (time.perf_counter() - start) * 1000
        backend_calls = g.get("backend_calls", 0)
        backend_ms = g.get("backend_ms", 0.0)
        response.headers["X-Request-ID"] = g.request_id
        response.headers["X-Request-Duration-Ms"] = f"{duration_ms:.1f}"
        response.headers["X-Backend-Calls"] = str(backend_calls)
        response.headers["X-Backend-Duration-Ms"] = f"{backend_ms:.1f}"

        if request.path in _SKIP_LOG:
            return response

        view_args = request.view_args or {}
        extra = {
            "method": request.method,
            "path": request.path,
            "status": response.status_code,
            "duration_ms": duration_ms,
            "remote_addr": request.remote_addr,
            "entity": view_args.get("entity"),
            "record_id": view_args.get("record_id"),
        }
        summary = "%s %s %d (%.0fms, %d backend calls / %.0fms)"
        args = (request.method, request.path, response.status_code,
                duration_ms, backend_calls, backend_ms)
        if duration_ms > SLOW_THRESHOLD_MS:
            logger.warning("Slow request: " + summary, *args, extra=extra)
        elif response.status_code >= 500:
            logger.error("Server error: " + summary, *args, extra=extra)
        else:
            logger.debug("Request: " + summary, *args, extra=extra)

        return response
