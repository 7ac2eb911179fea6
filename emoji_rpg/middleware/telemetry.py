"""Request instrumentation for Prometheus."""

from __future__ import annotations

import time
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from emoji_rpg.telemetry import observe_request

# Scrapes and probes would otherwise dominate the request counters.
_UNTRACKED_PATHS = frozenset({"/metrics", "/health"})


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Collect request count and latency per route."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path in _UNTRACKED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            observe_request(request.method, self._resolve_route(request), 500, time.perf_counter() - start_time)
            raise

        observe_request(
            request.method,
            self._resolve_route(request),
            response.status_code,
            time.perf_counter() - start_time,
        )
        return response

    @staticmethod
    def _resolve_route(request: Request) -> str:
        """Prefer the matched route template so labels stay low-cardinality."""

        scope_route: Any = request.scope.get("route")
        path = getattr(scope_route, "path", None) if scope_route is not None else None
        return path or request.url.path
