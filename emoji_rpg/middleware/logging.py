"""Per-request access log with a correlation id."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("emoji_rpg.middleware.structured")

REQUEST_ID_HEADER = "X-Request-ID"

_RESET = "\u001b[0m"
# Keyed by the hundreds digit of the status code.
_STATUS_COLORS = {
    2: "\u001b[32m",
    3: "\u001b[36m",
    4: "\u001b[33m",
    5: "\u001b[31m",
}


@dataclass
class _AccessRecord:
    request_id: str
    method: str
    path: str
    client: str
    body_bytes: str
    started: float = field(default_factory=time.perf_counter)
    status: int = 0

    @classmethod
    def from_request(cls, request: Request) -> "_AccessRecord":
        return cls(
            request_id=request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex,
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else "-",
            body_bytes=request.headers.get("content-length", "-"),
        )

    def render(self) -> str:
        elapsed_ms = (time.perf_counter() - self.started) * 1000
        color = _STATUS_COLORS.get(self.status // 100, "")
        line = (
            f"[{self.request_id}] {self.method} {self.path} -> {self.status or '-'} "
            f"in {elapsed_ms:.2f}ms client={self.client} body={self.body_bytes}"
        )
        return f"{color}{line}{_RESET}" if color else line


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Log one colored line per request and echo the request id back."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        record = _AccessRecord.from_request(request)
        try:
            response = await call_next(request)
        except Exception:
            record.status = 500
            logger.exception(record.render())
            raise

        record.status = response.status_code
        response.headers[REQUEST_ID_HEADER] = record.request_id
        logger.info(record.render())
        return response
