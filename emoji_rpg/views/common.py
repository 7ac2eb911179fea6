"""Common response schemas."""

from typing import Any, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
    fallback: Optional[dict[str, Any]] = None
