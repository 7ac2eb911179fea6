"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    FALLBACK_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    SCENE_SOFT_VIOLATIONS,
    STAGE_FAILURES,
    STAGE_LATENCY,
    increment_fallback,
    increment_soft_violation,
    observe_request,
    observe_stage,
)

__all__ = [
    "ERROR_COUNTER",
    "FALLBACK_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SCENE_SOFT_VIOLATIONS",
    "STAGE_FAILURES",
    "STAGE_LATENCY",
    "increment_fallback",
    "increment_soft_violation",
    "observe_request",
    "observe_stage",
]
