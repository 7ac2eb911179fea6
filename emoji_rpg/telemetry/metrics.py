"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

STAGE_LATENCY = Histogram(
    "voice_pipeline_stage_duration_seconds",
    "Duration of each voice pipeline stage in seconds",
    ("stage",),
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0),
)

STAGE_FAILURES = Counter(
    "voice_pipeline_stage_failures_total",
    "Upstream stage failures absorbed by the voice pipeline",
    ("stage",),
)

FALLBACK_COUNTER = Counter(
    "voice_pipeline_fallbacks_total",
    "Degraded responses served, by kind of fallback",
    ("kind",),
)

SCENE_SOFT_VIOLATIONS = Counter(
    "voice_scene_soft_violations_total",
    "Generated scenes outside the recommended emoji/option ranges",
    ("constraint",),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    labels = {"method": method or "UNKNOWN", "route": route or "unknown"}
    REQUEST_COUNT.labels(status=str(status_code), **labels).inc()
    REQUEST_LATENCY.labels(**labels).observe(max(duration_seconds, 0))
    if status_code >= 500:
        ERROR_COUNTER.labels(**labels).inc()


def observe_stage(stage: str, duration_seconds: float, *, failed: bool = False) -> None:
    """Record the latency of one pipeline stage and whether it failed."""

    STAGE_LATENCY.labels(stage=stage).observe(max(duration_seconds, 0))
    if failed:
        STAGE_FAILURES.labels(stage=stage).inc()


def increment_fallback(kind: str) -> None:
    FALLBACK_COUNTER.labels(kind=kind).inc()


def increment_soft_violation(constraint: str) -> None:
    SCENE_SOFT_VIOLATIONS.labels(constraint=constraint).inc()
