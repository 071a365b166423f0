"""Prometheus metrics for the safecalc API.

Tracks evaluation outcomes and error kinds.
Metrics are exposed via /api/v1/metrics endpoint in Prometheus format.
"""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, generate_latest

REGISTRY = CollectorRegistry()

EVALUATIONS = Counter(
    "safecalc_evaluations_total",
    "Total expressions evaluated",
    ["outcome"],
    registry=REGISTRY,
)
EVALUATION_ERRORS = Counter(
    "safecalc_evaluation_errors_total",
    "Rejected expressions by error kind",
    ["kind"],
    registry=REGISTRY,
)


def record_success() -> None:
    EVALUATIONS.labels(outcome="ok").inc()


def record_error(kind: str) -> None:
    EVALUATIONS.labels(outcome="error").inc()
    EVALUATION_ERRORS.labels(kind=kind).inc()


def get_metrics_text() -> str:
    """Generate Prometheus metrics text output."""
    return generate_latest(REGISTRY).decode("utf-8")
