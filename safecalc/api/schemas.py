"""Request/response Pydantic models for the API layer."""

from __future__ import annotations

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class EvaluateRequest(BaseModel):
    """Request body for evaluating a single expression."""

    expression: str = Field(
        ...,
        description="Arithmetic expression, e.g. '200+10%'. Visual glyphs × ÷ − are accepted.",
    )


class BatchEvaluateRequest(BaseModel):
    """Request body for evaluating several independent expressions."""

    expressions: list[str] = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class EvaluateResponse(BaseModel):
    """Successful evaluation."""

    expression: str
    value: float
    display: str = Field(description="Value formatted for display (no trailing '.0').")


class BatchItemResponse(BaseModel):
    """One entry of a batch response: either value/display or error/detail."""

    expression: str
    value: float | None = None
    display: str | None = None
    error: str | None = Field(default=None, description="Error kind, e.g. 'DivisionByZero'")
    detail: str | None = None
    position: int | None = None


class BatchEvaluateResponse(BaseModel):
    results: list[BatchItemResponse]
    succeeded: int
    failed: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str = "0.1.0"
    max_depth: int = 64


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: str | None = None
    position: int | None = None
