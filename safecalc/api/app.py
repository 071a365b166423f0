"""FastAPI application exposing the safe arithmetic evaluator.

Provides REST API endpoints for evaluating expressions, a health check,
and Prometheus metrics.

Usage:
    uvicorn safecalc.api.app:app --reload          # Development
    uvicorn safecalc.api.app:app --host 0.0.0.0    # Production (behind reverse proxy)
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from safecalc import __version__
from safecalc.api.metrics import get_metrics_text, record_error, record_success
from safecalc.api.schemas import (
    BatchEvaluateRequest,
    BatchEvaluateResponse,
    BatchItemResponse,
    ErrorResponse,
    EvaluateRequest,
    EvaluateResponse,
    HealthResponse,
)
from safecalc.config import get_calc_settings, get_settings
from safecalc.engine.evaluator import EvalResult, evaluate
from safecalc.logging_config import setup_logging
from safecalc.utils.display import format_result, normalize_glyphs

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# App lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup."""
    settings = get_settings()
    setup_logging(settings.log_level, json_output=True)
    calc_settings = get_calc_settings()
    logger.info(
        "api_started",
        max_depth=calc_settings.evaluator.max_depth,
        max_expression_length=calc_settings.evaluator.max_expression_length,
    )

    yield

    logger.info("api_shutdown")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------

app = FastAPI(
    title="safecalc Arithmetic Evaluator API",
    description=(
        "REST API for evaluating infix arithmetic expressions with "
        "percentages and parentheses, without executing any code."
    ),
    version=__version__,
    lifespan=lifespan,
)

# CORS origins come from the SAFECALC_CORS_ORIGINS env var
cors_origins = get_settings().cors_origin_list
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )


def _too_large(detail: str) -> JSONResponse:
    logger.info("payload_rejected", detail=detail)
    return JSONResponse(
        status_code=413,
        content=ErrorResponse(error="PayloadTooLarge", detail=detail).model_dump(),
    )


def _length_error(expressions: list[str]) -> JSONResponse | None:
    """413 response when any expression exceeds the configured length."""
    limit = get_calc_settings().evaluator.max_expression_length
    if any(len(expression) > limit for expression in expressions):
        return _too_large(f"Expression longer than {limit} characters.")
    return None


def _evaluate(expression: str) -> EvalResult:
    """Evaluate with configured limits and record the outcome."""
    result = evaluate(normalize_glyphs(expression), **get_calc_settings().evaluate_kwargs())
    if result.ok:
        record_success()
    else:
        record_error(result.error.kind.value)
        logger.info(
            "expression_rejected",
            kind=result.error.kind.value,
            position=result.error.position,
        )
    return result


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.post(
    "/api/v1/evaluate",
    response_model=EvaluateResponse,
    responses={413: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def evaluate_expression(request: EvaluateRequest):
    """Evaluate a single expression.

    Evaluation failures (division by zero, unbalanced parentheses, ...) are
    returned as 422 with the error kind and the offending position.
    """
    too_long = _length_error([request.expression])
    if too_long is not None:
        return too_long
    result = _evaluate(request.expression)
    if not result.ok:
        return JSONResponse(
            status_code=422,
            content=ErrorResponse(**result.error.to_dict()).model_dump(),
        )
    return EvaluateResponse(
        expression=request.expression,
        value=result.value,
        display=format_result(result.value),
    )


@app.post(
    "/api/v1/evaluate/batch",
    response_model=BatchEvaluateResponse,
    responses={413: {"model": ErrorResponse}},
)
async def evaluate_batch(request: BatchEvaluateRequest):
    """Evaluate independent expressions; one failure does not affect the others."""
    max_batch = get_calc_settings().api.max_batch_size
    if len(request.expressions) > max_batch:
        return _too_large(f"Batch larger than {max_batch} expressions.")
    too_long = _length_error(request.expressions)
    if too_long is not None:
        return too_long

    items: list[BatchItemResponse] = []
    for expression in request.expressions:
        result = _evaluate(expression)
        if result.ok:
            items.append(
                BatchItemResponse(
                    expression=expression,
                    value=result.value,
                    display=format_result(result.value),
                )
            )
        else:
            items.append(
                BatchItemResponse(
                    expression=expression,
                    error=result.error.kind.value,
                    detail=result.error.message,
                    position=result.error.position,
                )
            )

    succeeded = sum(1 for item in items if item.error is None)
    return BatchEvaluateResponse(
        results=items,
        succeeded=succeeded,
        failed=len(items) - succeeded,
    )


# ---------------------------------------------------------------------------
# Health & Metrics
# ---------------------------------------------------------------------------


@app.get("/api/v1/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        max_depth=get_calc_settings().evaluator.max_depth,
    )


@app.get("/api/v1/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=get_metrics_text(),
        media_type="text/plain; charset=utf-8",
    )
