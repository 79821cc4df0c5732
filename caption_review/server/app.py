"""FastAPI application exposing the formatting operations over HTTP.

WHY: The caption review editor runs in a browser and calls the formatter
as a service: once per caption to wrap and time it, once per recognized
sentence to mark unknown words. FastAPI gives request handling, OpenAPI
docs and a test client with little code.

HOW: Three endpoints. POST /format/sound and POST /format/newline accept
the raw JSON body and hand it to core.operations, which owns validation.
GET /health is a liveness probe. Error types from the operations layer
are mapped to HTTP status codes here.

RULES:
- RequestFormatError -> 422, MeasurementUnavailableError -> 503
- Error responses use a consistent ErrorResponse schema
- Response bodies drop unset optional keys (response_model_exclude_none)
- Formatting handlers are plain def so FastAPI runs them in its threadpool
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Dict

from fastapi import Body, FastAPI, HTTPException

from caption_review import __version__
from caption_review.adapters.pillow_measure import MeasurementUnavailableError
from caption_review.config import API_HOST, API_PORT, LOG_LEVEL
from caption_review.core.operations import (
    RequestFormatError,
    run_format_sound,
    run_newline_request,
)
from caption_review.server.models import (
    ErrorResponse,
    HealthResponse,
    NewlineResponse,
    SoundDeltaResponse,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Caption Review Formatter API",
    description=(
        "Wraps caption tokens into display lines that fit a font and width, "
        "groups them into timed subtitle cues, renders SRT text, and marks "
        "unknown words and overlong lines as rich-text delta runs."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Endpoints: Formatting
# ---------------------------------------------------------------------------


@app.post(
    "/format/sound",
    response_model=SoundDeltaResponse,
    response_model_exclude_none=True,
    tags=["format"],
    summary="Mark unknown words in a text pair",
    description=(
        "Splits the input and output strings into plain and annotated runs "
        "at the given unknown-word indexes. Text after the last index of "
        "each string is not returned."
    ),
    responses={
        422: {"model": ErrorResponse, "description": "Malformed request"},
    },
)
def format_sound(
    payload: Annotated[
        Dict[str, Any],
        Body(description="{input, output, response: {text, *_indexes}}"),
    ],
) -> Dict[str, Any]:
    try:
        return run_format_sound(payload)
    except RequestFormatError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@app.post(
    "/format/newline",
    response_model=NewlineResponse,
    response_model_exclude_none=True,
    tags=["format"],
    summary="Wrap tokens into lines and render subtitles",
    description=(
        "Wraps the token stream to max_width pixels under the given font, "
        "pairs the lines into subtitle cues and returns the lines, the "
        "per-line delta, warning categories and the SRT text."
    ),
    responses={
        422: {"model": ErrorResponse, "description": "Malformed request"},
        503: {"model": ErrorResponse, "description": "Font could not be loaded"},
    },
)
def format_newline(
    payload: Annotated[
        Dict[str, Any],
        Body(description="{tokens: [...], font?: str, max_width?: int}"),
    ],
) -> Dict[str, Any]:
    try:
        return run_newline_request(payload)
    except RequestFormatError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except MeasurementUnavailableError as exc:
        logger.error("Measurement unavailable: %s", exc)
        raise HTTPException(status_code=503, detail=str(exc))


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api() -> None:
    """Entry point for the caption-review-api console script."""
    import uvicorn

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    logger.info("Starting API on %s:%d", API_HOST, API_PORT)
    uvicorn.run(app, host=API_HOST, port=API_PORT)
