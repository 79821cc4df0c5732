"""Deserialization boundary for the two formatting operations.

WHY: Callers (the editor via HTTP, scripts via the CLI) send loosely typed
JSON. The library works on typed values and must never see a half-valid
request. This module validates the request, runs the library and checks
the serialized delta before it leaves the process.

HOW: Payloads are validated with the pydantic models from
server.models; any ValidationError becomes a RequestFormatError. The
results are converted with to_dict() and each run list is validated with
jsonschema against format_lines/delta_schema.json.

RULES:
- Malformed requests raise RequestFormatError; nothing is computed
- A missing font/width falls back to CAPTION_FONT / CAPTION_MAX_WIDTH
- Without an injected port, a fresh PillowMeasurer is built per call and
  its font is loaded before wrapping starts
- Output dicts are plain JSON-serializable values
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable

import jsonschema
from pydantic import TypeAdapter, ValidationError

import format_lines
from caption_review.config import DEFAULT_FONT, resolve_default_max_width
from caption_review.server.models import NewlineRequest, SoundRequest, UnknownIndex
from format_lines import MeasurementPort, WordRange

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(format_lines.__file__).resolve().parent / "delta_schema.json"

_TOKENS_ADAPTER = TypeAdapter(list[str])


class RequestFormatError(ValueError):
    """Raised when a request payload cannot be deserialized.

    WHY: Callers need one typed exception for "your request is malformed",
    distinct from measurement or internal failures.

    RULES:
    - Message is the human-readable validation summary
    - Raised before any formatting work starts
    """


def _load_schema() -> dict[str, Any]:
    """Load the delta JSON schema from disk.

    Cached at module level after first call to avoid repeated I/O.
    """
    with open(_SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


_CACHED_SCHEMA: dict[str, Any] | None = None


def _get_schema() -> dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        _CACHED_SCHEMA = _load_schema()
    return _CACHED_SCHEMA


def validate_delta(runs: list[dict[str, Any]]) -> None:
    """Validate a serialized run list against the delta schema.

    Raises:
        jsonschema.ValidationError: If a run has an unexpected shape.
    """
    jsonschema.validate(instance=runs, schema=_get_schema())


def _to_ranges(indexes: list[UnknownIndex]) -> list[WordRange]:
    return [WordRange(word=i.word, start=i.start, end=i.end) for i in indexes]


def parse_sound_request(payload: Any) -> SoundRequest:
    """Validate a {input, output, response} payload.

    Raises:
        RequestFormatError: If the payload does not match SoundRequest.
    """
    try:
        return SoundRequest.model_validate(payload)
    except ValidationError as exc:
        raise RequestFormatError("Malformed sound request: {}".format(exc)) from exc


def parse_newline_request(payload: Any) -> NewlineRequest:
    """Validate a {tokens, font?, max_width?} payload.

    Raises:
        RequestFormatError: If the payload does not match NewlineRequest.
    """
    try:
        return NewlineRequest.model_validate(payload)
    except ValidationError as exc:
        raise RequestFormatError("Malformed newline request: {}".format(exc)) from exc


def parse_tokens(payload: Any) -> list[str]:
    """Validate a bare token list (the CLI input shape).

    Raises:
        RequestFormatError: If the payload is not a list of strings.
    """
    try:
        return _TOKENS_ADAPTER.validate_python(payload, strict=True)
    except ValidationError as exc:
        raise RequestFormatError("Malformed token list: {}".format(exc)) from exc


def run_format_sound(
    payload: Any,
    id_factory: Callable[[], str] | None = None,
) -> dict[str, Any]:
    """Annotate unknown words for a sound request payload.

    WHY: The editor shows the recognized text and its translation with
    every unknown word highlighted and linked to a correction widget.

    HOW: Validates the payload, converts the index lists to WordRanges
    and runs format_lines.format_sound() on the input and output strings.

    Args:
        payload: Decoded JSON {input, output, response}.
        id_factory: Optional identifier generator (tests pass a counter).

    Returns:
        {"input": [run, ...], "output": [run, ...]}

    Raises:
        RequestFormatError: If the payload is malformed.
    """
    request = parse_sound_request(payload)
    delta = format_lines.format_sound(
        request.input,
        request.output,
        _to_ranges(request.response.input_unknown_indexes),
        _to_ranges(request.response.output_unknown_indexes),
        id_factory=id_factory,
    )
    result = delta.to_dict()
    validate_delta(result["input"])
    validate_delta(result["output"])
    return result


def run_format_newline(
    tokens: Any,
    font: str | None = None,
    max_width: int | None = None,
    port: MeasurementPort | None = None,
) -> dict[str, Any]:
    """Wrap tokens and render subtitles for a newline request.

    WHY: The editor sends the token stream of a caption together with the
    player's font and width and gets back the lines, the per-line delta,
    the warning categories and the subtitle file.

    HOW: Validates tokens and width, builds the measurement port (Pillow
    unless one is injected), then runs format_lines.format_newline().

    Args:
        tokens: Decoded JSON token list.
        font: CSS font shorthand; defaults to CAPTION_FONT.
        max_width: Maximum line width in pixels; defaults to CAPTION_MAX_WIDTH.
        port: Optional measurement port (tests pass a fixed-width stub).

    Returns:
        {"lines": [...], "input": [run, ...], "errors": [...], "subtitle": "..."}

    Raises:
        RequestFormatError: If tokens or max_width are malformed.
        MeasurementUnavailableError: If the font cannot be loaded.
    """
    token_list = parse_tokens(tokens)
    font = font or DEFAULT_FONT
    if max_width is None:
        max_width = resolve_default_max_width()
    if isinstance(max_width, bool) or not isinstance(max_width, int) or max_width <= 0:
        raise RequestFormatError(
            "max_width must be a positive integer, got {!r}".format(max_width)
        )

    if port is None:
        from caption_review.adapters.pillow_measure import PillowMeasurer

        measurer = PillowMeasurer()
        measurer.load(font)
        port = measurer

    result = format_lines.format_newline(token_list, port, font, max_width).to_dict()
    validate_delta(result["input"])
    logger.info(
        "Formatted %d tokens into %d lines (%d warning categories)",
        len(token_list), len(result["lines"]), len(result["errors"]),
    )
    return result


def run_newline_request(
    payload: Any,
    port: MeasurementPort | None = None,
) -> dict[str, Any]:
    """Run run_format_newline() on a {tokens, font?, max_width?} payload."""
    request = parse_newline_request(payload)
    return run_format_newline(request.tokens, request.font, request.max_width, port=port)
