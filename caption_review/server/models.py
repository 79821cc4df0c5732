"""Pydantic request/response models for the wire format.

WHY: Both entry points take a deserialized request and return a
serializable response whose field names are fixed by the editor client.
Pydantic models validate incoming payloads (fail fast on malformed input)
and document the response shapes in the OpenAPI schema.

HOW: Request models run in strict mode so a string offset or a number
token is rejected rather than coerced. Response models mirror the run
(delta) shape; optional keys are dropped at serialization time with
exclude_none.

RULES:
- Field names are a compatibility contract - never rename them
- Offsets are non-negative character offsets with end >= start
- output_warning_indexes is accepted but not consumed
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class WarningIndex(BaseModel):
    """A warning span in the output text (accepted, not consumed)."""

    model_config = ConfigDict(strict=True)

    start: int = Field(ge=0, description="First character offset (inclusive).")
    end: int = Field(ge=0, description="Last character offset (exclusive).")

    @model_validator(mode="after")
    def _check_order(self) -> "WarningIndex":
        if self.end < self.start:
            raise ValueError("end ({}) is before start ({})".format(self.end, self.start))
        return self


class UnknownIndex(WarningIndex):
    """A flagged (unknown) word span."""

    word: str = Field(description="The flagged word, echoed into the annotated run.")


class SoundResponse(BaseModel):
    """Structured recognition result carrying the flagged spans.

    RULES:
    - text is accepted for compatibility; runs are cut from the separate
      input/output strings
    - Index lists are expected ascending by start. Order is not checked;
      out-of-order spans are annotated literally and logged
    """

    model_config = ConfigDict(strict=True)

    text: str = Field(description="Recognized text (not used for annotation).")
    input_unknown_indexes: List[UnknownIndex] = Field(
        description="Unknown-word spans in the input string.",
    )
    output_unknown_indexes: List[UnknownIndex] = Field(
        description="Unknown-word spans in the output string.",
    )
    output_warning_indexes: List[WarningIndex] = Field(
        description="Warning spans in the output string (currently unused).",
    )


class SoundRequest(BaseModel):
    """Body of POST /format/sound."""

    model_config = ConfigDict(strict=True)

    input: str = Field(description="Source text the input indexes point into.")
    output: str = Field(description="Translated text the output indexes point into.")
    response: SoundResponse = Field(description="Flagged spans for both texts.")


class NewlineRequest(BaseModel):
    """Body of POST /format/newline."""

    model_config = ConfigDict(strict=True)

    tokens: List[str] = Field(
        description="Ordered tokens; an empty string marks a line/paragraph break.",
    )
    font: Optional[str] = Field(
        default=None,
        description="CSS font shorthand, e.g. '24px sans-serif'. Defaults to CAPTION_FONT.",
    )
    max_width: Optional[int] = Field(
        default=None,
        gt=0,
        description="Maximum line width in pixels. Defaults to CAPTION_MAX_WIDTH.",
    )


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class WarningModel(BaseModel):
    uuid: str = Field(description="Identifier unique within the response.")
    unknown: Optional[str] = Field(default=None, description="The flagged word.")
    num: Optional[int] = Field(default=None, description="Reserved; never set.")


class AttributesModel(BaseModel):
    warning: Optional[WarningModel] = None
    caution: Optional[str] = Field(
        default=None,
        description="Caution message for a line wider than max_width.",
    )


class RunModel(BaseModel):
    insert: str = Field(description="Text fragment.")
    attributes: Optional[AttributesModel] = None


class SoundDeltaResponse(BaseModel):
    input: List[RunModel] = Field(description="Runs for the input string.")
    output: List[RunModel] = Field(description="Runs for the output string.")


class NewlineResponse(BaseModel):
    lines: List[str] = Field(description="Wrapped display lines.")
    input: List[RunModel] = Field(description="One newline-terminated run per line.")
    errors: List[str] = Field(description="Distinct warning categories, sorted.")
    subtitle: str = Field(description="Rendered SRT subtitle text.")

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "lines": ["Hello world", "Foo。"],
                "input": [{"insert": "Hello world\n"}, {"insert": "Foo。\n"}],
                "errors": [],
                "subtitle": "1\n01:00:00,000 --> 01:05:05,000\n"
                            "<b>Hello world</b>\n<b>Foo。</b>\n\n",
            }
        ]
    }}


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
