"""Line formatter library for reviewed captions and translations.

WHY: The caption review editor needs machine output laid out as subtitle
lines that fit the player, timed subtitle cues, and a rich-text delta that
marks lines and words needing attention. This package holds that logic as
pure functions, so the HTTP API, the CLI and tests all share it.

HOW: Two public entry points:
  format_newline() - tokens -> wrapped lines -> cues -> subtitle text, plus
                     a per-line delta and warning categories.
  format_sound()   - flags unknown words in an (input, output) text pair.
Width measurement is injected through a MeasurementPort.

RULES:
- format_newline() and format_sound() are the ONLY public operations.
- Preset names: "default".
- Never mutate the preset constants - copies are made internally.
- Each format_newline() call wraps the port in its own CachingMeasurer.
- Python 3.9 compatible (no slots=True, no match/case, no X | Y unions).
"""

import copy
import logging
from typing import Dict, Optional, Sequence

from .core import generate_subtitle, line_to_sequence, token_to_lines
from .delta import IdFactory, annotate_pair
from .measure import CachingMeasurer, FixedWidthMeasurer, MeasurementPort
from .models import (
    Attributes,
    Cue,
    NewlineResult,
    Run,
    SoundDelta,
    WarningAttribute,
    WarningRange,
    WordRange,
)
from .presets import PRESET_DEFAULT, PRESETS

__all__ = [
    "format_newline",
    "format_sound",
    "Attributes",
    "Cue",
    "FixedWidthMeasurer",
    "MeasurementPort",
    "NewlineResult",
    "PRESETS",
    "PRESET_DEFAULT",
    "Run",
    "SoundDelta",
    "WarningAttribute",
    "WarningRange",
    "WordRange",
]

logger = logging.getLogger(__name__)


def format_newline(
    tokens: Sequence[str],
    port: MeasurementPort,
    font: str,
    max_width: int,
    preset: str = "default",
    config: Optional[Dict] = None,
) -> NewlineResult:
    """Wrap tokens into lines, sequence them into cues and render subtitles.

    WHY: This is the single entry point for the wrapping pipeline. The host
    layers (HTTP API, CLI) call this instead of reaching into core.

    HOW: Resolves the preset, wraps the port in a per-call cache, then runs
    token_to_lines() -> line_to_sequence() -> generate_subtitle().

    RULES:
    - If config is provided, it overrides the preset entirely.
    - max_width must be an integer. Zero or negative widths are accepted;
      every non-blank line then overflows and is cautioned.
    - Deterministic: the same tokens/font/width give identical output.

    Args:
        tokens: Ordered tokens; "" marks a line/paragraph break.
        port: Width oracle for the given font.
        font: Font specification string passed through to the port.
        max_width: Maximum line width in pixels.
        preset: Preset name. Default: "default".
        config: Optional custom config dict. If provided, preset is ignored.

    Returns:
        NewlineResult with lines, runs, errors, cues and subtitle text.

    Raises:
        ValueError: If the preset name is unknown or max_width is not an int.
    """
    if config is not None:
        cfg = copy.deepcopy(config)
    else:
        if preset not in PRESETS:
            raise ValueError(
                "Unknown preset '{}'. Available: {}".format(
                    preset, ", ".join(PRESETS.keys())
                )
            )
        cfg = copy.deepcopy(PRESETS[preset])

    if isinstance(max_width, bool) or not isinstance(max_width, int):
        raise ValueError("max_width must be an integer, got {!r}".format(max_width))

    measurer = CachingMeasurer(port)
    lines = token_to_lines(tokens, measurer, font, max_width, cfg)
    cues, runs, errors = line_to_sequence(lines, measurer, font, max_width, cfg)
    subtitle = generate_subtitle(cues)

    logger.debug(
        "Wrapped %d tokens into %d lines and %d cues (%d widths measured)",
        len(tokens), len(lines), len(cues), len(measurer),
    )

    return NewlineResult(
        lines=tuple(lines),
        runs=tuple(runs),
        errors=frozenset(errors),
        cues=tuple(cues),
        subtitle=subtitle,
    )


def format_sound(
    input_text: str,
    output_text: str,
    input_ranges: Sequence[WordRange],
    output_ranges: Sequence[WordRange],
    id_factory: Optional[IdFactory] = None,
) -> SoundDelta:
    """Mark unknown words in a source text and its translation.

    Each text is annotated independently by delta.annotate_ranges(); see
    that function for the run layout and the trailing-text behaviour.
    """
    return annotate_pair(input_text, output_text, input_ranges, output_ranges, id_factory)
