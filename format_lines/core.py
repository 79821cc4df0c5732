"""Core line formatting logic: wrapping, cue sequencing, and SRT generation.

WHY: Machine-generated captions arrive as a flat stream of pre-segmented
tokens. Before a reviewer can check them, they must be laid out as display
lines that fit the player's width, grouped into one- or two-line subtitle
cues with a reading-time duration, and rendered as a subtitle file.

HOW: The pipeline has three stages:
  1. token_to_lines() - greedy wrapping by measured pixel width, with forced
     breaks after sentence-final punctuation and blank-line handling for
     empty tokens.
  2. line_to_sequence() - pairs lines into cues, computes durations, builds
     one delta run per line and flags lines wider than the limit.
  3. generate_subtitle() - lays the cues back to back on a running clock and
     renders the numbered subtitle blocks.
Stages 1 and 2 are folds over frozen state records (functools.reduce), so
each step receives and returns the whole state explicitly.

RULES:
- ALL functions accept an explicit `config` dict - no global state.
- Width comparisons use `>`: a line exactly at max_width fits.
- Tokens are never split; a single token wider than max_width stands alone.
- Cue lengths are the UTF-8 byte length of the trimmed line, so a CJK
  character weighs three ASCII ones.
- Time codes reproduce the established output format exactly, including
  the +1 hour offset and the minute formula (see calc_subtitle_time).
"""

import functools
import logging
import math
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from .delta import caution_run, line_break_run
from .measure import MeasurementPort
from .models import Cue, Run

logger = logging.getLogger(__name__)


# =============================================================================
# Line Wrapping
# =============================================================================

@dataclass(frozen=True)
class _WrapState:
    lines: Tuple[str, ...] = ()
    accumulator: Tuple[str, ...] = ()
    empty_run: int = 0


def _wrap_step(
    state: _WrapState,
    token: str,
    port: MeasurementPort,
    font: str,
    max_width: int,
    config: Dict,
) -> _WrapState:
    """Advance the wrapper by one token."""
    if token == "":
        lines = state.lines
        accumulator = state.accumulator
        if state.empty_run < 1:
            # Paragraph terminator: close the open line only
            if accumulator:
                lines = lines + ("".join(accumulator),)
                accumulator = ()
        elif state.empty_run < 2:
            # Second empty token in a row: visible paragraph gap
            lines = lines + ("",)
        return _WrapState(lines, accumulator, state.empty_run + 1)

    current = "".join(state.accumulator)
    width = port.measure(font, current + token)
    if width > max_width and state.accumulator:
        return _WrapState(state.lines + (current,), (token,), 0)

    accumulator = state.accumulator + (token,)
    if token.endswith(tuple(config["break_suffixes"])):
        return _WrapState(state.lines + ("".join(accumulator),), (), 0)
    return _WrapState(state.lines, accumulator, 0)


def token_to_lines(
    tokens: Sequence[str],
    port: MeasurementPort,
    font: str,
    max_width: int,
    config: Dict,
) -> List[str]:
    """Wrap a token stream into display lines.

    WHY: Subtitle lines must fit the rendered width of the player. Tokens
    come pre-segmented (words and punctuation, possibly without spaces for
    CJK text), so wrapping works on token boundaries and real pixel widths.

    HOW: Greedy left-to-right fold. Each non-empty token is measured
    together with the current accumulator; when the result is wider than
    max_width the accumulator is emitted and the token starts a new line.
    Empty tokens are paragraph markers.

    RULES:
    - First empty token in a row closes the open line (no blank line).
    - Second empty token in a row emits one blank line.
    - Third and later empty tokens in a row are ignored.
    - A token ending with a config["break_suffixes"] entry closes the line
      after being appended. A token that opens a new line because of an
      overflow is not checked for break suffixes.
    - An over-wide token on an empty accumulator is kept and overflows.

    Args:
        tokens: Ordered tokens; "" marks a line/paragraph break.
        port: Measurement port used for every width query.
        font: Font specification passed through to the port.
        max_width: Maximum line width in pixels.
        config: Preset dict (see format_lines.presets).

    Returns:
        Ordered display lines; blank lines are "".
    """
    step = functools.partial(
        _wrap_step, port=port, font=font, max_width=max_width, config=config,
    )
    state = functools.reduce(lambda acc, token: step(acc, token), tokens, _WrapState())

    lines = list(state.lines)
    if state.accumulator:
        lines.append("".join(state.accumulator))
    return lines


# =============================================================================
# Cue Sequencing
# =============================================================================

def _text_size(text: str) -> int:
    return len(text.encode("utf-8"))


def calc_srt(text1: str, text2: Optional[str], config: Dict) -> Cue:
    """Build a cue from one line, or from a pair of lines.

    WHY: Display time should scale with the amount of text to read. Paired
    cues get exactly their reading time; single lines are clamped so short
    fragments stay readable and long ones do not linger.

    HOW: duration = ceil(size / max_length * base_time), where size is the
    UTF-8 byte length of the text. Single lines are clamped to
    [min_duration, max_duration]; the placeholder glyph gets a fixed
    duration. Each line is wrapped in <b>...</b>.

    RULES:
    - Paired cues are not clamped.
    - The placeholder check is an exact match on the whole line.
    """
    base_time = float(config["base_time"])
    max_length = float(config["max_length"])

    if text2 is not None:
        size = float(_text_size(text1) + _text_size(text2))
        duration = float(math.ceil(size / max_length * base_time))
        return Cue(duration=duration, text="<b>{}</b>\n<b>{}</b>".format(text1, text2))

    if text1 == config["placeholder"]:
        duration = float(config["placeholder_duration"])
    else:
        size = float(_text_size(text1))
        duration = float(math.ceil(size / max_length * base_time))
        duration = max(duration, float(config["min_duration"]))
        duration = min(duration, float(config["max_duration"]))
    return Cue(duration=duration, text="<b>{}</b>".format(text1))


@dataclass(frozen=True)
class _SequenceState:
    cues: Tuple[Cue, ...] = ()
    runs: Tuple[Run, ...] = ()
    errors: FrozenSet[str] = frozenset()
    pending: Optional[str] = None
    seq_counter: int = 0


def _sequence_step(
    state: _SequenceState,
    line: str,
    port: MeasurementPort,
    font: str,
    max_width: int,
    config: Dict,
) -> _SequenceState:
    """Advance the sequencer by one display line."""
    text = line.strip()
    caution = None  # type: Optional[str]
    errors = state.errors
    if port.measure(font, text) > max_width:
        caution = config["caution_too_long"]
        errors = errors | {config["error_too_long"]}

    cues = state.cues
    runs = state.runs
    pending = state.pending

    if text == "" or text == config["period_line"]:
        seq_counter = 0
        if pending is not None:
            cues = cues + (calc_srt(pending, None, config),)
            pending = None
    else:
        seq_counter = state.seq_counter + 1
        if seq_counter > config["max_run_lines"]:
            runs = runs + (line_break_run(),)
            seq_counter = 0
        if pending is not None:
            cues = cues + (calc_srt(pending, text, config),)
            pending = None
        else:
            pending = text

    runs = runs + (caution_run(text, caution),)
    return _SequenceState(cues, runs, errors, pending, seq_counter)


def line_to_sequence(
    lines: Sequence[str],
    port: MeasurementPort,
    font: str,
    max_width: int,
    config: Dict,
) -> Tuple[List[Cue], List[Run], FrozenSet[str]]:
    """Group display lines into cues and build the per-line delta.

    WHY: A subtitle cue shows at most two lines. Consecutive lines are
    paired; a blank line (or a lone ideographic period) closes a paragraph
    so an unpaired line is shown on its own. The delta lets the reviewer
    see which lines could not be fitted.

    HOW: Fold over the trimmed lines, holding at most one pending line
    waiting for a partner and a counter of consecutive non-blank lines.

    RULES:
    - Lines wider than max_width get a caution run and add
      config["error_too_long"] to the error set.
    - Blank or period-only lines reset the counter and flush the pending
      line as a standalone cue.
    - Every config["max_run_lines"] + 1 consecutive non-blank lines, a bare
      newline run is inserted before the line's run and the counter resets.
    - A pending line left at the end becomes a standalone cue.

    Returns:
        Tuple of (cues, runs, errors).
    """
    step = functools.partial(
        _sequence_step, port=port, font=font, max_width=max_width, config=config,
    )
    state = functools.reduce(lambda acc, line: step(acc, line), lines, _SequenceState())

    cues = list(state.cues)
    if state.pending is not None:
        cues.append(calc_srt(state.pending, None, config))
    return cues, list(state.runs), state.errors


# =============================================================================
# SRT Output
# =============================================================================

def cue_timeline(cues: Sequence[Cue]) -> List[Tuple[float, float]]:
    """Return (start, end) seconds per cue; cues run back to back from 0."""
    timeline = []  # type: List[Tuple[float, float]]
    start = 0.0
    for cue in cues:
        end = start + cue.duration
        timeline.append((start, end))
        start = end
    return timeline


def _last_two(value: int) -> str:
    padded = "00{}".format(value)
    return padded[-2:]


def calc_subtitle_time(seconds: float) -> Tuple[str, str, str]:
    """Split seconds into zero-padded (hour, minute, second) strings.

    Existing subtitle consumers depend on this exact arithmetic:
    - hour is floor(seconds / 3600) plus one,
    - minute is floor(seconds - hour), with hour taken before the +1,
    - second is seconds mod 60, truncated,
    each keeping only its last two digits.
    """
    hour = math.floor(seconds / 3600.0)
    minute = math.floor((seconds - hour) * 60.0 / 60.0)
    second = int(seconds % 60.0)
    return _last_two(hour + 1), _last_two(minute), _last_two(second)


def format_subtitle_time(seconds: float) -> str:
    """Format seconds as an SRT time code: HH:MM:SS,000"""
    hour, minute, second = calc_subtitle_time(seconds)
    return "{}:{}:{},000".format(hour, minute, second)


def generate_subtitle(cues: Sequence[Cue]) -> str:
    """Render cues as subtitle file text.

    RULES:
    - Indices are 1-based.
    - Each block is "index\\nstart --> end\\ntext\\n\\n".
    - Cues are back to back: each start equals the previous end.
    """
    blocks = []  # type: List[str]
    for index, (cue, (start, end)) in enumerate(zip(cues, cue_timeline(cues)), 1):
        blocks.append("{}\n{} --> {}\n{}\n\n".format(
            index,
            format_subtitle_time(start),
            format_subtitle_time(end),
            cue.text,
        ))
    return "".join(blocks)
