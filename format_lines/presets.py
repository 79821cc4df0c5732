"""Configuration presets for line wrapping and cue timing.

WHY: The cue duration heuristic, the forced-break punctuation and the
warning texts are product decisions that callers occasionally need to
override (e.g. a slower reading speed). Keeping them in one preset dict
lets every function receive its settings explicitly, so concurrent calls
with different settings never share state.

HOW: PRESET_DEFAULT holds every tunable value. PRESETS maps preset names
to their dicts. format_newline() deep-copies the chosen preset before use.

RULES:
- Presets are frozen constants; never mutate them at runtime.
- Durations are seconds; max_length is in UTF-8 bytes.
- break_suffixes are tested with str.endswith on each appended token.
- The caution/error strings are part of the wire contract; do not reword.
"""

from typing import Dict

PRESET_DEFAULT: Dict = {
    # Duration heuristic: ceil(len / max_length * base_time)
    "base_time": 7.5,
    "max_length": 30,
    "min_duration": 2,
    "max_duration": 15,
    # Silence/placeholder cue
    "placeholder": "☆",
    "placeholder_duration": 2.0,
    # Tokens ending with one of these close the current line
    "break_suffixes": ("。", "！", "？", "-"),
    # A line holding only this resets pairing like a blank line
    "period_line": "。",
    # Consecutive non-blank lines before a forced run-level break
    "max_run_lines": 2,
    "caution_too_long": "too long sentence, cannot be splitted",
    "error_too_long": "Sentences continue for more than three lines.",
}

PRESETS: Dict[str, Dict] = {
    "default": PRESET_DEFAULT,
}
