"""Adapter: CSS font strings to Pillow text-width measurement.

WHY: The wrapping algorithm needs the rendered pixel width of text under
the font the player uses. Editors describe that font as a CSS font
shorthand ("bold 24px 'Noto Sans JP', sans-serif"). Pillow can load the
matching TrueType/OpenType file and report advance widths, which makes it
the server-side stand-in for a browser canvas.

HOW: parse_css_font() extracts the pixel size and family list from the
font string. PillowMeasurer resolves the first loadable family to a font
file (CAPTION_FONT_PATH, then FONT_FAMILY_FILES, then the family name as a
file), falling back to Pillow's built-in scalable font, and measures text
with FreeTypeFont.getlength().

RULES:
- Sizes in px are used as-is; pt is converted at 96 dpi (x 4/3); em and
  rem assume a 16px root
- Style, variant and weight keywords are accepted and ignored
- Loaded fonts are cached per font string on the measurer instance
- Any failure to parse or load raises MeasurementUnavailableError before
  the first width is returned
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from PIL import ImageFont

from caption_review.config import FONT_FAMILY_FILES, FONT_PATH
from format_lines.measure import MeasurementPort

logger = logging.getLogger(__name__)

_FONT_RE = re.compile(
    r"(?P<size>\d+(?:\.\d+)?)(?P<unit>px|pt|em|rem)(?:/\S+)?\s+(?P<families>.+)$",
    re.IGNORECASE,
)

_UNIT_SCALE = {
    "px": 1.0,
    "pt": 4.0 / 3.0,
    "em": 16.0,
    "rem": 16.0,
}


class MeasurementUnavailableError(RuntimeError):
    """Raised when no font can be set up for the requested font string.

    WHY: Wrapping cannot proceed without widths. Failing before the first
    measurement keeps the operation atomic - no partial lines are returned.

    RULES:
    - Message includes the offending font string
    """


@dataclass(frozen=True)
class FontSpec:
    """Parsed CSS font shorthand.

    Attributes:
        size_px: Font size in pixels.
        families: Family names in preference order, unquoted.
    """

    size_px: float
    families: tuple[str, ...]


def parse_css_font(font: str) -> FontSpec:
    """Parse a CSS font shorthand into size and family list.

    Raises:
        MeasurementUnavailableError: If no size/family pair is found.
    """
    match = _FONT_RE.search(font.strip())
    if match is None:
        raise MeasurementUnavailableError(
            "Cannot parse font specification '{}'".format(font)
        )
    unit = match.group("unit").lower()
    size_px = float(match.group("size")) * _UNIT_SCALE[unit]
    families = tuple(
        name.strip().strip("'\"")
        for name in match.group("families").split(",")
        if name.strip().strip("'\"")
    )
    if size_px <= 0 or not families:
        raise MeasurementUnavailableError(
            "Font specification '{}' needs a positive size and a family".format(font)
        )
    return FontSpec(size_px=size_px, families=families)


def _candidate_files(spec: FontSpec) -> list[str]:
    if FONT_PATH:
        return [FONT_PATH]
    candidates: list[str] = []
    for family in spec.families:
        mapped = FONT_FAMILY_FILES.get(family.lower())
        if mapped:
            candidates.append(mapped)
        if family.lower().endswith((".ttf", ".otf", ".ttc")):
            candidates.append(family)
    return candidates


class PillowMeasurer(MeasurementPort):
    """Measurement port backed by Pillow font metrics."""

    def __init__(self) -> None:
        self._fonts: dict[str, ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}

    def load(self, font: str) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        """Load (or return the cached) Pillow font for a font string."""
        cached = self._fonts.get(font)
        if cached is not None:
            return cached

        spec = parse_css_font(font)
        size = max(1, int(round(spec.size_px)))
        loaded = None
        for candidate in _candidate_files(spec):
            try:
                loaded = ImageFont.truetype(candidate, size)
                logger.debug("Loaded font file %s at %dpx for '%s'", candidate, size, font)
                break
            except OSError:
                logger.debug("Font file %s not loadable", candidate)

        if loaded is None:
            try:
                loaded = ImageFont.load_default(size=size)
            except OSError as exc:
                raise MeasurementUnavailableError(
                    "No font available for '{}': {}".format(font, exc)
                ) from exc
            logger.info("Using Pillow's built-in font at %dpx for '%s'", size, font)

        self._fonts[font] = loaded
        return loaded

    def measure(self, font: str, text: str) -> float:
        if not text:
            return 0.0
        return float(self.load(font).getlength(text))
