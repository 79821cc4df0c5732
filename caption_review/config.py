"""Configuration constants and .env loading.

WHY: Centralizes the defaults that operators override per deployment:
the fallback font and width, where font files live, log level and the
API bind address. Keeping them in one module makes them easy to find.

HOW: python-dotenv loads the .env file on import. Constants read
os.getenv with plain defaults. FONT_FAMILY_FILES maps CSS generic family
names to font files the Pillow measurer tries before its built-in font.

RULES:
- Every value can be overridden via environment variables
- CAPTION_MAX_WIDTH must parse as a positive integer
- An empty CAPTION_FONT_PATH means "resolve by family name"
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the process is started)
load_dotenv()

# ---------------------------------------------------------------------------
# Wrapping defaults
# ---------------------------------------------------------------------------

DEFAULT_FONT = os.getenv("CAPTION_FONT", "16px sans-serif")
DEFAULT_MAX_WIDTH = int(os.getenv("CAPTION_MAX_WIDTH", "640"))

# ---------------------------------------------------------------------------
# Font resolution for the Pillow measurer
# ---------------------------------------------------------------------------

FONT_PATH = os.getenv("CAPTION_FONT_PATH", "").strip()

FONT_FAMILY_FILES: dict[str, str] = {
    "sans-serif": "DejaVuSans.ttf",
    "serif": "DejaVuSerif.ttf",
    "monospace": "DejaVuSansMono.ttf",
    "arial": "arial.ttf",
    "helvetica": "Helvetica.ttc",
    "noto sans jp": "NotoSansJP-Regular.otf",
    "noto sans cjk jp": "NotoSansCJK-Regular.ttc",
}
"""Lowercased CSS family name → font file name or path passed to Pillow."""

# ---------------------------------------------------------------------------
# Logging and API
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("CAPTION_LOG_LEVEL", "INFO").upper()
API_HOST = os.getenv("CAPTION_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("CAPTION_API_PORT", "8000"))


def resolve_default_max_width() -> int:
    """Return DEFAULT_MAX_WIDTH, validated.

    RULES:
    - Raises ValueError if the configured width is not positive
    """
    if DEFAULT_MAX_WIDTH <= 0:
        raise ValueError(
            "CAPTION_MAX_WIDTH must be a positive integer, got {}".format(DEFAULT_MAX_WIDTH)
        )
    return DEFAULT_MAX_WIDTH
