"""Measurement port: rendered text width under a given font.

WHY: Line wrapping is decided in pixels, not characters, and only the host
knows how text is rendered (a canvas, a font file, a terminal). The
wrapper therefore receives the measurement capability as a parameter
instead of constructing one, which also lets tests use a deterministic
stub.

HOW: MeasurementPort is the abstract capability. FixedWidthMeasurer is a
stub oracle (width = characters x constant). CachingMeasurer wraps any
port with a memo keyed on (font, text).

RULES:
- measure() must be a pure function of (font, text) for one port instance.
- A CachingMeasurer lives for one invocation; never share one between
  differently-configured calls.
- Python 3.9 compatible.
"""

from abc import ABC, abstractmethod
from typing import Dict, Tuple


class MeasurementPort(ABC):
    """Abstract text-width oracle.

    To plug in a new rendering backend:
    1. Subclass MeasurementPort
    2. Implement measure(font, text) returning the pixel width
    3. Pass an instance to format_newline()
    """

    @abstractmethod
    def measure(self, font: str, text: str) -> float:
        """Return the rendered width of text in pixels.

        Args:
            font: Font specification string (e.g. "16px sans-serif").
            text: The text to measure. May be empty.

        Returns:
            Width in pixels (0.0 for empty text).
        """


class FixedWidthMeasurer(MeasurementPort):
    """Every character is char_width pixels wide, regardless of font."""

    def __init__(self, char_width: float = 10.0) -> None:
        if char_width <= 0:
            raise ValueError("char_width must be positive, got {}".format(char_width))
        self.char_width = char_width

    def measure(self, font: str, text: str) -> float:
        return len(text) * self.char_width


class CachingMeasurer(MeasurementPort):
    """Memoizes another port's measurements for the lifetime of one call.

    The wrapper re-measures the growing accumulator on every token and the
    sequencer re-measures each finished line, so identical (font, text)
    pairs recur within a single pass.
    """

    def __init__(self, inner: MeasurementPort) -> None:
        self._inner = inner
        self._cache = {}  # type: Dict[Tuple[str, str], float]

    def measure(self, font: str, text: str) -> float:
        key = (font, text)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        width = self._inner.measure(font, text)
        self._cache[key] = width
        return width

    def __len__(self) -> int:
        return len(self._cache)
