"""Shared test fixtures for the format_lines / caption_review test suite.

WHY: Most tests need a deterministic width oracle, a fresh copy of the
default preset, and predictable run identifiers. Centralizing them here
keeps every test module on the same stub behaviour.

HOW: The fixed-width measurer makes every character 10px wide regardless
of font, so widths in the tests are simply len(text) * 10. The id factory
returns "id-1", "id-2", ... in call order.

RULES:
- Never depend on a real font in these fixtures.
- Each fixture call returns a fresh object (no shared mutable state).
"""

import copy
import itertools

import pytest

from format_lines import PRESET_DEFAULT, FixedWidthMeasurer

CHAR_WIDTH = 10.0
FONT = "16px sans-serif"


@pytest.fixture
def measurer():
    """Stub oracle: every character is 10px wide."""
    return FixedWidthMeasurer(CHAR_WIDTH)


@pytest.fixture
def config():
    """A private copy of the default preset."""
    return copy.deepcopy(PRESET_DEFAULT)


@pytest.fixture
def id_factory():
    """Deterministic identifiers: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: "id-{}".format(next(counter))
