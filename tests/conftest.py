import numpy as np
import pytest

from asciishade.brightness import GlyphBrightnessCache
from asciishade.glyphs import find_monospace_font

FONT_PATH = find_monospace_font()

STUB_SIDE = 4

# Ink cells out of 16 for each stub glyph; normalized keys land on exact binary fractions
STUB_INK = {
    " ": 0,
    ".": 2,
    ":": 4,
    "-": 4,
    "+": 8,
    "*": 10,
    "#": 12,
    "@": 16,
}


class StubBitmaps:
    """Bitmap provider with known ink counts that records how often it is asked."""

    def __init__(self, ink=None):
        self.ink = dict(STUB_INK if ink is None else ink)
        self.calls: dict[str, int] = {}

    def __call__(self, char):
        self.calls[char] = self.calls.get(char, 0) + 1
        grid = np.zeros(STUB_SIDE * STUB_SIDE, dtype=bool)
        grid[: self.ink[char]] = True
        return grid.reshape(STUB_SIDE, STUB_SIDE)


@pytest.fixture
def stub_bitmaps():
    return StubBitmaps()


@pytest.fixture
def cache(stub_bitmaps):
    return GlyphBrightnessCache(stub_bitmaps)


@pytest.fixture
def font_path():
    if FONT_PATH is None:
        pytest.skip("No monospace font found on system")
    return FONT_PATH
