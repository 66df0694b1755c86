import logging
from collections.abc import Callable

import numpy as np

logger = logging.getLogger(__name__)

BitmapProvider = Callable[[str], np.ndarray]


def ink_ratio(bitmap) -> float:
    """Fraction of set cells in a boolean glyph bitmap."""
    arr = np.asarray(bitmap, dtype=bool)
    if arr.size == 0:
        raise ValueError("Glyph bitmap has no cells")
    return int(arr.sum()) / arr.size


class GlyphBrightnessCache:
    """Memo table of raw character brightness (ink ratio of the glyph bitmap).

    Each character's bitmap is rendered at most once; entries never change
    afterwards. One cache is meant to be shared by every matcher in a process.
    """

    def __init__(self, bitmap: BitmapProvider):
        self._bitmap = bitmap
        self._brightness: dict[str, float] = {}

    def ensure_brightness(self, char: str) -> float:
        if char not in self._brightness:
            self._brightness[char] = ink_ratio(self._bitmap(char))
            logger.debug("Cached brightness %.4f for %r", self._brightness[char], char)
        return self._brightness[char]

    def raw_brightness(self, char: str) -> float | None:
        """Stored brightness of char, or None if it was never registered."""
        return self._brightness.get(char)

    def __contains__(self, char: str) -> bool:
        return char in self._brightness

    def __len__(self) -> int:
        return len(self._brightness)
