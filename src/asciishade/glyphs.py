import logging
import os
import shutil
import subprocess

import numpy as np
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

DEFAULT_GLYPH_RESOLUTION = 16

_FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
    "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
    "/usr/share/fonts/dejavu-sans-mono-fonts/DejaVuSansMono.ttf",
]


def find_monospace_font() -> str | None:
    """Find a monospace font on the system, asking fontconfig as a last resort."""
    for path in _FONT_CANDIDATES:
        if os.path.exists(path):
            return path
    if shutil.which("fc-match") is None:
        return None
    result = subprocess.run(
        ["fc-match", "-f", "%{file}", "monospace"],
        capture_output=True,
        text=True,
    )
    if result.returncode == 0 and result.stdout.strip():
        return result.stdout.strip()
    return None


class GlyphRenderer:
    """Bitmap provider: renders a character as a square boolean ink grid.

    Rendering is deterministic for a given font and resolution, so the
    result of each call can be cached for the lifetime of the process.
    """

    def __init__(self, font_path: str | None = None, resolution: int = DEFAULT_GLYPH_RESOLUTION):
        if resolution <= 0:
            raise ValueError(f"Glyph resolution must be positive, got {resolution}")
        self.resolution = resolution
        if font_path is None:
            font_path = find_monospace_font()
        if font_path is None:
            logger.warning("No monospace font found, using Pillow's default font")
            self.font = ImageFont.load_default(size=resolution)
        else:
            self.font = ImageFont.truetype(font_path, resolution)
        self.font_path = font_path

        bbox = self.font.getbbox("M")
        self._y_offset = -bbox[1]

    def bitmap(self, char: str) -> np.ndarray:
        """Return a (resolution, resolution) bool array, True where the glyph has ink."""
        img = Image.new("L", (self.resolution, self.resolution), 0)
        draw = ImageDraw.Draw(img)
        draw.text((0, self._y_offset), char, fill=255, font=self.font)
        return np.asarray(img) > 127

    __call__ = bitmap
