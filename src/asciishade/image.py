import logging
from pathlib import Path

import numpy as np
from PIL import Image

from asciishade.errors import ResolutionError

logger = logging.getLogger(__name__)

# Rec. 709 luma weights for 8-bit R, G, B
LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722])
MAX_CHANNEL_VALUE = 255
PAD_COLOUR = (255, 255, 255)


def load_image(image: Image.Image | np.ndarray | str | Path) -> np.ndarray:
    """Return an image as a (height, width, 3) uint8 RGB array."""
    if isinstance(image, np.ndarray):
        if image.ndim == 3 and image.shape[2] == 3 and image.dtype == np.uint8:
            return image
        if image.ndim not in (2, 3) or (image.ndim == 3 and image.shape[2] not in (1, 3, 4)):
            raise ValueError(f"Expected a (height, width) or (height, width, 1|3|4) array, got shape {image.shape}")
        if image.ndim == 3 and image.shape[2] == 1:
            image = image[:, :, 0]
        image = Image.fromarray(image.astype(np.uint8))
    elif not isinstance(image, Image.Image):
        image = Image.open(image)
    return np.asarray(image.convert("RGB"), dtype=np.uint8)


def next_power_of_two(n: int) -> int:
    if n <= 1:
        return 1
    return 1 << (n - 1).bit_length()


def pad_to_power_of_two(pixels: np.ndarray) -> np.ndarray:
    """Centre the image on a white canvas whose sides are powers of two."""
    height, width = pixels.shape[:2]
    new_height = next_power_of_two(height)
    new_width = next_power_of_two(width)
    if (new_height, new_width) == (height, width):
        return pixels

    top = (new_height - height) // 2
    left = (new_width - width) // 2
    padded = np.empty((new_height, new_width, 3), dtype=pixels.dtype)
    padded[:] = PAD_COLOUR
    padded[top : top + height, left : left + width] = pixels
    return padded


def resolution_bounds(width: int, height: int) -> tuple[int, int]:
    """(min, max) characters per row allowed for an image of the given size.

    At most one character per padded pixel column, and at least enough
    columns that a square tile is no taller than the padded image.
    """
    padded_width = next_power_of_two(width)
    padded_height = next_power_of_two(height)
    return max(1, padded_width // padded_height), padded_width


def split_tiles(padded: np.ndarray, resolution: int) -> np.ndarray:
    """Split a padded image into square tiles, resolution tiles per row.

    Returns array of shape (rows, resolution, side, side, 3).
    """
    side = padded.shape[1] // resolution
    rows = padded.shape[0] // side
    trimmed = padded[: rows * side, : resolution * side]
    return trimmed.reshape(rows, side, resolution, side, 3).transpose(0, 2, 1, 3, 4)


def tile_brightness(padded: np.ndarray, resolution: int) -> np.ndarray:
    """Mean luma of every tile, scaled to [0, 1]. Returns shape (rows, resolution)."""
    tiles = split_tiles(padded, resolution).astype(np.float64)
    luma = tiles @ LUMA_WEIGHTS  # (rows, cols, side, side)
    return luma.mean(axis=(2, 3)) / MAX_CHANNEL_VALUE


class SubImageBrightness:
    """Brightness grid of a padded image, kept until the resolution changes."""

    def __init__(self, image: Image.Image | np.ndarray | str | Path):
        pixels = load_image(image)
        self.height, self.width = pixels.shape[:2]
        self.padded = pad_to_power_of_two(pixels)
        self._resolution: int | None = None
        self._grid: np.ndarray | None = None

    @property
    def bounds(self) -> tuple[int, int]:
        return resolution_bounds(self.width, self.height)

    def check_resolution(self, resolution: int) -> None:
        minimum, maximum = self.bounds
        if not minimum <= resolution <= maximum:
            raise ResolutionError(resolution, minimum, maximum)

    def brightness(self, resolution: int) -> np.ndarray:
        if resolution != self._resolution:
            self.check_resolution(resolution)
            logger.debug("Computing brightness grid at resolution %d", resolution)
            self._grid = tile_brightness(self.padded, resolution)
            self._resolution = resolution
        return self._grid
