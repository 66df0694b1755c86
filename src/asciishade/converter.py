from pathlib import Path

import numpy as np
from PIL import Image

from asciishade.config import DEFAULT_RESOLUTION, MIN_CHARSET_SIZE
from asciishade.errors import CharsetTooSmallError
from asciishade.image import SubImageBrightness
from asciishade.matcher import CharacterMatcher, RoundingPolicy


def image_to_ascii(
    image: SubImageBrightness | Image.Image | np.ndarray | str | Path,
    matcher: CharacterMatcher,
    resolution: int = DEFAULT_RESOLUTION,
    policy: RoundingPolicy | str | None = None,
    min_chars: int = MIN_CHARSET_SIZE,
) -> str:
    """Render an image as lines of characters, resolution characters per line.

    Pass a SubImageBrightness to reuse its brightness grid across calls.
    """
    if len(matcher) < min_chars:
        raise CharsetTooSmallError(len(matcher), min_chars)
    if not isinstance(image, SubImageBrightness):
        image = SubImageBrightness(image)
    if policy is not None:
        matcher.set_rounding_policy(policy)

    grid = image.brightness(resolution)
    return "\n".join(matcher.match_grid(grid))
