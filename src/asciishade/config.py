from __future__ import annotations

import argparse
from dataclasses import dataclass

from asciishade.charsets import DEFAULT_CHARSET, validate_charset
from asciishade.glyphs import DEFAULT_GLYPH_RESOLUTION
from asciishade.matcher import RoundingPolicy

DEFAULT_RESOLUTION = 2
MIN_CHARSET_SIZE = 2


@dataclass
class RenderConfig:
    resolution: int = DEFAULT_RESOLUTION  # characters per output row
    charset: str = DEFAULT_CHARSET
    policy: RoundingPolicy = RoundingPolicy.ABS
    glyph_resolution: int = DEFAULT_GLYPH_RESOLUTION
    font_path: str | None = None
    min_chars: int = MIN_CHARSET_SIZE

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> RenderConfig:
        return cls(
            resolution=args.resolution,
            charset=validate_charset(args.chars),
            policy=RoundingPolicy.parse(args.round),
            glyph_resolution=args.glyph_resolution,
            font_path=args.font,
        )
