import argparse
import logging
import sys
from pathlib import Path

from asciishade.brightness import GlyphBrightnessCache
from asciishade.charsets import DEFAULT_CHARSET
from asciishade.config import DEFAULT_RESOLUTION, RenderConfig
from asciishade.converter import image_to_ascii
from asciishade.errors import AsciiShadeError
from asciishade.glyphs import DEFAULT_GLYPH_RESOLUTION, GlyphRenderer
from asciishade.matcher import CharacterMatcher, RoundingPolicy


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render an image as characters matched by glyph brightness")
    parser.add_argument("image", help="Path to input image")
    parser.add_argument(
        "-r",
        "--resolution",
        type=int,
        default=DEFAULT_RESOLUTION,
        help=f"Characters per output row (default: {DEFAULT_RESOLUTION})",
    )
    parser.add_argument(
        "-c", "--chars", default=DEFAULT_CHARSET, help=f"Characters to draw with (default: {DEFAULT_CHARSET})"
    )
    parser.add_argument(
        "--round",
        default=RoundingPolicy.ABS.value,
        choices=[p.value for p in RoundingPolicy],
        help="How brightness between two characters is rounded (default: abs)",
    )
    parser.add_argument("--font", default=None, help="TrueType font used to measure glyphs (default: system monospace)")
    parser.add_argument(
        "--glyph-resolution",
        type=int,
        default=DEFAULT_GLYPH_RESOLUTION,
        help=f"Side of the glyph bitmap in pixels (default: {DEFAULT_GLYPH_RESOLUTION})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Log debug output to stderr")
    return parser


def main(argv: list[str] | None = None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    image_path = Path(args.image)
    if not image_path.exists():
        print(f"File not found: {image_path}", file=sys.stderr)
        sys.exit(1)

    try:
        config = RenderConfig.from_args(args)
        cache = GlyphBrightnessCache(GlyphRenderer(config.font_path, config.glyph_resolution))
        matcher = CharacterMatcher(config.charset, cache, config.policy)
        art = image_to_ascii(image_path, matcher, resolution=config.resolution, min_chars=config.min_chars)
    except (AsciiShadeError, ValueError, OSError) as e:
        print(f"Did not execute: {e}", file=sys.stderr)
        sys.exit(1)
    print(art)
