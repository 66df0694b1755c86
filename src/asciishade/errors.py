class AsciiShadeError(Exception):
    """Base class for errors raised by asciishade."""


class EmptyCharsetError(AsciiShadeError, LookupError):
    """Raised when a match is requested against an empty active set."""

    def __init__(self, message: str = "empty active set: no characters to match against"):
        super().__init__(message)


class CharsetTooSmallError(AsciiShadeError):
    """Raised when a conversion is requested with too few active characters."""

    def __init__(self, size: int, minimum: int):
        self.size = size
        self.minimum = minimum
        super().__init__(f"Charset is too small: {size} character(s), need at least {minimum}")


class ResolutionError(AsciiShadeError, ValueError):
    """Raised when a resolution falls outside what the padded image allows."""

    def __init__(self, resolution: int, minimum: int, maximum: int):
        self.resolution = resolution
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(f"Resolution {resolution} outside bounds [{minimum}, {maximum}]")
