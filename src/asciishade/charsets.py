PRINTABLE_MIN = 32
PRINTABLE_MAX = 126

ASCII_PRINTABLE = "".join(chr(i) for i in range(PRINTABLE_MIN, PRINTABLE_MAX + 1))

DIGITS = "0123456789"

# Default active set for a fresh matcher
DEFAULT_CHARSET = DIGITS


def is_printable(char: str) -> bool:
    return len(char) == 1 and PRINTABLE_MIN <= ord(char) <= PRINTABLE_MAX


def validate_charset(text: str) -> str:
    """Return the distinct characters of text, in first-seen order.

    Raises ValueError for any character outside the printable ASCII range.
    """
    for char in text:
        if not is_printable(char):
            raise ValueError(f"Character {char!r} is outside the printable range")
    return "".join(dict.fromkeys(text))
