"""
ASCII character classes shared by both chunking passes.

Every test works on a single code unit. Code units at or above 0x80 never
match any class, so they behave as opaque non-whitespace characters.
"""

from typing import Union

TextLike = Union[str, bytes, bytearray, memoryview]

PUNCT = frozenset(".?!")
WS = frozenset(" \t\n\r")
# C isspace() set; wider than WS by \v and \f
SPACE = frozenset(" \t\n\r\v\f")
CLOSER = frozenset("\"')]}") | PUNCT


def as_text(text: TextLike) -> str:
    """Return a str view of *text* in which one code unit is one character.

    Byte input is decoded as latin-1 so byte offsets and string offsets
    coincide.
    """
    if isinstance(text, str):
        return text
    if isinstance(text, (bytes, bytearray, memoryview)):
        return bytes(text).decode("latin-1")
    raise TypeError(f"text must be str or bytes-like, not {type(text).__name__}")


def is_punct(c: str) -> bool:
    return c in PUNCT


def is_whitespace(c: str) -> bool:
    return c in WS


def is_space(c: str) -> bool:
    return c in SPACE


def is_closer(c: str) -> bool:
    return c in CLOSER


def is_alpha(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z")


def is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def is_upper(c: str) -> bool:
    return "A" <= c <= "Z"


def is_lower(c: str) -> bool:
    return "a" <= c <= "z"
