"""
First pass: heuristic sentence segmentation.

Scans the text left to right and closes a chunk at every run of ``.?!``
that the end-of-sentence heuristic accepts. Decimals, abbreviations and
ordinal list markers are deliberately conservative: when in doubt the
punctuation stays inside the current chunk.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, List, Optional

from .buffer import Chunk, ChunkBuffer
from .classes import (
    TextLike,
    as_text,
    is_alpha,
    is_closer,
    is_digit,
    is_lower,
    is_punct,
    is_upper,
    is_whitespace,
)

ABBREVIATIONS = (
    "Mr",
    "Mrs",
    "Ms",
    "Dr",
    "St",
    "etc",
    "i.e",
    "e.g",
    "vs",
    "Inc",
    "Corp",
    "Ltd",
    "Co",
    "Jr",
    "Sr",
    "Ph.D",
)

# Words this long or longer are never looked up in the abbreviation table.
MAX_ABBREVIATION_LENGTH = 32

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def _fold(word: str) -> str:
    return word.translate(_ASCII_LOWER)


def _abbreviation_set(abbreviations: Iterable[str]) -> FrozenSet[str]:
    return frozenset(_fold(a) for a in abbreviations)


_DEFAULT_ABBREVIATIONS = _abbreviation_set(ABBREVIATIONS)


def skip_whitespace(text: str, start: int) -> int:
    """Return the index of the next non-whitespace character at or after *start*."""
    j = start
    while j < len(text) and is_whitespace(text[j]):
        j += 1
    return j


def consume_punctuation_run(text: str, i: int) -> int:
    """Return the index of the last character in the ``.?!`` run starting at *i*."""
    while i + 1 < len(text) and is_punct(text[i + 1]):
        i += 1
    return i


def consume_trailing_closers(text: str, i: int) -> int:
    """Extend a terminator at *i* across trailing quotes, brackets and punctuation."""
    while i + 1 < len(text) and is_closer(text[i + 1]):
        i += 1
    return i


def matches_abbreviation(
    text: str, p: int, abbreviations: Optional[FrozenSet[str]] = None
) -> bool:
    """
    Decide whether the dot at *p* closes an abbreviation.

    The candidate word is the run of non-whitespace characters right before
    the dot, so it may itself contain dots (``e.g``, ``Ph.D``).
    """
    if p == 0:
        return False

    word_start = p
    while word_start > 0 and not is_whitespace(text[word_start - 1]):
        word_start -= 1
    word = text[word_start:p]
    if not word:
        return False

    following = text[p + 1] if p + 1 < len(text) else ""

    # A letter glued to the dot: "e.g.x", "U.S.A"
    if following and is_alpha(following):
        return True

    # Initials: "J. Smith"
    if len(word) == 1 and is_upper(word):
        return True

    if len(word) == 1 and following and not is_whitespace(following):
        return True

    if len(word) >= MAX_ABBREVIATION_LENGTH:
        return False

    table = _DEFAULT_ABBREVIATIONS if abbreviations is None else abbreviations
    return _fold(word) in table


def _is_ordinal_marker(text: str, p: int) -> bool:
    word_start = p
    while (
        word_start > 0
        and not is_whitespace(text[word_start - 1])
        and text[word_start - 1] != "."
    ):
        word_start -= 1

    word = text[word_start:p]
    if not word or not all(is_digit(c) for c in word):
        return False

    j = skip_whitespace(text, p + 1)
    if j >= len(text):
        return True
    return is_digit(text[j]) or is_lower(text[j])


def is_end_of_sentence(
    text: str, p: int, abbreviations: Optional[FrozenSet[str]] = None
) -> bool:
    """Return True when the punctuation character at *p* ends a sentence."""
    if text[p] != ".":
        return True

    # Decimals: "3.14"
    if 0 < p < len(text) - 1 and is_digit(text[p - 1]) and is_digit(text[p + 1]):
        return False

    if matches_abbreviation(text, p, abbreviations):
        return False

    # Ordinal lists: "1. next", "2. 3"
    if _is_ordinal_marker(text, p):
        return False

    return True


def segment(
    text: Optional[TextLike],
    buffer: Optional[ChunkBuffer] = None,
    abbreviations: Optional[Iterable[str]] = None,
) -> List[Chunk]:
    """
    Split *text* into sentence-like chunks.

    Args:
        text: Source text; ``bytes`` are read one byte per character
        buffer: Optional buffer to fill; it is cleared first
        abbreviations: Replacement for the built-in abbreviation table

    Returns:
        Chunks in text order. Whitespace between sentences is not covered.
    """
    out = buffer if buffer is not None else ChunkBuffer()
    out.clear()
    if not text:
        return []

    s = as_text(text)
    table = None if abbreviations is None else _abbreviation_set(abbreviations)
    length = len(s)

    start_off = skip_whitespace(s, 0)
    i = start_off
    while i < length:
        if not is_punct(s[i]):
            i += 1
            continue

        last_punct = consume_punctuation_run(s, i)
        if not is_end_of_sentence(s, last_punct, table):
            i = last_punct + 1
            continue

        last_punct = consume_trailing_closers(s, last_punct)
        chunk_length = last_punct + 1 - start_off
        if chunk_length > 0:
            out.append(Chunk(start_off, chunk_length))

        start_off = skip_whitespace(s, last_punct + 1)
        i = start_off

    if start_off < length:
        out.append(Chunk(start_off, length - start_off))

    return out.data()
