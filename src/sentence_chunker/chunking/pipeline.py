"""
Two-pass chunking and rendering helpers.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .buffer import Chunk, ChunkBuffer
from .classes import TextLike, as_text
from .rechunker import rechunk
from .segmenter import segment


def chunk_text(
    text: Optional[TextLike],
    min_length: int,
    max_length: int,
    first_pass: Optional[ChunkBuffer] = None,
    second_pass: Optional[ChunkBuffer] = None,
) -> List[Chunk]:
    """Segment *text* into sentences, then re-flow them into length bounds.

    The two passes always write to separate buffers, since the second pass
    reads the first one's chunks while it appends its own.
    """
    first_pass = first_pass if first_pass is not None else ChunkBuffer()
    second_pass = second_pass if second_pass is not None else ChunkBuffer()
    if first_pass is second_pass:
        raise ValueError("chunk_text needs two distinct buffers")

    sentences = segment(text, first_pass)
    return rechunk(text, sentences, min_length, max_length, second_pass)


def _clamped_slices(s, chunks: Iterable[Tuple[int, int]]):
    for start_offset, length in chunks:
        if start_offset + length > len(s):
            length = len(s) - start_offset if start_offset < len(s) else 0
        yield s[start_offset : start_offset + length]


def render_chunks(text: Optional[TextLike], chunks: Iterable[Tuple[int, int]]) -> List[str]:
    """Return the text each chunk covers, clamped to the end of *text*.

    Offsets index *text* as given. For bytes-like input each byte slice is
    decoded as UTF-8, with undecodable bytes replaced.
    """
    if isinstance(text, (bytes, bytearray, memoryview)):
        raw = bytes(text)
        return [piece.decode("utf-8", errors="replace") for piece in _clamped_slices(raw, chunks)]
    s = as_text(text) if text else ""
    return list(_clamped_slices(s, chunks))


def escape_newlines(value: str) -> str:
    """Render newlines as a literal backslash-n so one chunk fits on one line."""
    return value.replace("\n", "\\n")
