"""
Second pass: length-driven re-chunking.

Merges first-pass chunks shorter than ``min_length`` into a neighbour and
splits chunks longer than ``max_length`` at the best structural boundary
in the allowed window, never cutting through a run of non-whitespace.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Tuple

from .buffer import Chunk, ChunkBuffer
from .classes import TextLike, as_text, is_punct, is_space, is_upper, is_whitespace


def adjust_for_token_boundary(
    text: str, chunk_start: int, chunk_end: int, candidate: int
) -> Optional[int]:
    """
    Move *candidate* onto a whitespace character so no token is cut.

    Walks backward toward *chunk_start* first, then forward toward
    *chunk_end*. Returns None when the chunk holds no usable whitespace.
    Candidates on or outside the chunk edges are returned unchanged.
    """
    if candidate <= chunk_start or candidate >= chunk_end:
        return candidate

    j = candidate
    while j > chunk_start:
        if is_whitespace(text[j]):
            return j
        j -= 1

    j = candidate
    while j < chunk_end:
        if is_whitespace(text[j]):
            return j
        j += 1

    return None


def _paragraph_break(text: str, i: int, search_start: int, end: int) -> bool:
    return i - 1 >= search_start and i < end and text[i - 1] == "\n" and text[i] == "\n"


def _whitespace_run(text: str, i: int, search_start: int, end: int) -> bool:
    return (
        i - 2 >= search_start
        and i < end
        and is_space(text[i - 2])
        and is_space(text[i - 1])
        and is_space(text[i])
    )


def _single_newline(text: str, i: int, search_start: int, end: int) -> bool:
    return i < end and text[i] == "\n"


def _sentence_seam(text: str, i: int, search_start: int, end: int) -> bool:
    if i >= end or not is_punct(text[i - 1]) or not is_whitespace(text[i]):
        return False
    j = i + 1
    while j < end and is_whitespace(text[j]):
        j += 1
    return j < end and is_upper(text[j])


def _any_whitespace(text: str, i: int, search_start: int, end: int) -> bool:
    return i < end and is_space(text[i])


# Strict priority order; the first heuristic with a match decides.
SPLIT_HEURISTICS: Tuple[Callable[[str, int, int, int], bool], ...] = (
    _paragraph_break,
    _whitespace_run,
    _single_newline,
    _sentence_seam,
    _any_whitespace,
)


def find_split_point(
    text: TextLike,
    start_offset: int,
    length: int,
    min_length: int,
    max_length: int,
) -> int:
    """
    Find where to cut the chunk ``[start_offset, start_offset + length)``.

    The cut lands in ``[start_offset + min_length, start_offset + max_length]``
    and on a whitespace character, which then opens the right-hand chunk.
    Returns the chunk end when no split is needed or none is possible.

    Args:
        text: Full source text
        start_offset: Chunk start
        length: Chunk length
        min_length: Minimum length of either side of the cut
        max_length: Maximum length of the left side of the cut

    Returns:
        The split index, or ``start_offset + length`` to keep the chunk whole.
    """
    s = as_text(text)
    end = start_offset + length
    if length <= max_length:
        return end

    search_start = start_offset + min_length
    search_end = start_offset + max_length
    valid_split_end = end - min_length

    # The tail left behind would be shorter than min_length
    if search_end > valid_split_end:
        return end
    if search_start >= search_end:
        return end

    def aligned(candidate: int) -> int:
        adjusted = adjust_for_token_boundary(s, start_offset, end, candidate)
        if adjusted is not None and start_offset < adjusted < end:
            return adjusted
        return end

    for matches in SPLIT_HEURISTICS:
        for i in range(search_end, search_start, -1):
            if matches(s, i, search_start, end):
                return aligned(i)

    return aligned(search_end)


def rechunk(
    text: Optional[TextLike],
    chunks: Iterable[Tuple[int, int]],
    min_length: int,
    max_length: int,
    buffer: Optional[ChunkBuffer] = None,
) -> List[Chunk]:
    """
    Re-partition first-pass *chunks* so most fit ``[min_length, max_length]``.

    Short chunks are merged backward into the last emitted chunk, or forward
    with the next input chunk, when the result stays within ``max_length``.
    Long chunks are split repeatedly with ``find_split_point``. Chunks that
    cannot be merged or split are kept as they are.

    Args:
        text: Source text the chunks point into
        chunks: First-pass chunks, in text order
        min_length: Preferred minimum chunk length
        max_length: Preferred maximum chunk length
        buffer: Optional output buffer; it is cleared first and must not be
            the buffer holding *chunks*

    Returns:
        The re-partitioned chunks.
    """
    if buffer is not None and buffer is chunks:
        raise ValueError("rechunk needs an output buffer distinct from its input")
    if min_length < 0 or max_length < 0:
        raise ValueError(
            f"min_length and max_length must be non-negative: {min_length}, {max_length}"
        )

    first_pass = [Chunk(*c) for c in chunks]
    out = buffer if buffer is not None else ChunkBuffer()
    out.clear()
    if not first_pass:
        return []

    s = as_text(text) if text else ""
    count = len(first_pass)
    i = 0
    while i < count:
        current = first_pass[i]
        i += 1

        if min_length <= current.length <= max_length:
            out.append(current)
            continue

        if current.length < min_length:
            if out:
                last = out.last()
                combined = current.end - last.start_offset
                if combined <= max_length:
                    out.set_last_length(combined)
                    continue

            if i < count:
                combined = first_pass[i].end - current.start_offset
                if combined <= max_length:
                    out.append(Chunk(current.start_offset, combined))
                    i += 1
                    continue

            out.append(current)
            continue

        remaining = current
        while remaining.length > max_length:
            split = find_split_point(
                s, remaining.start_offset, remaining.length, min_length, max_length
            )
            if split <= remaining.start_offset or split >= remaining.end:
                break
            out.append(Chunk(remaining.start_offset, split - remaining.start_offset))
            remaining = Chunk(split, remaining.end - split)
        out.append(remaining)

    return out.data()
