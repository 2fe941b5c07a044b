"""
Chunk verification: bounds, ordering, coverage and token-cut checks.
"""

import statistics
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from .buffer import Chunk
from .classes import TextLike, as_text, is_whitespace

MAX_EXAMPLES = 10


class ChunkReport(BaseModel):
    """Outcome of ``verify_chunks``."""

    count: int = 0
    text_length: int = 0
    length_stats: Dict[str, float] = Field(default_factory=dict)
    violations: List[Dict[str, Any]] = Field(default_factory=list)
    uncovered: List[int] = Field(
        default_factory=list, description="First-pass offsets missing from the output"
    )
    extra_covered: List[int] = Field(
        default_factory=list,
        description="Non-whitespace offsets covered by the output but not the first pass",
    )
    token_cuts: List[int] = Field(
        default_factory=list, description="Split offsets that land inside a token"
    )

    @property
    def ok(self) -> bool:
        return not (
            self.violations or self.uncovered or self.extra_covered or self.token_cuts
        )


def _coverage(chunks: Sequence[Chunk], text_length: int) -> bytearray:
    mask = bytearray(text_length)
    for chunk in chunks:
        for pos in range(chunk.start_offset, min(chunk.end, text_length)):
            mask[pos] = 1
    return mask


def verify_chunks(
    text: Optional[TextLike],
    chunks: Sequence[Tuple[int, int]],
    first_pass: Optional[Sequence[Tuple[int, int]]] = None,
) -> ChunkReport:
    """
    Check *chunks* against the chunking invariants.

    Args:
        text: Source text
        chunks: Chunks to check, in emitted order
        first_pass: When given, *chunks* are treated as second-pass output of
            these first-pass chunks and coverage and token cuts are checked

    Returns:
        ChunkReport; ``report.ok`` is True when nothing was flagged
    """
    s = as_text(text) if text else ""
    checked = [Chunk(*c) for c in chunks]
    report = ChunkReport(count=len(checked), text_length=len(s))

    lengths = [c.length for c in checked]
    if lengths:
        report.length_stats = {
            "min": min(lengths),
            "max": max(lengths),
            "median": statistics.median(lengths),
        }

    previous: Optional[Chunk] = None
    for index, chunk in enumerate(checked):
        if chunk.length <= 0:
            report.violations.append(
                {"index": index, "chunk": tuple(chunk), "reason": "empty"}
            )
        if chunk.end > len(s):
            report.violations.append(
                {"index": index, "chunk": tuple(chunk), "reason": "out_of_bounds"}
            )
        if previous is not None and chunk.start_offset < previous.end:
            report.violations.append(
                {"index": index, "chunk": tuple(chunk), "reason": "overlap_or_unsorted"}
            )
        previous = chunk

    if first_pass is None:
        return report

    sentences = [Chunk(*c) for c in first_pass]
    before = _coverage(sentences, len(s))
    after = _coverage(checked, len(s))
    for pos in range(len(s)):
        if before[pos] and not after[pos]:
            report.uncovered.append(pos)
        elif after[pos] and not before[pos] and not is_whitespace(s[pos]):
            report.extra_covered.append(pos)

    sentence_starts = {c.start_offset for c in sentences}
    for chunk in checked:
        j = chunk.start_offset
        if j in sentence_starts or j == 0 or j >= len(s):
            continue
        if not is_whitespace(s[j - 1]) and not is_whitespace(s[j]):
            report.token_cuts.append(j)

    del report.uncovered[MAX_EXAMPLES:]
    del report.extra_covered[MAX_EXAMPLES:]
    return report
