"""
Sentence Chunker Chunking Package

Two-pass chunking over an immutable text:
- Heuristic sentence segmentation (decimals, abbreviations, ordinals,
  punctuation runs, trailing closers)
- Length-driven re-chunking that merges short chunks and splits long ones
  without cutting tokens
- Chunk verification against the chunking invariants
"""

from .buffer import Chunk, ChunkBuffer
from .pipeline import chunk_text, escape_newlines, render_chunks
from .rechunker import adjust_for_token_boundary, find_split_point, rechunk
from .segmenter import (
    ABBREVIATIONS,
    is_end_of_sentence,
    matches_abbreviation,
    segment,
)
from .verify import ChunkReport, verify_chunks

__all__ = [
    "ABBREVIATIONS",
    "Chunk",
    "ChunkBuffer",
    "ChunkReport",
    "adjust_for_token_boundary",
    "chunk_text",
    "escape_newlines",
    "find_split_point",
    "is_end_of_sentence",
    "matches_abbreviation",
    "rechunk",
    "render_chunks",
    "segment",
    "verify_chunks",
]
