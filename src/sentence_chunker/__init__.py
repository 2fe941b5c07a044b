"""Sentence Chunker: sentence segmentation and length-bounded re-chunking."""

__version__ = "0.1.0"

from .chunking import Chunk, ChunkBuffer, chunk_text, rechunk, segment

__all__ = ["Chunk", "ChunkBuffer", "__version__", "chunk_text", "rechunk", "segment"]
