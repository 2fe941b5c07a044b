"""
Chunk records and the append-only buffer both passes write into.
"""

from __future__ import annotations

from array import array
from typing import Iterator, List, NamedTuple, Optional


class Chunk(NamedTuple):
    """A half-open range ``[start_offset, start_offset + length)`` of the source text."""

    start_offset: int
    length: int

    @property
    def end(self) -> int:
        return self.start_offset + self.length

    def text_of(self, text):
        """Return the slice of *text* this chunk covers."""
        return text[self.start_offset : self.end]


class ChunkBuffer:
    """
    Append-only sequence of fixed-width ``(start_offset, length)`` records.

    Records are packed into a flat unsigned 64-bit array, two slots per
    record. Once appended a record is never rewritten, except for the
    length of the most recent one (see ``set_last_length``).
    """

    RECORD_SLOTS = 2

    def __init__(self, chunks: Optional[List[Chunk]] = None):
        self._records = array("Q")
        if chunks:
            for chunk in chunks:
                self.append(chunk)

    @property
    def record_size(self) -> int:
        """Width of a single record in bytes."""
        return self._records.itemsize * self.RECORD_SLOTS

    def clear(self) -> None:
        del self._records[:]

    def append(self, chunk: Chunk) -> None:
        start_offset, length = chunk
        if start_offset < 0 or length < 0:
            raise ValueError(f"chunk offsets must be non-negative: {chunk!r}")
        self._records.append(start_offset)
        self._records.append(length)

    def length_in_bytes(self) -> int:
        return len(self._records) * self._records.itemsize

    def data(self) -> List[Chunk]:
        """Return every record, first to last, as ``Chunk`` values."""
        records = self._records
        return [
            Chunk(records[i], records[i + 1])
            for i in range(0, len(records), self.RECORD_SLOTS)
        ]

    def last(self) -> Chunk:
        """Return the most recently appended record."""
        if not self._records:
            raise IndexError("last() on an empty ChunkBuffer")
        return Chunk(self._records[-2], self._records[-1])

    def set_last_length(self, length: int) -> None:
        """Rewrite the length of the most recently appended record in place."""
        if not self._records:
            raise IndexError("set_last_length() on an empty ChunkBuffer")
        if length < 0:
            raise ValueError(f"length must be non-negative: {length}")
        self._records[-1] = length

    def __len__(self) -> int:
        return len(self._records) // self.RECORD_SLOTS

    def __bool__(self) -> bool:
        return bool(self._records)

    def __iter__(self) -> Iterator[Chunk]:
        records = self._records
        for i in range(0, len(records), self.RECORD_SLOTS):
            yield Chunk(records[i], records[i + 1])

    def __getitem__(self, index: int) -> Chunk:
        count = len(self)
        if index < 0:
            index += count
        if not 0 <= index < count:
            raise IndexError("ChunkBuffer index out of range")
        base = index * self.RECORD_SLOTS
        return Chunk(self._records[base], self._records[base + 1])

    def __repr__(self) -> str:
        return f"ChunkBuffer({self.data()!r})"
