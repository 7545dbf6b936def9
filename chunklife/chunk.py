"""Chunks of cells stored as bit fields, and the hash table that holds them."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

CHUNK_SIZE = 16
CHUNK_BITS = (CHUNK_SIZE * CHUNK_SIZE) // 8 + 7
HASH_TABLE_SIZE = 1024

_HASH_FACTOR = 73856093

logger = logging.getLogger(__name__)


def _bit(x: int, y: int) -> tuple[int, int]:
    if not (0 <= x < CHUNK_SIZE and 0 <= y < CHUNK_SIZE):
        raise IndexError(f"cell ({x}, {y}) outside a {CHUNK_SIZE}x{CHUNK_SIZE} chunk")
    index = y * CHUNK_SIZE + x
    return index // 8, index % 8


def get_cell(data: bytes | bytearray, x: int, y: int) -> int:
    """Return 1 if the cell at (x, y) is alive, else 0."""
    byte, bit = _bit(x, y)
    return (data[byte] >> bit) & 1


def new_cell(data: bytearray, x: int, y: int) -> None:
    """Make the cell at (x, y) alive."""
    byte, bit = _bit(x, y)
    data[byte] |= 1 << bit


def kill_cell(data: bytearray, x: int, y: int) -> None:
    """Make the cell at (x, y) dead."""
    byte, bit = _bit(x, y)
    data[byte] &= ~(1 << bit) & 0xFF


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def hash_chunk(x: int, y: int) -> int:
    """Return the hash-table bucket of the chunk at (x, y)."""
    return abs(_to_int32(x + y * _HASH_FACTOR)) % HASH_TABLE_SIZE


def format_chunk(cells: bytes | bytearray) -> str:
    """Draw a chunk as text: '#' for live cells, '.' for dead ones."""
    rows = (
        "".join("# " if get_cell(cells, x, y) else ". " for x in range(CHUNK_SIZE)) + "\n"
        for y in range(CHUNK_SIZE)
    )
    return "\nCHUNK:\n" + "".join(rows)


@dataclass(eq=False)
class Chunk:
    """A square of cells at chunk coordinates (x, y)."""

    x: int
    y: int
    cells: bytearray = field(default_factory=lambda: bytearray(CHUNK_BITS))
    backup: bytearray = field(default_factory=lambda: bytearray(CHUNK_BITS))

    def backup_cells(self) -> None:
        """Copy the cells into the backup and clear them."""
        self.backup[:] = self.cells
        self.cells[:] = bytes(CHUNK_BITS)


class ChunkTable:
    """Chunks kept in hash buckets; the newest chunk of a bucket comes first."""

    def __init__(self) -> None:
        # Each bucket is kept oldest first; iteration walks it backwards.
        self._buckets: list[list[Chunk]] = [[] for _ in range(HASH_TABLE_SIZE)]

    def new_chunk(self, x: int, y: int) -> Chunk:
        """Create an empty chunk at (x, y) and add it to the table."""
        chunk = Chunk(x, y)
        self._buckets[hash_chunk(x, y)].append(chunk)
        logger.debug("NEW CHUNK: %d,%d", x, y)
        return chunk

    def get_chunk(self, x: int, y: int) -> Chunk | None:
        """Return the newest chunk at (x, y), or None."""
        for chunk in reversed(self._buckets[hash_chunk(x, y)]):
            if chunk.x == x and chunk.y == y:
                return chunk
        return None

    def clear(self) -> None:
        """Remove every chunk."""
        for bucket in self._buckets:
            bucket.clear()

    def __iter__(self) -> Iterator[Chunk]:
        """Walk buckets in order, each from newest to oldest.

        Chunks added to a bucket while it is being walked are not visited;
        chunks added to later buckets are.
        """
        for bucket in self._buckets:
            for index in range(len(bucket) - 1, -1, -1):
                yield bucket[index]

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets)