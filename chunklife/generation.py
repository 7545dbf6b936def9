"""Computing the next Game of Life generation over a table of chunks."""

from __future__ import annotations

import time
from collections.abc import Sequence

from chunklife.chunk import CHUNK_SIZE, Chunk, ChunkTable, get_cell, new_cell

# Neighbour lists hold nine entries, row by row from the north-west;
# entry 4 is the chunk itself.
_CENTER = 4
_NORTH = 1
_WEST = 3
_EAST = 5
_SOUTH = 7


def _band(pos: int) -> int:
    if pos < 0:
        return 0
    if pos >= CHUNK_SIZE:
        return 2
    return 1


def neighbor_chunk(neighbors: Sequence[Chunk | None], posx: int, posy: int) -> Chunk | None:
    """Return the chunk of the 3x3 block that holds cell position (posx, posy)."""
    return neighbors[_band(posy) * 3 + _band(posx)]


def count_neighbors(neighbors: Sequence[Chunk | None], cellx: int, celly: int) -> int:
    """Count live neighbours in the backups, stopping once four are found."""
    count = 0
    for offset_y in (-1, 0, 1):
        posy = celly + offset_y
        for offset_x in (-1, 0, 1):
            if count >= 4:
                return count
            if not offset_x and not offset_y:
                continue
            posx = cellx + offset_x
            chunk = neighbor_chunk(neighbors, posx, posy)
            if chunk is None:
                continue
            count += get_cell(chunk.backup, posx % CHUNK_SIZE, posy % CHUNK_SIZE)
    return count


def grow_neighbors(
    neighbors: list[Chunk | None], table: ChunkTable, cellx: int, celly: int
) -> None:
    """Create the missing edge neighbours next to a live cell on a chunk border."""
    current = neighbors[_CENTER]
    if current is None:
        raise ValueError("the neighbour list has no centre chunk")
    if celly == 0 and neighbors[_NORTH] is None:
        neighbors[_NORTH] = table.new_chunk(current.x, current.y - 1)
    elif celly == CHUNK_SIZE - 1 and neighbors[_SOUTH] is None:
        neighbors[_SOUTH] = table.new_chunk(current.x, current.y + 1)
    if cellx == 0 and neighbors[_WEST] is None:
        neighbors[_WEST] = table.new_chunk(current.x - 1, current.y)
    elif cellx == CHUNK_SIZE - 1 and neighbors[_EAST] is None:
        neighbors[_EAST] = table.new_chunk(current.x + 1, current.y)


def _neighbors_of(table: ChunkTable, chunk: Chunk) -> list[Chunk | None]:
    return [
        chunk if dx == 0 and dy == 0 else table.get_chunk(chunk.x + dx, chunk.y + dy)
        for dy in (-1, 0, 1)
        for dx in (-1, 0, 1)
    ]


def chunk_next_generation(table: ChunkTable, chunk: Chunk) -> None:
    """Write the next generation of ``chunk`` into its cells from the backups."""
    neighbors = _neighbors_of(table, chunk)
    for celly in range(CHUNK_SIZE):
        for cellx in range(CHUNK_SIZE):
            count = count_neighbors(neighbors, cellx, celly)
            if get_cell(chunk.backup, cellx, celly):
                grow_neighbors(neighbors, table, cellx, celly)
                if count in (2, 3):
                    new_cell(chunk.cells, cellx, celly)
            elif count == 3:
                new_cell(chunk.cells, cellx, celly)


def backup_chunks(table: ChunkTable) -> None:
    """Move every chunk's cells into its backup, leaving the cells empty."""
    for chunk in table:
        chunk.backup_cells()


def compute_next_generation(table: ChunkTable) -> None:
    """Compute the next generation of every chunk in table order."""
    for chunk in table:
        chunk_next_generation(table, chunk)


def next_generation(table: ChunkTable) -> int:
    """Advance the table by one generation; return the time taken in microseconds."""
    start = time.perf_counter_ns()
    backup_chunks(table)
    compute_next_generation(table)
    return (time.perf_counter_ns() - start) // 1000