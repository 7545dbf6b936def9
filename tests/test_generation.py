import pytest

from chunklife.chunk import CHUNK_SIZE, Chunk, ChunkTable, get_cell, new_cell
from chunklife.generation import (
    backup_chunks,
    chunk_next_generation,
    compute_next_generation,
    count_neighbors,
    grow_neighbors,
    neighbor_chunk,
    next_generation,
)


def _alive(chunk):
    return {
        (x, y)
        for y in range(CHUNK_SIZE)
        for x in range(CHUNK_SIZE)
        if get_cell(chunk.cells, x, y)
    }


def _seed(table, cells, x=0, y=0):
    chunk = table.get_chunk(x, y) or table.new_chunk(x, y)
    for cx, cy in cells:
        new_cell(chunk.cells, cx, cy)
    return chunk


LABELS = ["nw", "n", "ne", "w", "c", "e", "sw", "s", "se"]


@pytest.mark.parametrize(
    "posx, posy, expected",
    [
        (-1, -1, "nw"),
        (5, -1, "n"),
        (CHUNK_SIZE, -1, "ne"),
        (-1, 5, "w"),
        (5, 5, "c"),
        (CHUNK_SIZE, 5, "e"),
        (-1, CHUNK_SIZE, "sw"),
        (5, CHUNK_SIZE, "s"),
        (CHUNK_SIZE, CHUNK_SIZE, "se"),
    ],
)
def test_neighbor_chunk_selects_block(posx, posy, expected):
    assert neighbor_chunk(LABELS, posx, posy) == expected


def test_count_neighbors_stops_at_four():
    chunk = Chunk(0, 0)
    for y in range(CHUNK_SIZE):
        for x in range(CHUNK_SIZE):
            new_cell(chunk.backup, x, y)
    neighbors = [None] * 4 + [chunk] + [None] * 4
    assert count_neighbors(neighbors, 5, 5) == 4


def test_count_neighbors_reads_across_border():
    center = Chunk(0, 0)
    left = Chunk(-1, 0)
    new_cell(left.backup, CHUNK_SIZE - 1, 5)
    with_left = [None, None, None, left, center, None, None, None, None]
    without_left = [None, None, None, None, center, None, None, None, None]
    assert count_neighbors(with_left, 0, 5) == 1
    assert count_neighbors(without_left, 0, 5) == 0


def test_count_neighbors_ignores_the_cell_itself():
    chunk = Chunk(0, 0)
    new_cell(chunk.backup, 5, 5)
    neighbors = [None] * 4 + [chunk] + [None] * 4
    assert count_neighbors(neighbors, 5, 5) == 0
    assert count_neighbors(neighbors, 6, 5) == 1


def test_grow_neighbors_on_top_edge():
    table = ChunkTable()
    chunk = table.new_chunk(0, 0)
    neighbors = [None] * 4 + [chunk] + [None] * 4
    grow_neighbors(neighbors, table, 5, 0)
    assert len(table) == 2
    assert neighbors[1] is table.get_chunk(0, -1)
    assert neighbors[1].cells == bytearray(len(chunk.cells))


def test_grow_neighbors_in_corner_skips_diagonal():
    table = ChunkTable()
    chunk = table.new_chunk(0, 0)
    neighbors = [None] * 4 + [chunk] + [None] * 4
    grow_neighbors(neighbors, table, 0, 0)
    assert len(table) == 3
    assert table.get_chunk(-1, -1) is None
    assert neighbors[3] is table.get_chunk(-1, 0)


def test_grow_neighbors_inside_creates_nothing():
    table = ChunkTable()
    chunk = table.new_chunk(0, 0)
    neighbors = [None] * 4 + [chunk] + [None] * 4
    grow_neighbors(neighbors, table, 5, 5)
    assert len(table) == 1


def test_blinker_oscillates():
    table = ChunkTable()
    vertical = {(5, 4), (5, 5), (5, 6)}
    horizontal = {(4, 5), (5, 5), (6, 5)}
    chunk = _seed(table, vertical)
    next_generation(table)
    assert _alive(chunk) == horizontal
    next_generation(table)
    assert _alive(chunk) == vertical


def test_block_is_still():
    table = ChunkTable()
    block = {(3, 3), (4, 3), (3, 4), (4, 4)}
    chunk = _seed(table, block)
    for _ in range(3):
        next_generation(table)
    assert _alive(chunk) == block


def test_lonely_cell_dies():
    table = ChunkTable()
    chunk = _seed(table, {(7, 7)})
    elapsed = next_generation(table)
    assert _alive(chunk) == set()
    assert elapsed >= 0


def test_blinker_across_chunk_border():
    table = ChunkTable()
    edge = CHUNK_SIZE - 1
    chunk = _seed(table, {(edge, 4), (edge, 5), (edge, 6)})
    next_generation(table)
    right = table.get_chunk(1, 0)
    assert right is not None
    assert _alive(chunk) == {(edge - 1, 5), (edge, 5)}
    assert _alive(right) == {(0, 5)}


def test_backup_chunks_moves_cells():
    table = ChunkTable()
    chunk = _seed(table, {(1, 2)})
    backup_chunks(table)
    assert _alive(chunk) == set()
    assert get_cell(chunk.backup, 1, 2) == 1


def test_chunk_next_generation_uses_backup():
    table = ChunkTable()
    chunk = table.new_chunk(0, 0)
    for x, y in {(2, 1), (2, 2), (2, 3)}:
        new_cell(chunk.backup, x, y)
    chunk_next_generation(table, chunk)
    assert _alive(chunk) == {(1, 2), (2, 2), (3, 2)}


def test_compute_without_backup_empties_table():
    table = ChunkTable()
    chunk = _seed(table, {(1, 1), (1, 2), (1, 3)})
    compute_next_generation(table)
    assert _alive(chunk) == {(1, 1), (1, 2), (1, 3)}