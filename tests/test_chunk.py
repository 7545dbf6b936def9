import pytest

from chunklife.chunk import (
    CHUNK_BITS,
    CHUNK_SIZE,
    HASH_TABLE_SIZE,
    Chunk,
    ChunkTable,
    format_chunk,
    get_cell,
    hash_chunk,
    kill_cell,
    new_cell,
)


def _live_bits(data):
    return sum(bin(byte).count("1") for byte in data)


def test_new_get_kill_roundtrip():
    data = bytearray(CHUNK_BITS)
    new_cell(data, 10, 11)
    assert get_cell(data, 10, 11) == 1
    assert get_cell(data, 11, 10) == 0
    assert _live_bits(data) == 1
    kill_cell(data, 10, 11)
    assert get_cell(data, 10, 11) == 0
    assert _live_bits(data) == 0


def test_every_cell_has_its_own_bit():
    data = bytearray(CHUNK_BITS)
    for y in range(CHUNK_SIZE):
        for x in range(CHUNK_SIZE):
            new_cell(data, x, y)
    assert _live_bits(data) == CHUNK_SIZE * CHUNK_SIZE


@pytest.mark.parametrize("x,y", [(CHUNK_SIZE, 0), (0, CHUNK_SIZE), (-1, 0), (0, -1)])
def test_out_of_chunk_raises(x, y):
    with pytest.raises(IndexError):
        get_cell(bytearray(CHUNK_BITS), x, y)


def test_hash_origin_and_symmetry():
    assert hash_chunk(0, 0) == 0
    assert hash_chunk(1, 0) == 1
    assert hash_chunk(-1, 0) == hash_chunk(1, 0)


@pytest.mark.parametrize("x,y", [(0, 1), (-5, 7), (100000, -100000), (2**31 - 1, 2**31 - 1)])
def test_hash_in_range(x, y):
    assert 0 <= hash_chunk(x, y) < HASH_TABLE_SIZE


def test_table_new_and_get():
    table = ChunkTable()
    chunk = table.new_chunk(3, -4)
    assert table.get_chunk(3, -4) is chunk
    assert table.get_chunk(-4, 3) is None
    assert (chunk.x, chunk.y) == (3, -4)
    assert bytes(chunk.cells) == bytes(CHUNK_BITS)
    assert len(table) == 1


def test_same_bucket_iterates_newest_first():
    table = ChunkTable()
    older = table.new_chunk(0, 0)
    newer = table.new_chunk(HASH_TABLE_SIZE, 0)
    assert hash_chunk(0, 0) == hash_chunk(HASH_TABLE_SIZE, 0)
    assert list(table) == [newer, older]


def test_iteration_follows_bucket_order():
    table = ChunkTable()
    far = table.new_chunk(5, 0)
    near = table.new_chunk(1, 0)
    assert list(table) == [near, far]


def test_chunk_added_to_walked_bucket_is_skipped():
    table = ChunkTable()
    table.new_chunk(0, 0)
    seen = []
    for chunk in table:
        seen.append(chunk)
        if len(table) == 1:
            table.new_chunk(HASH_TABLE_SIZE, 0)
    assert len(seen) == 1
    assert len(table) == 2


def test_clear_empties_table():
    table = ChunkTable()
    table.new_chunk(0, 0)
    table.new_chunk(1, 1)
    table.clear()
    assert len(table) == 0
    assert table.get_chunk(0, 0) is None


def test_backup_cells_moves_and_clears():
    chunk = Chunk(0, 0)
    new_cell(chunk.cells, 2, 3)
    chunk.backup_cells()
    assert get_cell(chunk.backup, 2, 3) == 1
    assert _live_bits(chunk.cells) == 0


def test_format_chunk_marks_live_cells():
    cells = bytearray(CHUNK_BITS)
    new_cell(cells, 0, 0)
    new_cell(cells, 15, 15)
    text = format_chunk(cells)
    assert text.startswith("\nCHUNK:\n")
    rows = text.split("\n")[2:-1]
    assert len(rows) == CHUNK_SIZE
    assert rows[0].startswith("# ")
    assert rows[-1].endswith("# ")
    assert text.count("#") == 2
    assert text.count(".") == CHUNK_SIZE * CHUNK_SIZE - 2