import pytest

from chunklife.image import Image

IM1_SX = 42
IM1_SY = 42
IM3_SX = 242
IM3_SY = 242


def _color_map(x, y, w, h, kind):
    if kind == 2:
        return (y * 255) // w + ((((w - x) * 255) // w) << 16) + (((y * 255) // h) << 8)
    return (x * 255) // w + ((((w - x) * 255) // w) << 16) + (((y * 255) // h) << 8)


@pytest.mark.parametrize(
    "width,height,kind",
    [(IM1_SX, IM1_SY, 1), (IM3_SX, IM3_SY, 1), (IM3_SX, IM3_SY, 2)],
)
def test_color_map_fill_reads_back(width, height, kind):
    image = Image(width, height)
    assert image.bits_per_pixel == 32
    for y in range(height):
        for x in range(width):
            image.set_pixel_bytes(x, y, _color_map(x, y, width, height, kind))
    for y in range(0, height, 7):
        for x in range(0, width, 5):
            assert image.get_pixel(x, y) == _color_map(x, y, width, height, kind)


def test_size_line_holds_a_row():
    image = Image(IM1_SX, IM1_SY)
    assert image.size_line >= IM1_SX * image.bytes_per_pixel
    assert image.size_line % 4 == 0
    assert len(image.data) == image.size_line * IM1_SY


def test_little_endian_byte_layout():
    image = Image(2, 2, endian=0)
    image.set_pixel_bytes(0, 0, 0x11223344)
    assert bytes(image.data[0:4]) == bytes([0x44, 0x33, 0x22, 0x11])


def test_big_endian_byte_layout():
    image = Image(2, 2, endian=1)
    image.set_pixel_bytes(0, 0, 0x11223344)
    assert bytes(image.data[0:4]) == bytes([0x11, 0x22, 0x33, 0x44])
    assert image.get_pixel(0, 0) == 0x11223344


def test_put_pixel_outside_is_ignored():
    image = Image(4, 4)
    before = bytes(image.data)
    image.put_pixel(-1, 0, 0xFFFFFF)
    image.put_pixel(4, 0, 0xFFFFFF)
    image.put_pixel(0, 4, 0xFFFFFF)
    assert bytes(image.data) == before


def test_put_pixel_inside_roundtrip():
    image = Image(4, 4)
    image.put_pixel(3, 2, 0xFFFFFF)
    assert image.get_pixel(3, 2) == 0xFFFFFF
    assert image.get_pixel(2, 3) == 0


def test_fill_sets_every_pixel():
    image = Image(5, 3)
    image.fill(0x123456)
    assert all(image.get_pixel(x, y) == 0x123456 for x in range(5) for y in range(3))


def test_get_pixel_outside_raises():
    image = Image(3, 3)
    with pytest.raises(IndexError):
        image.get_pixel(3, 0)


def test_set_pixel_bytes_outside_raises():
    image = Image(3, 3)
    with pytest.raises(IndexError):
        image.set_pixel_bytes(0, -1, 0)


@pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, 3)])
def test_invalid_size_raises(width, height):
    with pytest.raises(ValueError):
        Image(width, height)


def test_invalid_endian_raises():
    with pytest.raises(ValueError):
        Image(2, 2, endian=2)