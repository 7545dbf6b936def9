"""Off-screen images held as raw pixel bytes."""

from __future__ import annotations

_BYTE_ORDERS = {0: "little", 1: "big"}


class Image:
    """A ZPixmap-style image: rows of packed pixels in a byte buffer.

    ``endian`` is 0 when pixels are stored least significant byte first
    and 1 when they are stored most significant byte first.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        bits_per_pixel: int = 32,
        endian: int = 0,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"image size must be positive, got {width}x{height}")
        if bits_per_pixel <= 0 or bits_per_pixel % 8:
            raise ValueError(f"unsupported bits per pixel: {bits_per_pixel}")
        if endian not in _BYTE_ORDERS:
            raise ValueError(f"endian must be 0 or 1, got {endian!r}")
        self.width = width
        self.height = height
        self.bits_per_pixel = bits_per_pixel
        self.endian = endian
        # Rows are padded to a multiple of 32 bits.
        self.size_line = (width * bits_per_pixel + 31) // 32 * 4
        self.data = bytearray(self.size_line * height)

    @property
    def bytes_per_pixel(self) -> int:
        """Number of bytes taken by one pixel."""
        return self.bits_per_pixel // 8

    def __repr__(self) -> str:
        return (
            f"Image(width={self.width}, height={self.height}, "
            f"bits_per_pixel={self.bits_per_pixel}, endian={self.endian})"
        )

    def _contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _offset(self, x: int, y: int) -> int:
        if not self._contains(x, y):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return y * self.size_line + x * self.bytes_per_pixel

    def _store(self, offset: int, color: int) -> None:
        size = self.bytes_per_pixel
        value = color & ((1 << (8 * size)) - 1)
        self.data[offset:offset + size] = value.to_bytes(size, _BYTE_ORDERS[self.endian])

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Write a pixel; coordinates outside the image are ignored."""
        if self._contains(x, y):
            self._store(self._offset(x, y), color)

    def get_pixel(self, x: int, y: int) -> int:
        """Return the pixel value at (x, y)."""
        offset = self._offset(x, y)
        raw = self.data[offset:offset + self.bytes_per_pixel]
        return int.from_bytes(raw, _BYTE_ORDERS[self.endian])

    def fill(self, color: int) -> None:
        """Set every pixel of the image to ``color``."""
        size = self.bytes_per_pixel
        value = color & ((1 << (8 * size)) - 1)
        row = value.to_bytes(size, _BYTE_ORDERS[self.endian]) * self.width
        padding = bytes(self.size_line - len(row))
        self.data[:] = (row + padding) * self.height

    def set_pixel_bytes(self, x: int, y: int, color: int) -> None:
        """Store ``color`` byte by byte in the image's byte order.

        Unlike :meth:`put_pixel`, a position outside the image raises IndexError.
        """
        self._store(self._offset(x, y), color)