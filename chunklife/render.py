"""Drawing the visible chunks of a game into an image."""

from __future__ import annotations

import time

from chunklife.chunk import CHUNK_SIZE, Chunk, get_cell
from chunklife.image import Image
from chunklife.state import (
    BACKGROUND_COLOR,
    CELL_COLOR,
    CHUNK_BORDER,
    Camera,
    Game,
)

_BORDER_COLOR = 0xFFFFFF
_STATUS_X = 20
_STATUS_LINE_HEIGHT = 20


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def display_cell(image: Image, posx: int, posy: int, size: int) -> None:
    """Fill a ``size`` by ``size`` square at (posx, posy); pixels off the image are skipped."""
    for y in range(posy, posy + size):
        for x in range(posx, posx + size):
            image.put_pixel(x, y, CELL_COLOR)


def display_chunk_border(game: Game, image: Image, chunk: Chunk) -> None:
    """Mark the cell grid points along the four edges of a chunk."""
    cell_size = game.camera.cell_size
    chunk_pixels = CHUNK_SIZE * cell_size
    chunk_x = chunk.x * chunk_pixels + game.camera.x
    chunk_y = chunk.y * chunk_pixels + game.camera.y
    for i in range(CHUNK_SIZE + 1):
        posx = i * cell_size + chunk_x
        posy = i * cell_size + chunk_y
        image.put_pixel(posx, chunk_y, _BORDER_COLOR)
        image.put_pixel(posx, chunk_y + chunk_pixels, _BORDER_COLOR)
        image.put_pixel(chunk_x, posy, _BORDER_COLOR)
        image.put_pixel(chunk_x + chunk_pixels, posy, _BORDER_COLOR)


def display_chunk(game: Game, image: Image, chunk: Chunk | None) -> None:
    """Draw the live cells of a chunk; ``None`` draws nothing."""
    if chunk is None:
        return
    if CHUNK_BORDER:
        display_chunk_border(game, image, chunk)
    cell_size = game.camera.cell_size
    chunk_x = chunk.x * CHUNK_SIZE * cell_size + game.camera.x
    chunk_y = chunk.y * CHUNK_SIZE * cell_size + game.camera.y
    for y in range(CHUNK_SIZE):
        for x in range(CHUNK_SIZE):
            if get_cell(chunk.cells, x, y):
                display_cell(image, chunk_x + x * cell_size, chunk_y + y * cell_size, cell_size)


def visible_chunk_range(camera: Camera, width: int, height: int) -> tuple[int, int, int, int]:
    """Return (min_x, min_y, max_x, max_y), inclusive, of chunks that may be on screen."""
    chunk_pixels = CHUNK_SIZE * camera.cell_size
    min_x = _trunc_div(-camera.x, chunk_pixels) - 1
    min_y = _trunc_div(-camera.y, chunk_pixels) - 1
    max_x = _trunc_div(-camera.x + width, chunk_pixels)
    max_y = _trunc_div(-camera.y + height, chunk_pixels)
    return min_x, min_y, max_x, max_y


def display_visible_chunks(game: Game, image: Image) -> None:
    """Draw every existing chunk that may fall inside the image."""
    min_x, min_y, max_x, max_y = visible_chunk_range(game.camera, image.width, image.height)
    for y in range(min_y, max_y + 1):
        for x in range(min_x, max_x + 1):
            display_chunk(game, image, game.chunks.get_chunk(x, y))


def render(game: Game, image: Image) -> int:
    """Clear the image and draw the visible cells; return the time taken in microseconds."""
    start = time.perf_counter_ns()
    image.fill(BACKGROUND_COLOR)
    display_visible_chunks(game, image)
    return (time.perf_counter_ns() - start) // 1000


def status_lines(game: Game, render_time: int) -> list[tuple[int, int, str]]:
    """Return the (x, baseline y, text) of the status lines shown over the world."""
    texts = [
        f"Generation: {game.generation_count}",
        f"Generation Time:  {game.generation_time / 1000:.3f}ms",
        f"Render Time:      {render_time / 1000:.3f}ms",
    ]
    return [
        (_STATUS_X, _STATUS_LINE_HEIGHT * (row + 1), text)
        for row, text in enumerate(texts)
    ]