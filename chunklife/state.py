"""Game state and the reactions to keyboard, mouse and focus events."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass, field

from chunklife.chunk import CHUNK_SIZE, ChunkTable, get_cell, kill_cell, new_cell
from chunklife.generation import next_generation

MAX_KEYS = 256
MAX_BUTTONS = 16

WIN_W = 1280
WIN_H = 720

CHUNK_BORDER = False
BACKGROUND_COLOR = 0x000000
CELL_COLOR = 0xFFFFFF

KEY_ESCAPE = 65307
KEY_NEXT = 110
KEY_SPACE = 32

BUTTON_LEFT = 1
BUTTON_RIGHT = 3
BUTTON_SCROLL_UP = 4
BUTTON_SCROLL_DOWN = 5

_DEFAULT_CELL_SIZE = 5

logger = logging.getLogger(__name__)


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def _trunc_mod(a: int, b: int) -> int:
    return a - b * _trunc_div(a, b)


@dataclass
class Camera:
    """View position in pixels and the size of one cell on screen."""

    cell_size: int = _DEFAULT_CELL_SIZE
    x: int = WIN_W // 2 - CHUNK_SIZE * _DEFAULT_CELL_SIZE // 2
    y: int = WIN_H // 2 - CHUNK_SIZE * _DEFAULT_CELL_SIZE // 2


@dataclass
class Inputs:
    """Keys and buttons held down, and the state of mouse editing."""

    keys: set[int] = field(default_factory=set)
    buttons: set[int] = field(default_factory=set)
    mouse_press_x: int = 0
    mouse_press_y: int = 0
    creating_cells: bool = True


@dataclass
class Game:
    """The world of chunks with its camera and input state.

    ``on_exit`` is called when the escape key is pressed; without one the
    program exits. ``on_autorepeat`` receives False when the window gains
    focus and True when it loses it.
    """

    chunks: ChunkTable = field(default_factory=ChunkTable)
    camera: Camera = field(default_factory=Camera)
    inputs: Inputs = field(default_factory=Inputs)
    generation_count: int = 0
    generation_time: int = 0
    on_exit: Callable[[], object] | None = field(default=None, repr=False)
    on_autorepeat: Callable[[bool], object] | None = field(default=None, repr=False)

    def mouse_cell_edit(self, mouse_x: int, mouse_y: int, dragging: bool) -> None:
        """Create or kill the cell under the mouse.

        A click (not a drag) chooses between creating and killing from the
        state of the clicked cell; a drag keeps doing the same.
        """
        cell_size = self.camera.cell_size
        chunk_pixels = cell_size * CHUNK_SIZE
        real_x = mouse_x - self.camera.x
        real_y = mouse_y - self.camera.y
        chunk_x = _trunc_div(real_x + 1, chunk_pixels) - (1 if real_x < 0 else 0)
        chunk_y = _trunc_div(real_y + 1, chunk_pixels) - (1 if real_y < 0 else 0)

        chunk = self.chunks.get_chunk(chunk_x, chunk_y)
        if chunk is None:
            if not self.inputs.creating_cells:
                return
            chunk = self.chunks.new_chunk(chunk_x, chunk_y)

        cell_x = _trunc_mod(_trunc_div(real_x - chunk_x * chunk_pixels, cell_size), CHUNK_SIZE)
        cell_y = _trunc_mod(_trunc_div(real_y - chunk_y * chunk_pixels, cell_size), CHUNK_SIZE)
        if not (0 <= cell_x < CHUNK_SIZE and 0 <= cell_y < CHUNK_SIZE):
            return

        if not dragging:
            self.inputs.creating_cells = not get_cell(chunk.cells, cell_x, cell_y)
        if self.inputs.creating_cells:
            logger.debug(
                "NEW CELL: %d,%d CHUNK: %d,%d MOUSE POS: %d,%d",
                cell_x, cell_y, chunk_x, chunk_y, real_x, real_y,
            )
            new_cell(chunk.cells, cell_x, cell_y)
        else:
            kill_cell(chunk.cells, cell_x, cell_y)

    def focus_in(self) -> None:
        """Turn key autorepeat off while the window has focus."""
        if self.on_autorepeat is not None:
            self.on_autorepeat(False)

    def focus_out(self) -> None:
        """Release every key and turn key autorepeat back on."""
        self.inputs.keys.clear()
        if self.on_autorepeat is not None:
            self.on_autorepeat(True)

    def key_pressed(self, keycode: int) -> None:
        """Escape exits, 'n' steps one generation; other keys are recorded."""
        if keycode == KEY_ESCAPE:
            if self.on_exit is not None:
                self.on_exit()
            else:
                sys.exit(0)
        elif keycode == KEY_NEXT:
            next_generation(self.chunks)
        if not 0 <= keycode < MAX_KEYS or keycode in self.inputs.keys:
            return
        self.inputs.keys.add(keycode)
        logger.debug("KEYBOARD: %d pressed", keycode)

    def key_released(self, keycode: int) -> None:
        """Forget a released key."""
        self.inputs.keys.discard(keycode)
        logger.debug("KEYBOARD: %d released", keycode)

    def button_pressed(self, button: int, x: int, y: int) -> None:
        """Zoom with the wheel, edit with the left button, start panning with the right."""
        camera = self.camera
        if button == BUTTON_SCROLL_UP:
            camera.x += _trunc_div(camera.x - x, camera.cell_size)
            camera.y += _trunc_div(camera.y - y, camera.cell_size)
            camera.cell_size += 1
        elif button == BUTTON_SCROLL_DOWN and camera.cell_size > 1:
            camera.x -= _trunc_div(camera.x - x, camera.cell_size)
            camera.y -= _trunc_div(camera.y - y, camera.cell_size)
            camera.cell_size -= 1
        elif button == BUTTON_LEFT:
            self.mouse_cell_edit(x, y, False)
        elif button == BUTTON_RIGHT:
            self.inputs.mouse_press_x = x - camera.x
            self.inputs.mouse_press_y = y - camera.y
        if not 0 <= button < MAX_BUTTONS or button in self.inputs.buttons:
            return
        self.inputs.buttons.add(button)
        logger.debug("MOUSE: %d pressed", button)

    def button_released(self, button: int, x: int, y: int) -> None:
        """Forget a released mouse button."""
        self.inputs.buttons.discard(button)
        logger.debug("MOUSE: %d released", button)

    def mouse_move(self, x: int, y: int) -> None:
        """Pan while the right button is held, otherwise edit while the left is."""
        if BUTTON_RIGHT in self.inputs.buttons:
            self.camera.x = x - self.inputs.mouse_press_x
            self.camera.y = y - self.inputs.mouse_press_y
        elif BUTTON_LEFT in self.inputs.buttons:
            self.mouse_cell_edit(x, y, True)

    def user_input(self) -> None:
        """Step one generation per frame while the space key is held."""
        if KEY_SPACE in self.inputs.keys:
            self.generation_time = next_generation(self.chunks)
            self.generation_count += 1