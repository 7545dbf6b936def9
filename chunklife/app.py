"""The Game of Life application: a window, its event hooks and the frame loop."""

from __future__ import annotations

import argparse
import time
from collections.abc import Sequence

from chunklife.chunk import new_cell
from chunklife.display import Connection
from chunklife.events import EventMask, EventType
from chunklife.render import render, status_lines
from chunklife.state import WIN_H, WIN_W, Game

TITLE = "Game of Life"
TEXT_COLOR = 0xFFFFFF
_FRAME_TIME_POS = (20, 80)
_SEED_CELLS = ((10, 10), (10, 11), (10, 12), (11, 12), (9, 11))


def seed_game() -> Game:
    """Return a game with one chunk at the origin holding the starting pattern."""
    game = Game()
    chunk = game.chunks.new_chunk(0, 0)
    for x, y in _SEED_CELLS:
        new_cell(chunk.cells, x, y)
    return game


def frame_time_line(frame_time: int) -> str:
    """Format a frame time given in microseconds."""
    return f"Total Frame Time: {frame_time / 1000:.3f}ms"


class App:
    """Runs a game in a window until it is closed or escape is pressed."""

    def __init__(self, connection: Connection | None = None, game: Game | None = None) -> None:
        self.connection = connection if connection is not None else Connection()
        self.game = game if game is not None else seed_game()
        self.window = self.connection.new_window(WIN_W, WIN_H, TITLE)
        self.image = self.connection.new_image(WIN_W, WIN_H)
        self.game.on_exit = self._request_exit
        self.game.on_autorepeat = self._set_autorepeat
        self._closed = False
        self._last_frame = time.perf_counter_ns()
        self._install_hooks()

    def _install_hooks(self) -> None:
        game = self.game
        hooks = self.window.hooks
        hooks.hook(EventType.FOCUS_IN, EventMask.FOCUS_CHANGE, lambda _: game.focus_in())
        hooks.hook(EventType.FOCUS_OUT, EventMask.FOCUS_CHANGE, lambda _: game.focus_out())
        hooks.hook(EventType.DESTROY_NOTIFY, EventMask.NO_EVENT, lambda _: self._request_exit())
        hooks.hook(
            EventType.KEY_PRESS, EventMask.KEY_PRESS, lambda key, _: game.key_pressed(key)
        )
        hooks.hook(
            EventType.KEY_RELEASE, EventMask.KEY_RELEASE, lambda key, _: game.key_released(key)
        )
        hooks.hook(
            EventType.BUTTON_PRESS,
            EventMask.BUTTON_PRESS,
            lambda button, x, y, _: game.button_pressed(button, x, y),
        )
        hooks.hook(
            EventType.BUTTON_RELEASE,
            EventMask.BUTTON_RELEASE,
            lambda button, x, y, _: game.button_released(button, x, y),
        )
        hooks.hook(
            EventType.MOTION_NOTIFY,
            EventMask.POINTER_MOTION,
            lambda x, y, _: game.mouse_move(x, y),
        )

    def _request_exit(self) -> None:
        self.connection.loop_end()

    def _set_autorepeat(self, on: bool) -> None:
        if on:
            self.connection.autorepeat_on()
        else:
            self.connection.autorepeat_off()

    def frame(self) -> int:
        """Handle held keys, draw the world and the status text.

        Returns the time since the previous frame in microseconds.
        """
        self.game.user_input()
        render_time = render(self.game, self.image)
        self.connection.put_image_to_window(self.window, self.image, 0, 0)
        for x, y, text in status_lines(self.game, render_time):
            self.connection.string_put(self.window, x, y, TEXT_COLOR, text)
        now = time.perf_counter_ns()
        frame_time = (now - self._last_frame) // 1000
        self.connection.string_put(
            self.window, *_FRAME_TIME_POS, TEXT_COLOR, frame_time_line(frame_time)
        )
        self._last_frame = now
        return frame_time

    def close(self) -> None:
        """Restore key autorepeat, destroy the window and close the display."""
        if self._closed:
            return
        self._closed = True
        self.connection.autorepeat_on()
        if self.window in self.connection.windows:
            self.connection.destroy_window(self.window)
        self.connection.close()

    def run(self) -> None:
        """Run the frame loop until exit is requested, then close."""
        self._last_frame = time.perf_counter_ns()
        self.connection.loop_hook(lambda _: self.frame())
        try:
            self.connection.loop()
        finally:
            self.close()


def main(argv: Sequence[str] | None = None) -> int:
    """Open the Game of Life window and run it."""
    parser = argparse.ArgumentParser(
        prog="chunklife",
        description=(
            "Conway's Game of Life on an endless grid. Space runs generations, "
            "n steps one, left click edits cells, right drag pans, the wheel zooms."
        ),
    )
    parser.parse_args(argv)
    App().run()
    return 0