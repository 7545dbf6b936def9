"""A display connection with windows, images, text and an event loop.

Windows keep their own pixel buffer, so everything drawn can be read back.
Unless the connection is headless, the newest window is also shown on
screen through pygame, and pygame input is turned into window events.
"""

from __future__ import annotations

import os
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from chunklife.colors import good_color, mask_shifts
from chunklife.events import MAX_EVENT, Event, EventMask, EventType, HookTable
from chunklife.image import Image

_ALL_EVENTS = 0xFFFFFF
_FONT_SIZE = 16
_REPEAT_DELAY_MS = 500
_REPEAT_INTERVAL_MS = 33
_POINTER_EVENTS = (
    EventType.BUTTON_PRESS,
    EventType.BUTTON_RELEASE,
    EventType.MOTION_NOTIFY,
)


class DisplayError(RuntimeError):
    """Raised when the display cannot do what was asked."""


@dataclass(frozen=True)
class DrawnString:
    """Text drawn on a window; ``y`` is the baseline, ``color`` a pixel value."""

    x: int
    y: int
    color: int
    text: str
    font: str | None = None


class Window:
    """A window: its hooks, its pixels and the text drawn on it."""

    def __init__(self, width: int, height: int, title: str, *, bits_per_pixel: int = 32) -> None:
        self.width = width
        self.height = height
        self.title = title
        self.hooks = HookTable()
        self.framebuffer = Image(width, height, bits_per_pixel=bits_per_pixel)
        self.strings: list[DrawnString] = []
        self.font: str | None = None
        self.cursor_visible = True
        self.pointer: tuple[int, int] = (0, 0)
        self.selected_mask = _ALL_EVENTS

    def __repr__(self) -> str:
        return f"Window({self.width}x{self.height}, title={self.title!r})"

    def get_pixel(self, x: int, y: int) -> int:
        """Return the pixel value shown at (x, y)."""
        return self.framebuffer.get_pixel(x, y)


class _PygameBackend:
    """Shows one window on screen and reads its input through pygame."""

    def __init__(self) -> None:
        os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
        import pygame

        self._pg = pygame
        try:
            pygame.display.init()
            pygame.font.init()
        except pygame.error as exc:
            raise DisplayError(f"cannot open display: {exc}") from exc
        self._surface: Any = None
        self._fonts: dict[str | None, Any] = {}
        self._keymap = {
            pygame.K_ESCAPE: 0xFF1B,
            pygame.K_RETURN: 0xFF0D,
            pygame.K_BACKSPACE: 0xFF08,
            pygame.K_TAB: 0xFF09,
            pygame.K_DELETE: 0xFFFF,
            pygame.K_LEFT: 0xFF51,
            pygame.K_UP: 0xFF52,
            pygame.K_RIGHT: 0xFF53,
            pygame.K_DOWN: 0xFF54,
            pygame.K_LSHIFT: 0xFFE1,
            pygame.K_RSHIFT: 0xFFE2,
            pygame.K_LCTRL: 0xFFE3,
            pygame.K_RCTRL: 0xFFE4,
        }

    def open(self, window: Window) -> None:
        pg = self._pg
        try:
            self._surface = pg.display.set_mode((window.width, window.height))
        except pg.error as exc:
            raise DisplayError(f"cannot create window: {exc}") from exc
        pg.display.set_caption(window.title)

    def close_window(self) -> None:
        self._surface = None
        self._pg.display.quit()

    def quit(self) -> None:
        self._surface = None
        self._pg.quit()

    def _font(self, name: str | None) -> Any:
        if name not in self._fonts:
            pg = self._pg
            if name is None:
                self._fonts[name] = pg.font.Font(None, _FONT_SIZE)
            else:
                self._fonts[name] = pg.font.SysFont(name, _FONT_SIZE)
        return self._fonts[name]

    def present(
        self,
        size: tuple[int, int],
        rgb: bytes,
        strings: list[tuple[int, int, tuple[int, int, int], str, str | None]],
    ) -> None:
        if self._surface is None:
            return
        pg = self._pg
        self._surface.blit(pg.image.frombuffer(rgb, size, "RGB"), (0, 0))
        for x, y, color, text, font_name in strings:
            font = self._font(font_name)
            self._surface.blit(font.render(text, True, color), (x, y - font.get_ascent()))
        pg.display.flip()

    def _keysym(self, key: int) -> int:
        return self._keymap.get(key, key)

    def _translate(self, ev: Any) -> Event | None:
        pg = self._pg
        kind = ev.type
        if kind == pg.QUIT:
            return Event(EventType.CLIENT_MESSAGE)
        if kind == pg.KEYDOWN:
            return Event(EventType.KEY_PRESS, keysym=self._keysym(ev.key))
        if kind == pg.KEYUP:
            return Event(EventType.KEY_RELEASE, keysym=self._keysym(ev.key))
        if kind == pg.MOUSEBUTTONDOWN:
            return Event(EventType.BUTTON_PRESS, button=ev.button, x=ev.pos[0], y=ev.pos[1])
        if kind == pg.MOUSEBUTTONUP:
            return Event(EventType.BUTTON_RELEASE, button=ev.button, x=ev.pos[0], y=ev.pos[1])
        if kind == pg.MOUSEMOTION:
            return Event(EventType.MOTION_NOTIFY, x=ev.pos[0], y=ev.pos[1])
        if kind == pg.WINDOWFOCUSGAINED:
            return Event(EventType.FOCUS_IN)
        if kind == pg.WINDOWFOCUSLOST:
            return Event(EventType.FOCUS_OUT)
        if kind in (pg.WINDOWEXPOSED, pg.VIDEOEXPOSE):
            return Event(EventType.EXPOSE)
        if kind == pg.WINDOWENTER:
            return Event(EventType.ENTER_NOTIFY)
        if kind == pg.WINDOWLEAVE:
            return Event(EventType.LEAVE_NOTIFY)
        return None

    def events(self, block: bool) -> list[Event]:
        pg = self._pg
        if self._surface is None:
            return []
        raw = [pg.event.wait()] if block else []
        raw.extend(pg.event.get())
        return [event for event in map(self._translate, raw) if event is not None]

    def clear_events(self) -> None:
        if self._surface is not None:
            self._pg.event.clear()

    def set_autorepeat(self, on: bool) -> None:
        if on:
            self._pg.key.set_repeat(_REPEAT_DELAY_MS, _REPEAT_INTERVAL_MS)
        else:
            self._pg.key.set_repeat()

    def warp(self, x: int, y: int) -> None:
        if self._surface is not None:
            self._pg.mouse.set_pos((x, y))

    def set_cursor_visible(self, visible: bool) -> None:
        if self._surface is not None:
            self._pg.mouse.set_visible(visible)

    def pointer(self) -> tuple[int, int]:
        x, y = self._pg.mouse.get_pos()
        return x, y

    def screen_size(self) -> tuple[int, int] | None:
        sizes = self._pg.display.get_desktop_sizes()
        return tuple(sizes[0]) if sizes else None


class Connection:
    """A connection to a display, owning its windows and the event queue.

    With ``headless=True`` nothing is shown on screen; events come only from
    :meth:`post_event`.  The colour masks describe the visual: they must be
    contiguous bit masks, as for a TrueColor visual.
    """

    def __init__(
        self,
        *,
        headless: bool = False,
        depth: int = 24,
        red_mask: int = 0xFF0000,
        green_mask: int = 0x00FF00,
        blue_mask: int = 0x0000FF,
        screen_size: tuple[int, int] = (1920, 1080),
    ) -> None:
        try:
            self.shifts = mask_shifts(red_mask, green_mask, blue_mask)
        except ValueError as exc:
            raise DisplayError("no TrueColor visual available") from exc
        self.depth = depth
        self.windows: list[Window] = []
        self.do_flush = True
        self.end_loop = False
        self.autorepeat = True
        self._screen_size = screen_size
        self._queue: deque[tuple[Window, Event]] = deque()
        self._loop_hook: Callable[..., Any] | None = None
        self._loop_param: Any = None
        self._closed = False
        self._backend = None if headless else _PygameBackend()
        if self._backend is not None:
            self._backend.set_autorepeat(True)

    @property
    def bits_per_pixel(self) -> int:
        """Bits per pixel of images made for this visual."""
        return 32 if self.depth > 16 else 16

    def _check_open(self) -> None:
        if self._closed:
            raise DisplayError("display connection is closed")

    def _check_window(self, window: Window) -> None:
        self._check_open()
        if window not in self.windows:
            raise DisplayError(f"{window!r} does not belong to this connection")

    def _shown(self) -> Window | None:
        return self.windows[0] if self.windows else None

    def _pixel_rgb(self, value: int) -> tuple[int, int, int]:
        if self.depth >= 24:
            return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF
        channels = []
        for offset, width in zip(self.shifts[0::2], self.shifts[1::2]):
            top = (1 << width) - 1
            channels.append(((value >> offset) & top) * 255 // top)
        return channels[0], channels[1], channels[2]

    def _window_rgb(self, window: Window) -> bytes:
        fb = window.framebuffer
        if (
            self.depth >= 24
            and fb.bits_per_pixel == 32
            and fb.endian == 0
            and fb.size_line == fb.width * 4
        ):
            rgb = bytearray(fb.width * fb.height * 3)
            rgb[0::3] = fb.data[2::4]
            rgb[1::3] = fb.data[1::4]
            rgb[2::3] = fb.data[0::4]
            return bytes(rgb)
        return b"".join(
            bytes(self._pixel_rgb(fb.get_pixel(x, y)))
            for y in range(fb.height)
            for x in range(fb.width)
        )

    def _present(self) -> None:
        window = self._shown()
        if self._backend is None or window is None:
            return
        strings = [
            (s.x, s.y, self._pixel_rgb(s.color), s.text, s.font) for s in window.strings
        ]
        self._backend.present((window.width, window.height), self._window_rgb(window), strings)

    def _flush(self) -> None:
        if self.do_flush:
            self._present()

    def _enqueue(self, window: Window, event: Event) -> None:
        if event.type in _POINTER_EVENTS:
            window.pointer = (event.x, event.y)
        self._queue.append((window, event))

    def _pull(self, block: bool) -> None:
        window = self._shown()
        if self._backend is None or window is None:
            return
        for event in self._backend.events(block):
            self._enqueue(window, event)

    def _pending(self) -> bool:
        self._pull(block=False)
        return bool(self._queue)

    def _next_event(self, block: bool) -> tuple[Window, Event] | None:
        while not self._queue and block and self._backend is not None and self.windows:
            self._pull(block=True)
        return self._queue.popleft() if self._queue else None

    def _deliver(self, window: Window, event: Event) -> None:
        if window not in self.windows:
            return
        if event.type == EventType.CLIENT_MESSAGE:
            destroy = window.hooks.get(EventType.DESTROY_NOTIFY)
            if destroy is not None and destroy.func is not None:
                destroy.func(destroy.param)
            if window not in self.windows:
                return
        if int(event.type) < MAX_EVENT:
            window.hooks.dispatch(event)

    def new_window(self, width: int, height: int, title: str) -> Window:
        """Open a black window of the given size; an expose event is queued for it."""
        self._check_open()
        if width <= 0 or height <= 0:
            raise DisplayError(f"window size must be positive, got {width}x{height}")
        window = Window(width, height, title, bits_per_pixel=self.bits_per_pixel)
        self.windows.insert(0, window)
        if self._backend is not None:
            self._backend.open(window)
        self._queue.append((window, Event(EventType.EXPOSE)))
        return window

    def destroy_window(self, window: Window) -> None:
        """Close a window and forget its hooks."""
        self._check_window(window)
        was_shown = self._shown() is window
        self.windows.remove(window)
        if self._backend is not None and was_shown:
            if self.windows:
                self._backend.open(self.windows[0])
            else:
                self._backend.close_window()
        self._flush()

    def new_image(self, width: int, height: int) -> Image:
        """Create a black image in the pixel format of this display."""
        self._check_open()
        try:
            return Image(width, height, bits_per_pixel=self.bits_per_pixel)
        except ValueError as exc:
            raise DisplayError(str(exc)) from exc

    def put_image_to_window(self, window: Window, image: Image, x: int, y: int) -> None:
        """Copy an image onto a window at (x, y), clipped to the window."""
        self._check_window(window)
        fb = window.framebuffer
        x0, x1 = max(0, x), min(window.width, x + image.width)
        y0, y1 = max(0, y), min(window.height, y + image.height)
        if x0 < x1 and y0 < y1:
            if image.bits_per_pixel == fb.bits_per_pixel and image.endian == fb.endian:
                size = fb.bytes_per_pixel
                count = (x1 - x0) * size
                for row in range(y0, y1):
                    src = (row - y) * image.size_line + (x0 - x) * size
                    dst = row * fb.size_line + x0 * size
                    fb.data[dst:dst + count] = image.data[src:src + count]
            else:
                for row in range(y0, y1):
                    for col in range(x0, x1):
                        fb.put_pixel(col, row, image.get_pixel(col - x, row - y))
        window.strings = [
            s for s in window.strings
            if not (x <= s.x < x + image.width and y <= s.y < y + image.height)
        ]
        self._flush()

    def pixel_put(self, window: Window, x: int, y: int, color: int) -> None:
        """Draw one pixel of a 0xRRGGBB colour; points outside the window are ignored."""
        self._check_window(window)
        window.framebuffer.put_pixel(x, y, self.get_color_value(color))
        self._flush()

    def string_put(self, window: Window, x: int, y: int, color: int, text: str) -> None:
        """Draw text with its baseline at (x, y) in the window's font."""
        self._check_window(window)
        window.strings.append(
            DrawnString(x, y, self.get_color_value(color), text, window.font)
        )
        self._flush()

    def set_font(self, window: Window, name: str) -> None:
        """Choose the font used by later :meth:`string_put` calls on the window."""
        self._check_window(window)
        window.font = name

    def clear_window(self, window: Window) -> None:
        """Paint the window black and remove its text."""
        self._check_window(window)
        window.framebuffer.fill(0)
        window.strings.clear()
        self._flush()

    def get_color_value(self, color: int) -> int:
        """Convert a 0xRRGGBB colour to a pixel value for this display."""
        return good_color(color, self.depth, self.shifts)

    def loop_hook(self, func: Callable[..., Any] | None, param: Any = None) -> None:
        """Call ``func(param)`` once per loop iteration, after pending events."""
        self._loop_hook = func
        self._loop_param = param

    def loop(self) -> None:
        """Dispatch events to window hooks until no window is left or the loop ends.

        Without a loop hook, a headless connection returns once its queue is empty.
        """
        self._check_open()
        for window in self.windows:
            window.selected_mask = int(window.hooks.event_mask())
        self.do_flush = False
        while self.windows and not self.end_loop:
            while not self.end_loop and (self._loop_hook is None or self._pending()):
                item = self._next_event(block=self._loop_hook is None)
                if item is None:
                    return
                self._deliver(*item)
            self.sync()
            if self._loop_hook is not None:
                self._loop_hook(self._loop_param)

    def loop_end(self) -> None:
        """Make :meth:`loop` return."""
        self.end_loop = True

    def post_event(self, window: Window, event: Event) -> None:
        """Queue an event for a window.

        A CLIENT_MESSAGE event stands for the window manager asking the
        window to close: the DESTROY_NOTIFY hook is called for it.
        """
        self._check_window(window)
        self._enqueue(window, event)

    def flush_events(self) -> None:
        """Drop every pending event."""
        self._check_open()
        if self._backend is not None:
            self._backend.clear_events()
        self._queue.clear()

    def autorepeat_off(self) -> None:
        """Stop repeating key events while a key is held."""
        self._check_open()
        self.autorepeat = False
        if self._backend is not None:
            self._backend.set_autorepeat(False)

    def autorepeat_on(self) -> None:
        """Repeat key events while a key is held."""
        self._check_open()
        self.autorepeat = True
        if self._backend is not None:
            self._backend.set_autorepeat(True)

    def sync(self) -> None:
        """Bring the screen up to date with everything drawn so far."""
        self._check_open()
        self._present()

    def screen_size(self) -> tuple[int, int]:
        """Return the size of the screen in pixels."""
        self._check_open()
        if self._backend is not None:
            size = self._backend.screen_size()
            if size is not None:
                return size
        return self._screen_size

    def mouse_move(self, window: Window, x: int, y: int) -> None:
        """Move the pointer to (x, y) in the window."""
        self._check_window(window)
        window.pointer = (x, y)
        if self._backend is not None and self._shown() is window:
            self._backend.warp(x, y)

    def mouse_hide(self, window: Window) -> None:
        """Hide the pointer over the window."""
        self._check_window(window)
        window.cursor_visible = False
        if self._backend is not None and self._shown() is window:
            self._backend.set_cursor_visible(False)

    def mouse_show(self, window: Window) -> None:
        """Show the pointer over the window again."""
        self._check_window(window)
        window.cursor_visible = True
        if self._backend is not None and self._shown() is window:
            self._backend.set_cursor_visible(True)

    def mouse_get_pos(self, window: Window) -> tuple[int, int]:
        """Return the pointer position relative to the window."""
        self._check_window(window)
        if self._backend is not None and self._shown() is window:
            window.pointer = self._backend.pointer()
        return window.pointer

    def close(self) -> None:
        """Close every window and the connection; closing twice does nothing."""
        if self._closed:
            return
        self.windows.clear()
        self._queue.clear()
        if self._backend is not None:
            self._backend.quit()
        self._closed = True

    def __enter__(self) -> Connection:
        self._check_open()
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()


__all__ = [
    "Connection",
    "DisplayError",
    "DrawnString",
    "EventMask",
    "Window",
]