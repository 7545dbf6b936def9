import random

import pytest

from chunklife.display import Connection, DisplayError, DrawnString
from chunklife.events import Event, EventMask, EventType

WIN1_SX = 242
WIN1_SY = 242


@pytest.fixture
def conn():
    connection = Connection(headless=True)
    yield connection
    connection.close()


def _map_color(x, y, w, h):
    return (x * 255) // w + ((((w - x) * 255) // w) << 16) + (((y * 255) // h) << 8)


def test_color_map_on_window(conn):
    win = conn.new_window(WIN1_SX, WIN1_SY, "Title1")
    for x in range(WIN1_SX):
        for y in range(WIN1_SY):
            conn.pixel_put(win, x, y, _map_color(x, y, WIN1_SX, WIN1_SY))
    assert win.get_pixel(0, 0) == 0xFF0000
    assert win.get_pixel(241, 241) == 0x01FDFD
    assert win.get_pixel(100, 50) == _map_color(100, 50, WIN1_SX, WIN1_SY)


def test_clear_window(conn):
    win = conn.new_window(WIN1_SX, WIN1_SY, "Title1")
    conn.pixel_put(win, 5, 5, 0xFFFFFF)
    conn.string_put(win, 5, 121, 0xFF99FF, "String output")
    conn.clear_window(win)
    assert not any(win.framebuffer.data)
    assert win.strings == []


def test_new_image_layout(conn):
    image = conn.new_image(42, 42)
    assert (image.bits_per_pixel, image.size_line, image.endian) == (32, 168, 0)
    assert not any(image.data)


def test_put_image_is_clipped(conn):
    win = conn.new_window(WIN1_SX, WIN1_SY, "Title1")
    image = conn.new_image(42, 42)
    image.fill(0x123456)
    conn.put_image_to_window(win, image, 220, 220)
    assert win.get_pixel(241, 241) == 0x123456
    assert win.get_pixel(220, 220) == 0x123456
    assert win.get_pixel(219, 219) == 0


def test_put_image_at_offset(conn):
    win = conn.new_window(WIN1_SX, WIN1_SY, "Title1")
    image = conn.new_image(42, 42)
    image.put_pixel(0, 0, 0xABCDEF)
    conn.put_image_to_window(win, image, 20, 20)
    assert win.get_pixel(20, 20) == 0xABCDEF
    assert win.get_pixel(21, 20) == 0


def test_string_put_and_cover(conn):
    win = conn.new_window(WIN1_SX, WIN1_SY, "Title1")
    conn.set_font(win, "fixed")
    conn.string_put(win, 5, 121, 0xFF99FF, "String output")
    conn.string_put(win, 15, 141, 0x00FFFF, "MinilibX test")
    assert win.strings[0] == DrawnString(5, 121, 0xFF99FF, "String output", "fixed")
    image = conn.new_image(20, 20)
    conn.put_image_to_window(win, image, 0, 110)
    assert [s.text for s in win.strings] == ["MinilibX test"]


def test_color_value_depth_16():
    with Connection(headless=True, depth=16, red_mask=0xF800,
                    green_mask=0x07E0, blue_mask=0x001F) as conn:
        assert conn.get_color_value(0xFFFFFF) == 0xFFFF
        assert conn.get_color_value(0xFF0000) == 0xF800
        win = conn.new_window(10, 10, "t")
        conn.pixel_put(win, 1, 1, 0x00FF00)
        assert win.get_pixel(1, 1) == 0x07E0
        assert conn.new_image(4, 4).bits_per_pixel == 16


def test_color_value_depth_24(conn):
    assert conn.get_color_value(0x123456) == 0x123456


def test_pixel_put_outside_is_ignored(conn):
    win = conn.new_window(10, 10, "t")
    conn.pixel_put(win, -1, 3, 0xFFFFFF)
    conn.pixel_put(win, 10, 3, 0xFFFFFF)
    assert [win.get_pixel(x, 3) for x in range(10)] == [0] * 10
    assert [win.get_pixel(x, 4) for x in range(10)] == [0] * 10
    assert not any(win.framebuffer.data)


def test_bad_visual_raises():
    with pytest.raises(DisplayError):
        Connection(headless=True, red_mask=0)


def test_bad_sizes_raise(conn):
    with pytest.raises(DisplayError):
        conn.new_window(0, 10, "t")
    with pytest.raises(DisplayError):
        conn.new_image(10, -1)


def test_new_win_replaced_from_mouse_hook(conn):
    rng = random.Random(0)
    state = {}

    def gere_mouse(button, x, y, param):
        conn.destroy_window(state["win1"])
        state["win1"] = conn.new_window(rng.randrange(1, 500), rng.randrange(1, 500), "new win")
        state["win1"].hooks.mouse_hook(gere_mouse, None)
        state["calls"] = state.get("calls", 0) + 1

    win1 = conn.new_window(300, 300, "win1")
    win2 = conn.new_window(600, 600, "win2")
    state["win1"] = win1
    win1.hooks.mouse_hook(gere_mouse, None)
    win2.hooks.mouse_hook(gere_mouse, None)
    conn.post_event(win1, Event(EventType.BUTTON_PRESS, button=1, x=3, y=4))
    conn.loop()
    assert state["calls"] == 1
    assert len(conn.windows) == 2
    assert win1 not in conn.windows
    assert state["win1"].title == "new win"


def test_hooks_receive_event_arguments(conn):
    win = conn.new_window(50, 50, "t")
    seen = []
    win.hooks.hook(EventType.KEY_PRESS, EventMask.KEY_PRESS,
                   lambda k, p: seen.append(("key", k, p)), "P")
    win.hooks.mouse_hook(lambda b, x, y, p: seen.append(("button", b, x, y)), None)
    win.hooks.hook(EventType.MOTION_NOTIFY, EventMask.POINTER_MOTION,
                   lambda x, y, p: seen.append(("motion", x, y)), None)
    conn.post_event(win, Event(EventType.KEY_PRESS, keysym=0xFF1B))
    conn.post_event(win, Event(EventType.BUTTON_PRESS, button=3, x=7, y=8))
    conn.post_event(win, Event(EventType.MOTION_NOTIFY, x=9, y=10))
    conn.loop()
    assert seen == [("key", 0xFF1B, "P"), ("button", 3, 7, 8), ("motion", 9, 10)]
    assert win.pointer == (9, 10)


def test_first_expose_reaches_hook(conn):
    win = conn.new_window(50, 50, "t")
    exposed = []
    win.hooks.expose_hook(lambda p: exposed.append(p), "win")
    conn.loop()
    assert exposed == ["win"]


def test_close_request_calls_destroy_hook(conn):
    win = conn.new_window(50, 50, "t")
    closed = []
    win.hooks.hook(EventType.DESTROY_NOTIFY, EventMask.NO_EVENT, lambda p: closed.append(p), 1)
    conn.post_event(win, Event(EventType.CLIENT_MESSAGE))
    conn.loop()
    assert closed == [1]


def test_loop_hook_until_loop_end(conn):
    conn.new_window(10, 10, "t")
    count = []

    def frame(param):
        count.append(param)
        if len(count) == 3:
            conn.loop_end()

    conn.loop_hook(frame, "data")
    conn.loop()
    assert count == ["data", "data", "data"]
    assert conn.end_loop is True


def test_loop_without_windows_returns(conn):
    calls = []
    conn.loop_hook(lambda p: calls.append(p), None)
    conn.loop()
    assert calls == []


def test_events_for_destroyed_window_are_skipped(conn):
    win = conn.new_window(10, 10, "t")
    keys = []
    win.hooks.key_hook(lambda k, p: keys.append(k), None)
    conn.post_event(win, Event(EventType.KEY_RELEASE, keysym=65))
    conn.destroy_window(win)
    conn.loop()
    assert keys == []


def test_flush_events_drops_queue(conn):
    win = conn.new_window(10, 10, "t")
    keys = []
    win.hooks.key_hook(lambda k, p: keys.append(k), None)
    conn.post_event(win, Event(EventType.KEY_RELEASE, keysym=65))
    conn.flush_events()
    conn.loop()
    assert keys == []


def test_selected_mask_set_by_loop(conn):
    win = conn.new_window(10, 10, "t")
    assert win.selected_mask == 0xFFFFFF
    win.hooks.key_hook(lambda k, p: None, None)
    win.hooks.mouse_hook(lambda b, x, y, p: None, None)
    conn.loop()
    assert win.selected_mask == EventMask.KEY_RELEASE | EventMask.BUTTON_PRESS


def test_destroy_unknown_window_raises(conn):
    other = Connection(headless=True)
    win = other.new_window(10, 10, "t")
    with pytest.raises(DisplayError):
        conn.destroy_window(win)
    other.close()


def test_closed_connection_raises():
    with Connection(headless=True) as conn:
        conn.new_window(10, 10, "t")
    assert conn.windows == []
    with pytest.raises(DisplayError):
        conn.new_window(10, 10, "t")


def test_mouse_functions(conn):
    win = conn.new_window(100, 100, "t")
    conn.mouse_move(win, 10, 20)
    assert conn.mouse_get_pos(win) == (10, 20)
    conn.mouse_hide(win)
    assert win.cursor_visible is False
    conn.mouse_show(win)
    assert win.cursor_visible is True


def test_screen_size_and_autorepeat():
    with Connection(headless=True, screen_size=(800, 600)) as conn:
        assert conn.screen_size() == (800, 600)
        conn.autorepeat_off()
        assert conn.autorepeat is False
        conn.autorepeat_on()
        assert conn.autorepeat is True


def test_window_get_pixel_out_of_range(conn):
    win = conn.new_window(10, 10, "t")
    with pytest.raises(IndexError):
        win.get_pixel(10, 0)