# chunklife

Conway's Game of Life on a grid with no edges. The plane is split into 16×16 chunks.
Each chunk stores its cells as a bit field, and the chunks live in a hash table. When a
live cell lies on the edge of a chunk during a generation step, the missing neighbouring
chunk on that side is created. A pattern can therefore grow in any direction.

A pygame window shows the grid. You can pan and zoom the view, draw cells with the mouse
and step the simulation.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Running

```
chunklife
```

This opens a 1280×720 window titled "Game of Life". Chunk (0, 0) holds a small starting
pattern. The command takes no options apart from `--help`.

| Input              | Action                                                              |
|--------------------|---------------------------------------------------------------------|
| Space (held)       | advance one generation every frame                                  |
| `n`                | advance one generation                                              |
| Left click         | toggle the cell under the pointer                                   |
| Left drag          | keep creating or killing cells, whichever the click did             |
| Right drag         | pan the view                                                        |
| Mouse wheel        | zoom in or out; the cell size never drops below 1 pixel             |
| Escape, or closing the window | quit                                                     |

Key autorepeat is turned off while the window has focus and turned back on when the
window loses focus.

Four lines of text sit in the top-left corner:

- the generation count;
- the time the last generation took;
- the time rendering took;
- the total frame time.

## Using it as a library

The simulation works without a display:

```python
from chunklife.chunk import ChunkTable, new_cell, format_chunk
from chunklife.generation import next_generation

table = ChunkTable()
chunk = table.new_chunk(0, 0)
for x, y in [(5, 4), (5, 5), (5, 6)]:   # a blinker
    new_cell(chunk.cells, x, y)

elapsed_us = next_generation(table)      # time taken, in microseconds
print(format_chunk(chunk.cells))
```

- **`chunklife.chunk`** — the chunk structures:
  - `get_cell`, `new_cell` and `kill_cell` work on a chunk's bit field.
  - `ChunkTable` offers `new_chunk`, `get_chunk`, `clear`, iteration and `len`.
- **`chunklife.generation`** — `next_generation`, plus the steps it is built from.
- **`chunklife.state`** — `Game`, which holds the chunk table, a `Camera` and the `Inputs`. `Game` reacts to input through these methods:
  - `key_pressed`, `key_released`
  - `button_pressed`, `button_released`
  - `mouse_move`
  - `focus_in`, `focus_out`
  - `user_input`

  Two optional callbacks, `on_exit` and `on_autorepeat`, let the caller decide what escape and focus changes do.
- **`chunklife.render`** — `render(game, image)` clears an `Image` and draws the visible cells into it. `status_lines` gives the status text.
- **`chunklife.image`** — `Image` is a pixel buffer with `put_pixel`, `get_pixel` and `fill`.
- **`chunklife.display`** — `Connection` owns windows, images, text, per-window event hooks (`chunklife.events.HookTable`) and an event loop.
  - `Connection(headless=True)` shows nothing on screen and takes events only from `post_event`. This makes it usable in tests.
  - `Window.get_pixel` reads back what was drawn on a window.
- **`chunklife.app`** — `App` ties a `Game` to a window. `App.run()` runs the frame loop, and `main()` is the command above.
- **`chunklife.xpm`** — `xpm_file_to_image` and `xpm_to_image` read XPM pixmaps into images.
- **`chunklife.colors`** — colour names and colour strings:
  - `lookup_color` resolves X11 colour names such as `"dark orange"`.
  - `text_rgb` also accepts `"#rrggbb"`.

## Limits

- A world cannot be saved or loaded. Every run starts from the same built-in pattern.
- Chunks are created as patterns grow but never removed, even when all their cells are dead.
- Rendering draws pixel by pixel in Python, so large zoomed-out views are slow.