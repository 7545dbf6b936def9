"""Conway's Game of Life on an endless chunked grid, with a pygame viewer."""

__version__ = "0.1.0"