"""Reading XPM pixmaps into images."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from os import PathLike
from pathlib import Path

from chunklife.colors import text_rgb
from chunklife.image import Image

_TRANSPARENT = 0xFF000000
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_WORD_SEPARATORS = re.compile(r"[ \t]+")


class XpmError(ValueError):
    """Raised when XPM data cannot be read."""


def _until_nul(text: str) -> str:
    return text.split("\0", 1)[0]


def find_substring(text: str, find: str, length: int) -> int:
    """Return the position of ``find`` in ``text``, or -1.

    -1 is also returned when ``find`` is longer than ``length``.
    """
    if not find:
        raise ValueError("search string must not be empty")
    if len(find) > length:
        return -1
    return _until_nul(text).find(find)


def find_unquoted(text: str, find: str, length: int) -> int:
    """Like :func:`find_substring`, but skip matches inside double quotes."""
    if not find:
        raise ValueError("search string must not be empty")
    if len(find) > length:
        return -1
    text = _until_nul(text)
    quoted = False
    for pos in range(len(text) - len(find) + 1):
        if text[pos] == '"':
            quoted = not quoted
        if not quoted and text.startswith(find, pos):
            return pos
    return -1


def split_words(text: str) -> list[str]:
    """Split on spaces and tabs, dropping empty words."""
    return [word for word in _WORD_SEPARATORS.split(text) if word]


def strip_comments(text: str) -> str:
    """Blank out ``/* */`` and ``//`` comments outside quoted strings."""
    chars = list(text)
    size = len(chars)

    def blank(begin: int, count: int) -> None:
        end = min(size, begin + count)
        chars[begin:end] = " " * max(0, end - begin)

    while (begin := find_unquoted("".join(chars), "/*", size)) != -1:
        end = find_substring("".join(chars[begin + 2:]), "*/", size - begin - 2)
        blank(begin, end + 4)
    while (begin := find_unquoted("".join(chars), "//", size)) != -1:
        end = find_substring("".join(chars[begin + 2:]), "\n", size - begin - 2)
        blank(begin, end + 3)
    return "".join(chars)


def quoted_lines(text: str) -> Iterator[str]:
    """Yield the contents of successive double-quoted strings."""
    pos = 0
    size = len(text)
    while True:
        start = find_substring(text[pos:], '"', size - pos)
        if start == -1:
            return
        body = pos + start + 1
        end = find_substring(text[body:], '"', size - body)
        if end == -1:
            return
        yield text[body:body + end]
        pos += start + end + 2


def color_key(text: str, cpp: int) -> int:
    """Pack the first ``cpp`` characters of ``text`` into an integer key."""
    result = 0
    for char in text[:cpp].ljust(cpp, "\0"):
        result = (result << 8) + ord(char)
    return result


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _next_line(rows: Iterator[str]) -> str:
    line = next(rows, None)
    if line is None:
        raise XpmError("unexpected end of XPM data")
    return line


def parse_xpm(lines: Iterable[str]) -> Image:
    """Build an image from the strings of an XPM: header, colours, then rows."""
    rows = iter(lines)
    words = split_words(_next_line(rows))
    if len(words) < 4:
        raise XpmError("XPM header needs width, height, colours and chars per pixel")
    width, height, ncolors, cpp = (_atoi(word) for word in words[:4])
    if min(width, height, ncolors, cpp) <= 0:
        raise XpmError(f"invalid XPM header: {' '.join(words[:4])}")

    keep_last = cpp <= 2
    palette: dict[int, int] = {}
    for _ in range(ncolors):
        line = _next_line(rows)
        spec = split_words(line[cpp:])
        if "c" not in spec:
            raise XpmError(f"colour line without a 'c' key: {line!r}")
        index = spec.index("c") + 1
        if index >= len(spec):
            raise XpmError(f"colour line without a colour: {line!r}")
        following = spec[index + 1] if index + 1 < len(spec) else None
        rgb = text_rgb(spec[index], following)
        key = color_key(line, cpp)
        if keep_last or key not in palette:
            palette[key] = rgb

    try:
        image = Image(width, height)
    except ValueError as exc:
        raise XpmError(str(exc)) from exc

    for y in range(height):
        line = _next_line(rows)
        for x in range(width):
            color = palette.get(color_key(line[cpp * x:], cpp), 0)
            if color == -1:
                color = _TRANSPARENT
            image.set_pixel_bytes(x, y, color)
    return image


def xpm_to_image(lines: Iterable[str]) -> Image:
    """Build an image from XPM data given as its list of strings."""
    return parse_xpm(lines)


def xpm_file_to_image(path: str | PathLike[str]) -> Image:
    """Read an XPM file and build an image from it."""
    try:
        text = Path(path).read_text(encoding="latin-1")
    except OSError as exc:
        raise XpmError(f"cannot read {path}: {exc}") from exc
    return parse_xpm(quoted_lines(strip_comments(text)))