"""ASCII layout loader for the smoke propagation simulation.

Each line is one grid row. Valid symbols:
    /      wall
    0-9    floor (height)
    :      escape opening
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

MIN_CODE = ord('/')
MAX_CODE = ord(':')
MAX_SIDE = 512


class LayoutError(ValueError):
    """Layout text rejected by the loader."""


@dataclass(frozen=True)
class Layout:
    rows: int
    cols: int
    data: bytes  # Row-major codes, rows * cols long

    @property
    def width(self) -> int:
        return self.cols

    @property
    def height(self) -> int:
        return self.rows


def parse_layout(text: Union[str, bytes]) -> Layout:
    """Validate layout text (or raw file bytes) and return its code buffer."""
    if isinstance(text, str):
        lines = [[ord(char) for char in line] for line in text.splitlines()]
    else:
        lines = [list(line) for line in text.splitlines()]

    cols = 0
    buffer = bytearray()
    for row, line in enumerate(lines, start=1):
        for col, code in enumerate(line):
            if not MIN_CODE <= code <= MAX_CODE:
                raise LayoutError(
                    f"Invalid character {chr(code)!r} ({code}) "
                    f"detected at {row}, {col}."
                )
        if row > 1 and len(line) != cols:
            raise LayoutError("Each row must have the same number of columns.")
        cols = len(line)
        buffer.extend(line)

    rows = len(lines)
    if rows == 0 or cols == 0:
        raise LayoutError("The layout must not be empty.")
    if rows > MAX_SIDE or cols > MAX_SIDE:
        raise LayoutError(
            f"The layout must not exceed a size of {MAX_SIDE}x{MAX_SIDE} cells."
        )
    return Layout(rows=rows, cols=cols, data=bytes(buffer))


def load_layout(path: Union[str, Path]) -> Layout:
    """Read and validate a layout file byte by byte."""
    with open(path, 'rb') as f:
        return parse_layout(f.read())
