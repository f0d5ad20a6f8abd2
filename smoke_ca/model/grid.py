"""Grid management for the smoke propagation simulation."""

import numpy as np
from typing import Iterator, List, Optional, Sequence, Union

from .cell import (Cell, CellKind, Direction, classify, pack_rgba,
                   WALL_COLOR, FLOOR_COLOR, ESCAPE_COLOR)

Codes = Union[bytes, bytearray, str, Sequence[int]]

# Integer codes for kind arrays handed to renderers
KIND_CODES = {
    CellKind.WALL: 0,
    CellKind.FLOOR: 1,
    CellKind.EMITTER: 2,
    CellKind.ESCAPE: 3,
}

_INITIAL_COLORS = {
    CellKind.WALL: WALL_COLOR,
    CellKind.FLOOR: FLOOR_COLOR,
    CellKind.ESCAPE: ESCAPE_COLOR,
}


def _as_codes(codes: Codes) -> List[int]:
    if isinstance(codes, str):
        return [ord(c) for c in codes]
    return [int(c) for c in codes]


class Grid:
    """
    Fixed-shape rectangular array of cells plus their render colors.

    Coordinate convention: (row, col) everywhere, row-major storage.
    The codes are assumed to be validated by the caller.
    """

    def __init__(self, width: int, height: int, codes: Codes):
        values = _as_codes(codes)
        if width <= 0 or height <= 0 or len(values) != width * height:
            raise ValueError(
                f"Expected {width}x{height} codes, got {len(values)}"
            )
        self._width = width
        self._height = height

        # Packed 0xRRGGBBAA per cell
        self.pixmap = np.zeros((height, width), dtype=np.uint32)

        self.cells: List[Cell] = []
        for row in range(height):
            for col in range(width):
                kind, cost = classify(values[row * width + col])
                self.cells.append(Cell(row, col, kind, cost))
                self.pixmap[row, col] = _INITIAL_COLORS[kind]

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __len__(self) -> int:
        return len(self.cells)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._height and 0 <= col < self._width

    def _check_bounds(self, row: int, col: int) -> None:
        # Negative indices would wrap on the pixmap
        if not self.in_bounds(row, col):
            raise IndexError(
                f"Cell ({row}, {col}) outside {self._width}x{self._height} grid"
            )

    def cell_at(self, row: int, col: int) -> Optional[Cell]:
        """Return the cell at (row, col), or None when out of range."""
        if not self.in_bounds(row, col):
            return None
        return self.cells[row * self._width + col]

    def neighbor(self, direction: Direction, row: int, col: int) -> Optional[Cell]:
        """Return the adjacent cell in `direction`, or None past the edge."""
        d_row, d_col = direction.value
        return self.cell_at(row + d_row, col + d_col)

    def write_pixel(self, row: int, col: int, r: int, g: int, b: int) -> None:
        """Set an opaque color from explicit channels; IndexError off the grid."""
        self._check_bounds(row, col)
        self.pixmap[row, col] = pack_rgba(r, g, b)

    def write_rgba(self, row: int, col: int, rgba: int) -> None:
        """Set a packed 0xRRGGBBAA color; IndexError off the grid."""
        self._check_bounds(row, col)
        self.pixmap[row, col] = rgba

    def color_at(self, row: int, col: int) -> Optional[int]:
        if not self.in_bounds(row, col):
            return None
        return int(self.pixmap[row, col])

    def kind_at(self, row: int, col: int) -> Optional[CellKind]:
        cell = self.cell_at(row, col)
        return cell.kind if cell is not None else None

    def to_rgba(self) -> np.ndarray:
        """Return an (height, width, 4) uint8 image of the current colors."""
        rgba = np.empty((self._height, self._width, 4), dtype=np.uint8)
        for channel, shift in enumerate((24, 16, 8, 0)):
            rgba[:, :, channel] = (self.pixmap >> shift) & 0xFF
        return rgba

    def densities(self) -> np.ndarray:
        """Return a (height, width) float array of cell densities."""
        values = np.fromiter((c.density for c in self.cells),
                             dtype=np.float64, count=len(self.cells))
        return values.reshape(self._height, self._width)

    def kinds(self) -> np.ndarray:
        """Return a (height, width) array of KIND_CODES values."""
        values = np.fromiter((KIND_CODES[c.kind] for c in self.cells),
                             dtype=np.int8, count=len(self.cells))
        return values.reshape(self._height, self._width)

    def walls(self) -> np.ndarray:
        """Boolean mask: True = wall."""
        return self.kinds() == KIND_CODES[CellKind.WALL]
