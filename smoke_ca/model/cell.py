"""Cell types and colors for the smoke propagation grid."""

from enum import Enum
from typing import Tuple


class CellKind(Enum):
    """Closed set of cell kinds."""
    WALL = "wall"
    FLOOR = "floor"
    EMITTER = "emitter"
    ESCAPE = "escape"


class Direction(Enum):
    """Cardinal directions as (row, col) offsets."""
    NORTH = (-1, 0)
    SOUTH = (1, 0)
    WEST = (0, -1)
    EAST = (0, 1)


# Scan order of neighbors during weighting and updates
DIRECTIONS: Tuple[Direction, ...] = (
    Direction.NORTH, Direction.SOUTH, Direction.WEST, Direction.EAST
)

# Layout symbols '/' .. ':' map onto costs -1 .. 10
CODE_OFFSET = 0x30
WALL_COST = -1
ESCAPE_COST = 10

# Packed 0xRRGGBBAA colors
WALL_COLOR = 0x4D5D53FF     # Seal gray
FLOOR_COLOR = 0xFFFFFFFF    # White
ESCAPE_COLOR = 0x0000FFFF   # Blue
EMITTER_COLOR = 0xFF0000FF  # Red


def pack_rgba(r: int, g: int, b: int, a: int = 0xFF) -> int:
    """Pack 8-bit channels into a single 0xRRGGBBAA value."""
    return ((r & 0xFF) << 24) | ((g & 0xFF) << 16) | ((b & 0xFF) << 8) | (a & 0xFF)


def unpack_rgba(rgba: int) -> Tuple[int, int, int, int]:
    """Split a packed 0xRRGGBBAA value into channels."""
    return ((rgba >> 24) & 0xFF, (rgba >> 16) & 0xFF,
            (rgba >> 8) & 0xFF, rgba & 0xFF)


def classify(code: int) -> Tuple[CellKind, int]:
    """Return (kind, cost) for a raw layout code."""
    cost = code - CODE_OFFSET
    if cost <= WALL_COST:
        return CellKind.WALL, WALL_COST
    if cost >= ESCAPE_COST:
        return CellKind.ESCAPE, ESCAPE_COST
    return CellKind.FLOOR, cost


class Cell:
    """
    One grid location.

    `intake` and `outtake` are scratch values rewritten on every update and
    carry no meaning between cycles.
    """

    __slots__ = ('kind', 'cost', 'row', 'col', 'omega_in', 'omega_out',
                 'density', 'intake', 'outtake')

    def __init__(self, row: int, col: int, kind: CellKind, cost: int):
        self.row = row
        self.col = col
        self.kind = kind
        self.cost = cost
        self.omega_in = 0.0
        self.omega_out = 0.0
        self.density = 0.0
        self.intake = 0.0
        self.outtake = 0.0

    @property
    def position(self) -> Tuple[int, int]:
        return (self.row, self.col)

    def is_floor_cost(self) -> bool:
        """Check if the cost is a floor height (0-9)."""
        return 0 <= self.cost < ESCAPE_COST

    def __repr__(self) -> str:
        return (f"Cell(row={self.row}, col={self.col}, "
                f"kind={self.kind.value}, density={self.density:.3f})")
