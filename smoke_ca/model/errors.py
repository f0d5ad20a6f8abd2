"""Exceptions raised by the smoke simulation core."""


class SimulationError(RuntimeError):
    """Base class for simulation failures."""


class OutOfBoundsError(SimulationError, IndexError):
    """Emitter coordinates fall outside the grid."""

    def __init__(self, row: int, col: int, width: int, height: int):
        self.row = row
        self.col = col
        super().__init__(
            f"Emitter coordinates ({row}, {col}) out of bounds "
            f"for a {width}x{height} grid."
        )


class InvalidEmitterPlacementError(SimulationError, ValueError):
    """Emitter placed on a cell that is not floor."""

    def __init__(self, row: int, col: int, cost: int):
        self.row = row
        self.col = col
        self.cost = cost
        super().__init__(
            f"Emitter not on floor tile at ({row}, {col}) (cost {cost})."
        )


class MissingCellError(SimulationError):
    """A scan addressed a valid position with no cell behind it."""

    def __init__(self, row: int, col: int):
        self.row = row
        self.col = col
        super().__init__(
            f"Unexpected missing cell in valid location ({row}, {col})."
        )
