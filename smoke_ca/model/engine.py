"""Simulation engine for the smoke propagation CA."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .cell import Cell, CellKind, DIRECTIONS, EMITTER_COLOR
from .errors import (InvalidEmitterPlacementError, MissingCellError,
                     OutOfBoundsError)
from .grid import Codes, Grid

_log = logging.getLogger(__name__)

# Weight used for every neighbor when precalculated weights are disabled
UNIFORM_WEIGHT = 0.25


class RunState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    STEPPING = "stepping"


@dataclass(frozen=True)
class EffectiveConfig:
    """Rates and weight mode used by a board update, latched between cycles."""
    emitter_rate: float
    escape_rate: float
    use_precalculated_weights: bool


class SimulationEngine:
    """
    Drives smoke diffusion over a Grid, one board update per tick.

    The host calls `cycle()` once per frame. While running, a frame-skip
    counter lets one tick through every `tick_rate` frames; `step()` forces
    a single tick and leaves the engine stopped.

    Rate and weight-mode changes reach the update rule with a one-cycle lag:
    the values are latched after each completed scan and on the first call
    to `cycle()`. Set `apply_immediately` to re-latch at the start of every
    cycle instead.
    """

    def __init__(self, width: int, height: int, codes: Codes,
                 emitter_row: int, emitter_col: int,
                 apply_immediately: bool = False):
        self.tick_rate = 1
        self.emitter_rate = 1.0
        self.escape_rate = 1.0
        self.use_precalculated_weights = False
        self.apply_immediately = apply_immediately

        self.state = RunState.STOPPED
        self.ticks = 0
        self._frame_skip_counter: Optional[int] = None
        self._effective: Optional[EffectiveConfig] = None

        self.grid = Grid(width, height, codes)
        self.emitter = self._place_emitter(emitter_row, emitter_col)
        self._compute_weights()
        _log.debug("Engine ready: %dx%d grid, emitter at (%d, %d)",
                   width, height, emitter_row, emitter_col)

    def _place_emitter(self, row: int, col: int) -> Cell:
        """Turn the floor cell at (row, col) into the emitter."""
        emitter = self.grid.cell_at(row, col)
        if emitter is None:
            raise OutOfBoundsError(row, col, self.grid.width, self.grid.height)
        if not emitter.is_floor_cost():
            raise InvalidEmitterPlacementError(row, col, emitter.cost)
        emitter.kind = CellKind.EMITTER
        emitter.density = 1.0
        self.grid.write_rgba(row, col, EMITTER_COLOR)
        return emitter

    def _compute_weights(self) -> None:
        """
        Count inflow sources and outflow sinks around every cell.

        Floor neighbors count both ways, emitters only as inflow, escapes
        only as outflow, walls not at all.
        """
        for cell in self.grid:
            ins = outs = 0
            for direction in DIRECTIONS:
                adj = self.grid.neighbor(direction, cell.row, cell.col)
                if adj is None:
                    continue
                if adj.kind is CellKind.WALL:
                    pass
                elif adj.kind is CellKind.FLOOR:
                    ins += 1
                    outs += 1
                elif adj.kind is CellKind.EMITTER:
                    ins += 1
                elif adj.kind is CellKind.ESCAPE:
                    outs += 1
                else:
                    raise ValueError(f"Unknown cell kind: {adj.kind}")
            cell.omega_in = 1.0 / ins if ins else 0.0
            cell.omega_out = 1.0 / outs if outs else 0.0

    # Run state

    def start(self) -> None:
        self.state = RunState.RUNNING
        _log.debug("Simulation running")

    def stop(self) -> None:
        self.state = RunState.STOPPED
        _log.debug("Simulation stopped at tick %d", self.ticks)

    def step(self) -> None:
        """Run exactly one board update, then stop."""
        self.state = RunState.STEPPING
        try:
            self.cycle()
        finally:
            self.state = RunState.STOPPED

    def is_running(self) -> bool:
        return self.state is RunState.RUNNING

    def get_ticks(self) -> int:
        return self.ticks

    @property
    def effective_config(self) -> EffectiveConfig:
        """Configuration the next board update will use."""
        if self._effective is None:
            return self._latch()
        return self._effective

    def _latch(self) -> EffectiveConfig:
        return EffectiveConfig(
            emitter_rate=self.emitter_rate,
            escape_rate=self.escape_rate,
            use_precalculated_weights=self.use_precalculated_weights,
        )

    # Update

    def cycle(self) -> bool:
        """
        Advance one host frame.

        Returns True when a board update ran during this call.
        """
        if self._frame_skip_counter is None:
            self._frame_skip_counter = self.tick_rate
        if self._effective is None or self.apply_immediately:
            self._effective = self._latch()

        if self.state is RunState.STOPPED:
            return False
        if self.state is RunState.RUNNING:
            self._frame_skip_counter -= 1
            if self._frame_skip_counter > 0:
                return False

        try:
            self._update_board(self._effective)
        except MissingCellError:
            _log.error("Board scan failed at tick %d, stopping", self.ticks)
            self.state = RunState.STOPPED
            raise

        self.ticks += 1
        # Single steps leave the frame-skip counter alone
        if self.state is RunState.RUNNING:
            self._frame_skip_counter = self.tick_rate
        self._effective = self._latch()
        return True

    def _weights(self, cell: Cell, config: EffectiveConfig) -> Tuple[float, float]:
        """Return (omega_in, omega_out) for a cell under `config`."""
        if config.use_precalculated_weights:
            return cell.omega_in, cell.omega_out
        return UNIFORM_WEIGHT, UNIFORM_WEIGHT

    def _update_board(self, config: EffectiveConfig) -> None:
        """
        Row-major scan applying the exchange rule to every cell.

        Neighbor scratch values are overwritten in place, so the scan order
        (rows, then columns, then N/S/W/E) determines the result.
        """
        grid = self.grid
        for row in range(grid.height):
            for col in range(grid.width):
                cur = grid.cell_at(row, col)
                if cur is None:
                    raise MissingCellError(row, col)
                cur.intake = 0.0
                cur.outtake = 0.0

                if cur.kind is CellKind.WALL:
                    pass
                elif cur.kind is CellKind.FLOOR:
                    self._exchange(cur, config)
                    level = _grey_level(cur.density)
                    grid.write_pixel(row, col, level, level, level)
                elif cur.kind is CellKind.EMITTER:
                    level = _channel(config.emitter_rate)
                    grid.write_pixel(row, col, level, 255 - level, 255 - level)
                elif cur.kind is CellKind.ESCAPE:
                    level = _channel(config.escape_rate)
                    grid.write_pixel(row, col, 255 - level, 255 - level, level)
                else:
                    raise ValueError(f"Unknown cell kind: {cur.kind}")

    def _exchange(self, cur: Cell, config: EffectiveConfig) -> None:
        """Trade density between a floor cell and its four neighbors."""
        cur_in, cur_out = self._weights(cur, config)

        for direction in DIRECTIONS:
            adj = self.grid.neighbor(direction, cur.row, cur.col)
            if adj is None:
                continue
            adj_in, adj_out = self._weights(adj, config)
            adj.intake = 0.0
            adj.outtake = 0.0

            if adj.kind is CellKind.WALL:
                pass
            elif adj.kind is CellKind.FLOOR:
                adj.intake = min(cur_out * cur.density,
                                 adj_in * (1 - adj.density))
                adj.outtake = min(adj_out * adj.density,
                                  cur_in * (1 - cur.density))
            elif adj.kind is CellKind.EMITTER:
                adj.outtake = config.emitter_rate * min(
                    adj_out * adj.density, cur_in * (1 - cur.density))
            elif adj.kind is CellKind.ESCAPE:
                # Sinks have unlimited capacity
                adj.intake = config.escape_rate * cur_out * cur.density
            else:
                raise ValueError(f"Unknown cell kind: {adj.kind}")

            cur.intake += adj.outtake
            cur.outtake += adj.intake

        cur.density += cur.intake - cur.outtake


def _channel(value: float) -> int:
    """Scale a [0, 1] value to an 8-bit channel, truncating."""
    return min(255, max(0, int(255 * value)))


def _grey_level(density: float) -> int:
    """Darker for denser smoke."""
    return min(255, max(0, int(255 - 255 * density)))
