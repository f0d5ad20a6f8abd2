"""Model package for the smoke propagation simulation."""

from .cell import Cell, CellKind, Direction
from .errors import (SimulationError, OutOfBoundsError,
                     InvalidEmitterPlacementError, MissingCellError)
from .grid import Grid
from .engine import SimulationEngine, RunState, EffectiveConfig
from .reach import ReachField
from .state import SimulationState, compute_metrics, snapshot

__all__ = [
    'Cell',
    'CellKind',
    'Direction',
    'SimulationError',
    'OutOfBoundsError',
    'InvalidEmitterPlacementError',
    'MissingCellError',
    'Grid',
    'SimulationEngine',
    'RunState',
    'EffectiveConfig',
    'ReachField',
    'SimulationState',
    'compute_metrics',
    'snapshot',
]
