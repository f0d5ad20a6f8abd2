"""State snapshot dataclass and metrics for the smoke simulation."""

from dataclasses import dataclass
from typing import Dict, TYPE_CHECKING
import numpy as np
from scipy import ndimage

from .grid import KIND_CODES
from .cell import CellKind

if TYPE_CHECKING:
    from .engine import SimulationEngine
    from .reach import ReachField

# Density at which a floor cell counts as smoky
SMOKE_THRESHOLD = 0.01

METRIC_FIELDS = [
    'total_smoke', 'mean_density', 'max_density',
    'smoke_coverage', 'plume_count', 'front_distance',
]


@dataclass
class SimulationState:
    """Complete snapshot of the board after a given tick."""
    tick: int
    density: np.ndarray   # Copy of per-cell density
    pixels: np.ndarray    # (height, width, 4) RGBA copy
    metrics: Dict[str, float]

    def to_csv_row(self) -> Dict:
        """Convert to CSV-compatible format."""
        row = {'tick': self.tick}
        row.update({name: self.metrics[name] for name in METRIC_FIELDS})
        return row


def compute_metrics(density: np.ndarray, kinds: np.ndarray,
                    reach: "ReachField") -> Dict[str, float]:
    """Summarise floor density: totals, coverage, plumes and front reach."""
    floor = kinds == KIND_CODES[CellKind.FLOOR]
    floor_count = int(np.count_nonzero(floor))
    smoky = floor & (density >= SMOKE_THRESHOLD)

    if floor_count:
        floor_density = density[floor]
        total = float(floor_density.sum())
        mean = total / floor_count
        peak = float(floor_density.max())
        coverage = np.count_nonzero(smoky) / floor_count
    else:
        total = mean = peak = coverage = 0.0

    _, plumes = ndimage.label(smoky)

    return {
        'total_smoke': total,
        'mean_density': mean,
        'max_density': peak,
        'smoke_coverage': float(coverage),
        'plume_count': int(plumes),
        'front_distance': reach.front_distance(smoky),
    }


def snapshot(engine: "SimulationEngine", reach: "ReachField") -> SimulationState:
    """Create a detached snapshot of the engine's current board."""
    density = engine.grid.densities()
    return SimulationState(
        tick=engine.get_ticks(),
        density=density,
        pixels=engine.grid.to_rgba(),
        metrics=compute_metrics(density, engine.grid.kinds(), reach),
    )
