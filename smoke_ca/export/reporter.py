"""Summary report generation for the smoke simulation."""

from typing import List, Dict, Optional, TYPE_CHECKING
from pathlib import Path

if TYPE_CHECKING:
    from ..model.state import SimulationState


class Reporter:
    """Generates summary statistics and formatted text report."""

    def __init__(self, config_path: str, layout_path: str):
        self.config_path = config_path
        self.layout_path = layout_path
        self.tick_metrics: List[Dict] = []
        self.peak_smoke = 0.0
        self.peak_coverage = 0.0
        self.max_front = 0.0
        self.saturation_tick: Optional[int] = None
        self._prev_smoke: Optional[float] = None

    def update(self, state: "SimulationState") -> None:
        """Accumulate metrics per tick."""
        self.tick_metrics.append(state.metrics.copy())

        smoke = state.metrics.get('total_smoke', 0.0)
        self.peak_smoke = max(self.peak_smoke, smoke)
        self.peak_coverage = max(self.peak_coverage,
                                 state.metrics.get('smoke_coverage', 0.0))
        self.max_front = max(self.max_front,
                             state.metrics.get('front_distance', 0.0))

        # First tick whose total did not change from the previous one
        if (self.saturation_tick is None and self._prev_smoke is not None
                and smoke > 0 and abs(smoke - self._prev_smoke) < 1e-9):
            self.saturation_tick = state.tick
        self._prev_smoke = smoke

    def generate_summary(self, final_state: "SimulationState",
                         output_dir: Path,
                         csv_enabled: bool,
                         snapshot_enabled: bool,
                         gif_enabled: bool) -> str:
        """Returns formatted text report."""
        metrics = final_state.metrics
        saturation = (f"tick {self.saturation_tick}"
                      if self.saturation_tick is not None else "not reached")

        lines = [
            "",
            "=" * 80,
            "                    SMOKE PROPAGATION SIMULATION REPORT",
            "=" * 80,
            f"Configuration: {self.config_path}",
            f"Layout:        {self.layout_path}",
            "",
            "SIMULATION METRICS",
            "-" * 40,
            f"Total Ticks:           {final_state.tick}",
            f"Final Smoke Total:     {metrics.get('total_smoke', 0):.4f}",
            f"Final Mean Density:    {metrics.get('mean_density', 0):.4f}",
            f"Final Max Density:     {metrics.get('max_density', 0):.4f}",
            f"Peak Smoke Total:      {self.peak_smoke:.4f}",
            f"Peak Coverage:         {100 * self.peak_coverage:.1f}% of floor",
            f"Furthest Front:        {self.max_front:.0f} cells from emitter",
            f"Plumes (final):        {int(metrics.get('plume_count', 0))}",
            f"Steady State:          {saturation}",
            "",
            "OUTPUT FILES",
            "-" * 40,
        ]

        if csv_enabled:
            lines.append(f"CSV Log:    {output_dir / 'simulation_log.csv'}")
        else:
            lines.append("CSV Log:    (disabled)")

        if snapshot_enabled:
            lines.append(f"Snapshot:   {output_dir / 'final_state.png'}")
        else:
            lines.append("Snapshot:   (disabled)")

        if gif_enabled:
            lines.append(f"Animation:  {output_dir / 'simulation.gif'}")
        else:
            lines.append("Animation:  (disabled)")

        lines.append("=" * 80)

        return "\n".join(lines)
