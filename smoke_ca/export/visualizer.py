"""Visualization and export for the smoke simulation."""

import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.patches import Patch
from pathlib import Path
from typing import List, TYPE_CHECKING
from PIL import Image
import io

from ..model.cell import (WALL_COLOR, FLOOR_COLOR, ESCAPE_COLOR,
                          EMITTER_COLOR, unpack_rgba)

if TYPE_CHECKING:
    from ..model.state import SimulationState


def _to_mpl(rgba: int):
    return tuple(channel / 255 for channel in unpack_rgba(rgba))


class Visualizer:
    """
    Renders board pixel state using matplotlib.

    Supports:
    - Single PNG snapshots
    - Animated GIF compilation
    """

    LEGEND = [
        ('Wall', WALL_COLOR),
        ('Floor', FLOOR_COLOR),
        ('Emitter', EMITTER_COLOR),
        ('Escape', ESCAPE_COLOR),
    ]

    def __init__(self, grid_width: int, grid_height: int):
        self.width = grid_width
        self.height = grid_height
        self.frames: List[Image.Image] = []

    def _create_figure(self, state: "SimulationState") -> plt.Figure:
        """Create matplotlib figure for state visualization."""
        aspect = self.width / self.height
        fig_height = 6
        fig_width = max(8, fig_height * aspect)
        fig, ax = plt.subplots(figsize=(fig_width, fig_height))

        # Row 0 at the top, as in the layout file
        ax.imshow(state.pixels, origin='upper', aspect='equal',
                  interpolation='nearest')

        ax.set_title(f'Tick {state.tick} | '
                     f'Smoke: {state.metrics.get("total_smoke", 0):.2f} | '
                     f'Coverage: {100 * state.metrics.get("smoke_coverage", 0):.1f}%')
        ax.set_xlabel('Column')
        ax.set_ylabel('Row')

        legend_elements = [
            Patch(facecolor=_to_mpl(color), edgecolor='black', label=label)
            for label, color in self.LEGEND
        ]
        ax.legend(handles=legend_elements, loc='upper right', fontsize=8)

        plt.tight_layout()
        return fig

    def buffer_frame(self, state: "SimulationState") -> None:
        """Store frame for GIF generation."""
        fig = self._create_figure(state)

        # Convert to PIL Image
        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=80)
        buf.seek(0)
        img = Image.open(buf).copy()
        self.frames.append(img)
        buf.close()
        plt.close(fig)

    def save_snapshot(self, state: "SimulationState", output_path: Path) -> None:
        """Save single PNG image of current state."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig = self._create_figure(state)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

    def save_raw(self, state: "SimulationState", output_path: Path) -> None:
        """Save the pixmap itself, one image pixel per cell."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(state.pixels).save(output_path)

    def generate_gif(self, output_path: Path, fps: int = 10) -> None:
        """Compile buffered frames into animated GIF."""
        if not self.frames:
            return

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        duration = int(1000 / fps)  # milliseconds per frame

        self.frames[0].save(
            output_path,
            save_all=True,
            append_images=self.frames[1:],
            duration=duration,
            loop=0
        )

    def clear_frames(self) -> None:
        """Clear buffered frames."""
        self.frames.clear()
