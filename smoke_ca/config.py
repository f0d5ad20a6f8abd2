"""Configuration dataclasses and YAML loader for the smoke simulation."""

from dataclasses import dataclass, field
from typing import Any, Dict
from pathlib import Path
import yaml

TICK_RATE_RANGE = (1, 50)


@dataclass
class EmitterConfig:
    row: int
    col: int


@dataclass
class RunConfig:
    tick_rate: int = 1
    emitter_rate: float = 1.0
    escape_rate: float = 1.0
    use_precalculated_weights: bool = False
    apply_immediately: bool = False
    max_frames: int = 500
    breakpoint: int = 0  # Stop after this many running frames; 0 = off


@dataclass
class SimulationConfig:
    layout_path: Path
    emitter: EmitterConfig
    run: RunConfig = field(default_factory=RunConfig)

    # Export flags (can be overridden by CLI)
    csv_enabled: bool = True
    snapshot_enabled: bool = True
    gif_enabled: bool = False
    raw_enabled: bool = False
    quiet: bool = False
    out_dir: Path = field(default_factory=lambda: Path("./output"))

    def validate(self) -> None:
        """Raise ValueError for settings outside their intended ranges."""
        low, high = TICK_RATE_RANGE
        if not low <= self.run.tick_rate <= high:
            raise ValueError(
                f"tick_rate must be in [{low}, {high}], got {self.run.tick_rate}"
            )
        for name in ('emitter_rate', 'escape_rate'):
            value = getattr(self.run, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        if self.run.max_frames < 0:
            raise ValueError("max_frames must not be negative")
        if self.run.breakpoint < 0:
            raise ValueError("breakpoint must not be negative")


def _parse_emitter(raw: Any) -> EmitterConfig:
    """Accept {row, col} mappings or [row, col] pairs."""
    if isinstance(raw, dict):
        return EmitterConfig(row=int(raw['row']), col=int(raw['col']))
    if isinstance(raw, (list, tuple)) and len(raw) == 2:
        return EmitterConfig(row=int(raw[0]), col=int(raw[1]))
    raise ValueError(f"Invalid emitter specification: {raw!r}")


def _parse_run(sim_raw: Dict) -> RunConfig:
    defaults = RunConfig()
    return RunConfig(
        tick_rate=int(sim_raw.get('tick_rate', defaults.tick_rate)),
        emitter_rate=float(sim_raw.get('emitter_rate', defaults.emitter_rate)),
        escape_rate=float(sim_raw.get('escape_rate', defaults.escape_rate)),
        use_precalculated_weights=bool(sim_raw.get(
            'use_precalculated_weights', defaults.use_precalculated_weights)),
        apply_immediately=bool(sim_raw.get(
            'apply_immediately', defaults.apply_immediately)),
        max_frames=int(sim_raw.get('max_frames', defaults.max_frames)),
        breakpoint=int(sim_raw.get('breakpoint', defaults.breakpoint)),
    )


def load_config(config_path: Path) -> SimulationConfig:
    """Load and validate YAML configuration file."""
    config_path = Path(config_path)
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    # Layout paths are relative to the config file
    layout_path = Path(raw['layout'])
    if not layout_path.is_absolute():
        layout_path = config_path.parent / layout_path

    # Parse export config (optional)
    export_raw = raw.get('export', {})

    config = SimulationConfig(
        layout_path=layout_path,
        emitter=_parse_emitter(raw['emitter']),
        run=_parse_run(raw.get('simulation', {})),
        csv_enabled=export_raw.get('csv', True),
        snapshot_enabled=export_raw.get('snapshot', True),
        gif_enabled=export_raw.get('gif', False),
        raw_enabled=export_raw.get('raw', False),
    )
    config.validate()
    return config
