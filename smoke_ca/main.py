#!/usr/bin/env python3
"""
Smoke Propagation Simulation

A headless host for the smoke cellular automaton: loads a layout, places the
emitter and drives the engine one frame at a time.

Usage:
    python -m smoke_ca.main --config configs/default.yaml [options]

Examples:
    python -m smoke_ca.main --config configs/default.yaml
    python -m smoke_ca.main --config configs/default.yaml --gif --out-dir results/
    python -m smoke_ca.main --config configs/default.yaml --emitter 2 3 --frames 200
    python -m smoke_ca.main --config configs/default.yaml --precalc-weights --breakpoint 50
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import load_config
from .layout import LayoutError, load_layout
from .model.engine import SimulationEngine
from .model.errors import SimulationError
from .model.reach import ReachField
from .model.state import snapshot
from .export.csv_writer import CSVWriter
from .export.visualizer import Visualizer
from .export.reporter import Reporter

_log = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Smoke Propagation Cellular Automaton',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m smoke_ca.main --config configs/default.yaml
    python -m smoke_ca.main --config configs/default.yaml --gif --out-dir results/
    python -m smoke_ca.main --config configs/default.yaml --emitter 2 3 --frames 200
        """
    )

    # Required arguments
    parser.add_argument('--config', type=Path, required=True,
                        help='Path to YAML configuration file')

    # Optional overrides
    parser.add_argument('--layout', type=Path, default=None,
                        help='Override the layout file')
    parser.add_argument('--emitter', type=int, nargs=2, default=None,
                        metavar=('ROW', 'COL'),
                        help='Override emitter coordinates')
    parser.add_argument('--frames', type=int, default=None,
                        help='Override number of host frames to run')
    parser.add_argument('--tick-rate', type=int, default=None,
                        help='Frames per simulated tick (1-50)')
    parser.add_argument('--emitter-rate', type=float, default=None,
                        help='Emission rate (0-1)')
    parser.add_argument('--escape-rate', type=float, default=None,
                        help='Escape rate (0-1)')
    parser.add_argument('--precalc-weights', dest='precalc', action='store_true',
                        default=None, help='Use precalculated neighbor weights')
    parser.add_argument('--no-precalc-weights', dest='precalc', action='store_false',
                        help='Use a fixed 1/4 weight per neighbor')
    parser.add_argument('--breakpoint', type=int, default=None,
                        help='Stop after this many running frames (0 = off)')
    parser.add_argument('--out-dir', type=Path, default=Path('./output'),
                        help='Output directory for exports (default: ./output)')

    # Export toggles
    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Enable CSV export (default)')
    parser.add_argument('--no-csv', dest='csv', action='store_false',
                        help='Disable CSV export')

    parser.add_argument('--snapshot', dest='snapshot', action='store_true', default=None,
                        help='Enable final snapshot (default)')
    parser.add_argument('--no-snapshot', dest='snapshot', action='store_false',
                        help='Disable final snapshot')

    parser.add_argument('--gif', action='store_true', default=False,
                        help='Enable GIF animation export')
    parser.add_argument('--raw', action='store_true', default=False,
                        help='Save the final pixmap at one pixel per cell')

    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Suppress stdout output')
    parser.add_argument('--verbose', action='store_true', default=False,
                        help='Enable debug logging')

    return parser.parse_args(argv)


def _log_level(args: argparse.Namespace) -> int:
    if args.verbose:
        return logging.DEBUG
    if args.quiet:
        return logging.ERROR
    return logging.WARNING


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=_log_level(args),
        format='%(levelname)s %(name)s: %(message)s'
    )

    # Load configuration
    try:
        config = load_config(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    # Apply CLI overrides
    run = config.run
    if args.layout is not None:
        config.layout_path = args.layout
    if args.emitter is not None:
        config.emitter.row, config.emitter.col = args.emitter
    if args.frames is not None:
        run.max_frames = args.frames
    if args.tick_rate is not None:
        run.tick_rate = args.tick_rate
    if args.emitter_rate is not None:
        run.emitter_rate = args.emitter_rate
    if args.escape_rate is not None:
        run.escape_rate = args.escape_rate
    if args.precalc is not None:
        run.use_precalculated_weights = args.precalc
    if args.breakpoint is not None:
        run.breakpoint = args.breakpoint
    if args.csv is not None:
        config.csv_enabled = args.csv
    if args.snapshot is not None:
        config.snapshot_enabled = args.snapshot
    if args.gif:
        config.gif_enabled = True
    if args.raw:
        config.raw_enabled = True
    config.quiet = args.quiet
    config.out_dir = args.out_dir

    try:
        config.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Load layout and build the engine
    try:
        layout = load_layout(config.layout_path)
    except FileNotFoundError:
        print(f"Error: Layout file not found: {config.layout_path}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error reading layout {config.layout_path}: {e}", file=sys.stderr)
        return 1
    except LayoutError as e:
        print(f"Error in layout {config.layout_path}: {e}", file=sys.stderr)
        return 1

    try:
        engine = SimulationEngine(layout.width, layout.height, layout.data,
                                  config.emitter.row, config.emitter.col,
                                  apply_immediately=run.apply_immediately)
    except SimulationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    engine.tick_rate = run.tick_rate
    engine.emitter_rate = run.emitter_rate
    engine.escape_rate = run.escape_rate
    engine.use_precalculated_weights = run.use_precalculated_weights

    if not config.quiet:
        print("Initializing simulation...")
        print(f"  Layout: {config.layout_path}")
        print(f"  Grid: {layout.width}x{layout.height}")
        print(f"  Emitter: ({config.emitter.row}, {config.emitter.col})")
        print(f"  Frames: {run.max_frames} (tick rate {run.tick_rate})")

    reach = ReachField(layout.width, layout.height)
    reach.compute(engine.grid.walls(), [engine.emitter.position])

    # Initialize exporters
    csv_writer = None
    if config.csv_enabled:
        csv_writer = CSVWriter(config.out_dir / 'simulation_log.csv')
        csv_writer.open()

    visualizer = Visualizer(layout.width, layout.height)
    reporter = Reporter(str(args.config), str(config.layout_path))

    if not config.quiet:
        print("\nRunning simulation...")

    final_state = snapshot(engine, reach)
    breakpoint_counter = run.breakpoint
    engine.start()
    try:
        for _ in range(run.max_frames):
            try:
                ticked = engine.cycle()
            except SimulationError as e:
                engine.stop()
                print(f"Simulation halted: {e}", file=sys.stderr)
                break

            if ticked:
                state = snapshot(engine, reach)
                final_state = state

                if csv_writer:
                    csv_writer.append(state)

                # Buffer GIF frame (every N ticks to reduce memory)
                if config.gif_enabled and state.tick % 5 == 0:
                    visualizer.buffer_frame(state)

                reporter.update(state)

                if not config.quiet and state.tick % 100 == 0:
                    print(f"  Tick {state.tick}: "
                          f"smoke {state.metrics['total_smoke']:.3f}, "
                          f"coverage {100 * state.metrics['smoke_coverage']:.1f}%")

            # Breakpoint counts running frames, not ticks
            if breakpoint_counter > 0:
                breakpoint_counter -= 1
                if breakpoint_counter == 0:
                    engine.stop()
                    if not config.quiet:
                        print(f"  Breakpoint reached at tick {engine.get_ticks()}.")
                    break

    except KeyboardInterrupt:
        engine.stop()
        if not config.quiet:
            print("\nSimulation interrupted by user.")

    _log.debug("Run finished after %d ticks", engine.get_ticks())

    # Cleanup and final exports
    if csv_writer:
        csv_writer.close()
        if not config.quiet:
            print(f"\nCSV saved: {config.out_dir / 'simulation_log.csv'}")

    if config.snapshot_enabled:
        snapshot_path = config.out_dir / 'final_state.png'
        visualizer.save_snapshot(final_state, snapshot_path)
        if not config.quiet:
            print(f"Snapshot saved: {snapshot_path}")

    if config.raw_enabled:
        raw_path = config.out_dir / 'final_state_raw.png'
        visualizer.save_raw(final_state, raw_path)
        if not config.quiet:
            print(f"Raw pixmap saved: {raw_path}")

    if config.gif_enabled:
        if not visualizer.frames:
            visualizer.buffer_frame(final_state)
        gif_path = config.out_dir / 'simulation.gif'
        if not config.quiet:
            print(f"Generating GIF ({len(visualizer.frames)} frames)...")
        visualizer.generate_gif(gif_path, fps=10)
        if not config.quiet:
            print(f"Animation saved: {gif_path}")

    # Print summary report
    if not config.quiet:
        report = reporter.generate_summary(
            final_state,
            config.out_dir,
            config.csv_enabled,
            config.snapshot_enabled,
            config.gif_enabled
        )
        print(report)

    return 0


if __name__ == '__main__':
    sys.exit(main())
