#!/usr/bin/env python3
"""
Dungeon Crowd Simulation

Agents walk toward random destinations on a procedurally walled grid,
re-planning an A* path every tick.

Usage:
    dungeon-sim [--config configs/default.yaml] [options]

Run `dungeon-sim --help` for the option list and examples.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import default_config, load_config
from .errors import SimulationError
from .model.engine import SimulationEngine
from .export.csv_writer import CSVWriter
from .export.visualizer import Visualizer
from .export.reporter import Reporter


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog='dungeon-sim',
        description='Dungeon Crowd Simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    dungeon-sim
    dungeon-sim --config configs/default.yaml --gif --out-dir results/
    dungeon-sim --steps 200 --agents 50 --no-csv --quiet
    dungeon-sim --seed 42 --verbose
        """
    )

    parser.add_argument('--config', type=Path, default=None,
                        help='Path to YAML configuration file (default: built-in defaults)')

    # Optional overrides
    parser.add_argument('--steps', type=int, default=None,
                        help='Override max simulation steps (0 = until interrupted)')
    parser.add_argument('--agents', type=int, default=None,
                        help='Override agent count')
    parser.add_argument('--size', type=int, default=None,
                        help='Override grid side length')
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

    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Suppress stdout output')
    parser.add_argument('--verbose', action='store_true', default=False,
                        help='Enable debug logging')

    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducibility')

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )

    # Load configuration
    try:
        config = load_config(args.config) if args.config else default_config()
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    # Apply CLI overrides
    if args.steps is not None:
        config.max_steps = args.steps
    if args.agents is not None:
        config.agents.count = args.agents
    if args.size is not None:
        config.grid.size = args.size
    if args.csv is not None:
        config.csv_enabled = args.csv
    if args.snapshot is not None:
        config.snapshot_enabled = args.snapshot
    if args.gif:
        config.gif_enabled = True
    config.quiet = args.quiet
    if args.seed is not None:
        config.seed = args.seed
    config.out_dir = args.out_dir

    try:
        config.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Initialize engine
    if not config.quiet:
        print("Initializing simulation...")
        print(f"  Grid: {config.grid.size}x{config.grid.size}")
        print(f"  Agents: {config.agents.count}")
        print(f"  Max steps: {config.max_steps or 'unbounded'}")

    try:
        engine = SimulationEngine(config)
    except SimulationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not config.quiet:
        print(f"  Spawned: {len(engine.agents)} agents")

    # Initialize exporters
    csv_writer = None
    if config.csv_enabled:
        csv_writer = CSVWriter(config.out_dir / 'simulation_log.csv')
        csv_writer.open()

    visualizer = Visualizer(config.grid.size, config.grid.cell_scale,
                            config.colors.empty)

    reporter = Reporter(str(args.config) if args.config else None, config.seed)
    reporter.record_layout(engine.grid.snapshot())

    # Main simulation loop
    if not config.quiet:
        print("\nRunning simulation...")

    final_state = None
    status = 0
    try:
        while not engine.is_finished():
            state = engine.step()
            final_state = state

            # Export CSV
            if csv_writer:
                csv_writer.append(state)

            # Buffer GIF frame (every N steps to reduce memory)
            if config.gif_enabled:
                if state.step % config.gif_every == 0 or engine.is_finished():
                    visualizer.buffer_frame(engine.render_feed(), f"Step {state.step}")

            reporter.update(state)

            # Progress indicator
            if not config.quiet and state.step % 100 == 0:
                print(f"  Step {state.step}: {state.metrics['moved']} moved, "
                      f"{state.metrics['stalled']} stalled, "
                      f"{state.metrics['arrivals']} arrivals")

    except KeyboardInterrupt:
        if not config.quiet:
            print("\nSimulation interrupted by user.")
    except SimulationError as e:
        print(f"Error: {e}", file=sys.stderr)
        status = 1

    # Cleanup and final exports
    if csv_writer:
        csv_writer.close()
        if not config.quiet:
            print(f"\nCSV saved: {config.out_dir / 'simulation_log.csv'}")

    if config.snapshot_enabled and final_state:
        snapshot_path = config.out_dir / 'final_state.png'
        visualizer.save_snapshot(engine.render_feed(), snapshot_path,
                                 f"Step {final_state.step}")
        if not config.quiet:
            print(f"Snapshot saved: {snapshot_path}")

    if config.gif_enabled:
        gif_path = config.out_dir / 'simulation.gif'
        if not config.quiet:
            print(f"Generating GIF ({len(visualizer.frames)} frames)...")
        visualizer.generate_gif(gif_path, fps=10)
        if not config.quiet:
            print(f"Animation saved: {gif_path}")

    # Print summary report
    if not config.quiet and final_state:
        report = reporter.generate_summary(
            final_state,
            config.out_dir,
            config.csv_enabled,
            config.snapshot_enabled,
            config.gif_enabled
        )
        print(report)

    return status


if __name__ == '__main__':
    sys.exit(main())
