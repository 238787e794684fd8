#!/usr/bin/env python
# scripts/run_mesh.py
"""CLI entry point for relaxing a knit mesh headless."""
import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from wabric.config.loader import load_mesh_config
from wabric.diagnostics.probes import DiagnosticSet
from wabric.diagnostics.progress import ProgressReporter
from wabric.input_validation import ValidationError
from wabric.simulation.simulation import Simulation


def find_config_file(name: str, base_dir: Path) -> Path:
    """Find a mesh YAML file by path or by name under examples/.

    Raises:
        FileNotFoundError: If no matching file exists
    """
    if Path(name).exists():
        return Path(name)

    if Path(f"{name}.yaml").exists():
        return Path(f"{name}.yaml")

    path = base_dir / f"{name}.yaml"
    if path.exists():
        return path

    raise FileNotFoundError(f"Mesh config not found: {name}")


def run_mesh(yaml_path: Path, args) -> Simulation:
    """Relax the mesh described by ``yaml_path``.

    Returns:
        The Simulation after the last tick
    """
    config = load_mesh_config(yaml_path)
    simulation = Simulation(config=config)
    simulation.start()

    for vertex_id in args.pin:
        simulation.pin(vertex_id)

    diagnostics = DiagnosticSet.default_set(edge_length=config.edge_length)
    progress = ProgressReporter(
        alpha_min=config.alpha_min,
        output_interval=args.report_every,
        enabled=args.progress,
    )

    print(f"\n{'='*60}")
    print(f"Relaxing: {yaml_path.stem} ({config.width}x{config.height})")
    print(f"{'='*60}\n")

    for _ in range(args.max_ticks):
        if simulation.status != "running" and not simulation.pending:
            break
        state = simulation.tick()
        values = diagnostics.measure_all(state, simulation.topology)
        progress.report(state.alpha, state.tick, {
            "strain": values["strain_stretch_max"],
            "KE": values["kinetic_energy"],
        })
    progress.finish()

    final = diagnostics.measure_all(simulation.state, simulation.topology)
    print(f"\n{'='*60}")
    print(f"Status: {simulation.status} after {simulation.state.tick} ticks")
    for name, value in final.items():
        print(f"  {name}: {value:.4g}")
    if simulation.divergences:
        print(f"  numeric divergences: {len(simulation.divergences)}")
    print()

    return simulation


def main():
    parser = argparse.ArgumentParser(
        description="Relax a knit mesh until it settles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s swatch_30x30                Run examples/swatch_30x30.yaml
  %(prog)s my_mesh.yaml --pin 0 30     Pin two corners
  %(prog)s small_swatch --max-ticks 50 Stop after 50 ticks
        """
    )
    parser.add_argument('config', help="Mesh YAML file or name under examples/")
    parser.add_argument('--max-ticks', type=int, default=1000,
                        help="Upper bound on ticks (default: 1000)")
    parser.add_argument('--pin', type=int, nargs='*', default=[],
                        help="Vertex ids to pin before relaxing")
    parser.add_argument('--report-every', type=int, default=10,
                        help="Progress line every N ticks (default: 10)")
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    parser.add_argument('--progress', dest='progress', action='store_true', default=True,
                        help="Show progress line (default)")
    parser.add_argument('--no-progress', dest='progress', action='store_false',
                        help="Disable progress line")

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    base_dir = Path(__file__).parent.parent / 'examples'

    try:
        yaml_path = find_config_file(args.config, base_dir)
    except FileNotFoundError as e:
        logging.error(str(e))
        return 2

    try:
        simulation = run_mesh(yaml_path, args)
    except ValidationError as e:
        logging.error(f"Invalid mesh config {yaml_path}: {e}")
        return 2

    return 0 if simulation.status == "settled" else 1


if __name__ == '__main__':
    sys.exit(main())
