import argparse
import logging
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from airfoil_atlas.config import AtlasState, load_state
from airfoil_atlas.plotting import plot_polar, plot_results
from airfoil_atlas.scene import compute_scene


# ============================================================================
# CASE EXECUTION
# ============================================================================
def run_case(state, output_dir=None, verbose=True):
    scene = compute_scene(state)
    if verbose:
        print(f"Panels: {scene.solution.panel_count}")
        print(f"Density: {scene.rho:.4f} kg/m^3, q = {scene.q:.1f} Pa, Re = {scene.re_chord:.3e}")
        print(f"Cl (thin airfoil): {scene.cl:.4f}")
        print(f"Cl (Kutta-Joukowski): {scene.cl_kutta:.4f}")
        print(f"Cl (pressure integral): {scene.cl_pressure:.4f}")
        print(
            f"Cd: friction {scene.drag.friction:.5f} + pressure {scene.drag.pressure:.5f}"
            f" = {scene.drag.total:.5f}"
        )
        print(f"Lift: {scene.lift_n:.1f} N/m, Drag: {scene.drag_n:.2f} N/m")

    if output_dir is not None:
        figs = plot_results(scene, state, output_dir=output_dir)
        for fig in figs:
            plt.close(fig)
        if verbose:
            print(f"Saved plots to {Path(output_dir).resolve()}")
    return scene


def run_aoa_sweep(state, aoa_range=None, verbose=True):
    if aoa_range is None:
        aoa_range = np.arange(-4, 8.5, 1.0)

    polar = {"aoa": [], "cl_thin": [], "cl_kutta": [], "cl_pressure": [], "cd": []}
    for aoa_deg in aoa_range:
        scene = compute_scene(state.update(alpha_deg=float(aoa_deg), show_streamlines=False))
        polar["aoa"].append(float(aoa_deg))
        polar["cl_thin"].append(scene.cl)
        polar["cl_kutta"].append(scene.cl_kutta)
        polar["cl_pressure"].append(scene.cl_pressure)
        polar["cd"].append(scene.drag.total)
        if verbose:
            print(f"  AoA = {aoa_deg:+.1f}°: Cl = {scene.cl_kutta:.4f}, Cd = {scene.drag.total:.5f}")
    return {key: np.array(values) for key, values in polar.items()}


# ============================================================================
# COMMAND LINE
# ============================================================================
def _bool(text):
    value = text.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise argparse.ArgumentTypeError(f"Expected a boolean, got {text!r}")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="airfoil-atlas",
        description="Panel-method flow visualisation for NACA 4-digit airfoils.",
    )
    parser.add_argument("--config", type=Path, help="JSON file of state overrides")
    parser.add_argument("--output", type=Path, default=Path("results"), help="Directory for plots")
    parser.add_argument("--sweep", type=float, nargs=3, metavar=("START", "STOP", "STEP"),
                        help="Run an angle-of-attack sweep in degrees")
    parser.add_argument("--quiet", action="store_true", help="Suppress console report")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    group = parser.add_argument_group("state")
    defaults = AtlasState()
    for name, value in defaults.to_dict().items():
        kind = _bool if isinstance(value, bool) else type(value)
        group.add_argument(f"--{name.replace('_', '-')}", dest=name, type=kind, default=None,
                           help=f"default: {value}")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    state = load_state(args.config) if args.config else AtlasState()
    overrides = {
        name: getattr(args, name)
        for name in state.to_dict()
        if getattr(args, name) is not None
    }
    state = state.update(**overrides)
    verbose = not args.quiet

    if verbose:
        print(f"\n{'='*60}")
        print(f"NACA m={state.m:.3f} p={state.p:.2f} t={state.t:.3f}, chord {state.chord:.2f} m")
        print(f"AoA = {state.alpha_deg}°, V = {state.freestream_speed} m/s")
        print(f"{'='*60}")
    run_case(state, output_dir=args.output, verbose=verbose)

    if args.sweep:
        start, stop, step = args.sweep
        polar = run_aoa_sweep(state, np.arange(start, stop + 0.5 * step, step), verbose=verbose)
        figs = plot_polar(polar, title=f"m={state.m}, p={state.p}, t={state.t}", output_dir=args.output)
        for fig in figs:
            plt.close(fig)
        if verbose:
            print(f"Polar plots saved to {args.output.resolve()}")
    return 0
