import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
from pathlib import Path

BACKGROUND = "#0b0f14"
AIRFOIL_COLOR = "#f5f7fa"
PRESSURE_COLOR = "#45d07a"
SHEAR_COLOR = "#e15249"
STREAMLINE_COLOR = "#7bb0ff"
LIFT_COLOR = "#6db7ff"
DRAG_COLOR = "#ffa26b"


def _save(figs, names, output_dir):
    if not output_dir:
        return
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    for fig, name in zip(figs, names):
        fig.savefig(out / f"{name}.png", dpi=200, bbox_inches="tight", facecolor=fig.get_facecolor())


def _draw_arrow(ax, arrow, chord, color, label):
    dx, dy = arrow.direction * arrow.length
    ax.arrow(
        arrow.origin[0], arrow.origin[1], dx, dy,
        head_width=0.04 * chord, head_length=0.07 * chord,
        length_includes_head=True, color=color, label=label,
    )


def plot_scene(scene, state):
    """Airfoil with pressure/shear envelopes, streamlines and force arrows."""
    chord = scene.chord
    fig, ax = plt.subplots(figsize=(10, 6))
    fig.patch.set_facecolor(BACKGROUND)
    ax.set_facecolor(BACKGROUND)

    outline = np.vstack([scene.surface.upper, np.flip(scene.surface.lower, axis=0)])
    ax.plot(outline[:, 0], outline[:, 1], color=AIRFOIL_COLOR, linewidth=1.5, label="Airfoil")

    if state.show_pressure:
        ax.plot(scene.pressure_upper[:, 0], scene.pressure_upper[:, 1], color=PRESSURE_COLOR, label=r"$|C_p|$ envelope")
        ax.plot(scene.pressure_lower[:, 0], scene.pressure_lower[:, 1], color=PRESSURE_COLOR)
    if state.show_shear:
        ax.plot(scene.shear_upper[:, 0], scene.shear_upper[:, 1], color=SHEAR_COLOR, label=r"$\tau_w$ envelope")
        ax.plot(scene.shear_lower[:, 0], scene.shear_lower[:, 1], color=SHEAR_COLOR)
    if state.show_streamlines:
        for line in scene.streamlines:
            if len(line):
                ax.plot(line[:, 0], line[:, 1], color=STREAMLINE_COLOR, alpha=0.7, linewidth=0.8)

    _draw_arrow(ax, scene.lift_arrow, chord, LIFT_COLOR, "Lift")
    _draw_arrow(ax, scene.drag_arrow, chord, DRAG_COLOR, "Drag")

    ax.set_xlim(-0.8 * chord, 1.6 * chord)
    ax.set_ylim(-1.0 * chord, 1.0 * chord)
    ax.set_aspect("equal")
    ax.set_title(
        f"AoA = {state.alpha_deg:.1f}°, V = {state.freestream_speed:.1f} m/s, "
        f"$c_l$ = {scene.cl_kutta:.3f}",
        color=AIRFOIL_COLOR,
    )
    ax.tick_params(colors=AIRFOIL_COLOR)
    ax.legend(loc="upper right", facecolor=BACKGROUND, labelcolor=AIRFOIL_COLOR)
    return fig


def plot_pressure_distribution(scene, state):
    solution = scene.solution
    fig = plt.figure()
    if not solution.is_empty:
        x = solution.control_points[:, 0] / scene.chord
        upper = solution.control_points[:, 1] >= 0
        iu = np.argsort(x[upper])
        il = np.argsort(x[~upper])
        plt.plot(x[upper][iu], solution.pressure_coefficient[upper][iu], label="Upper", linestyle="-", color="#1f77b4")
        plt.plot(x[~upper][il], solution.pressure_coefficient[~upper][il], label="Lower", linestyle="-", color="#ff7f0e")
    plt.gca().invert_yaxis()
    plt.title(r"Pressure Coefficient, $C_p$")
    plt.xlabel(r"$x/c$")
    plt.ylabel(r"$C_p$")
    plt.xlim(0, 1)
    plt.legend()
    plt.grid(True)
    return fig


def plot_results(scene, state, output_dir=None):
    figs = [plot_scene(scene, state), plot_pressure_distribution(scene, state)]
    _save(figs, ["scene", "cp"], output_dir)
    return figs


def plot_polar(polar, title="", output_dir=None):
    figs = []

    # Plot: Lift coefficient
    fig = plt.figure()
    figs.append(fig)
    plt.plot(polar["aoa"], polar["cl_kutta"], label="Panel method (Kutta-Joukowski)", linestyle="-", color="#1f77b4", linewidth=1.5)
    plt.plot(polar["aoa"], polar["cl_pressure"], label="Panel method (pressure)", linestyle=":", color="#1f77b4", linewidth=1.5)
    plt.plot(polar["aoa"], polar["cl_thin"], label="Thin airfoil", linestyle="--", color="#ff7f0e", linewidth=1.5)
    plt.title(f"Lift Coefficient ($c_l$)\n{title}")
    plt.xlabel("AoA [°]")
    plt.ylabel(r"$c_l$")
    plt.legend()
    plt.grid(True)
    plt.axhline(y=0, color='k', linewidth=0.5)
    plt.axvline(x=0, color='k', linewidth=0.5)

    # Plot: Drag coefficient
    fig = plt.figure()
    figs.append(fig)
    plt.plot(polar["aoa"], polar["cd"], label="Friction + pressure", linestyle="-", color="#1f77b4", linewidth=1.5)
    plt.title(f"Drag Coefficient ($c_d$)\n{title}")
    plt.xlabel("AoA [°]")
    plt.ylabel(r"$c_d$")
    plt.legend()
    plt.grid(True)

    _save(figs, ["cl_vs_aoa", "cd_vs_aoa"], output_dir)
    return figs
