import logging
from dataclasses import dataclass

import numpy as np

from airfoil_atlas.aerodynamics import (
    drag_direction,
    drag_force,
    dynamic_pressure,
    lift_direction,
    lift_force,
    reynolds_number_chord,
    thin_airfoil_lift_coefficient,
)
from airfoil_atlas.boundary_layer import VISCOSITY_AIR, drag_coefficients, panel_shear_stress
from airfoil_atlas.flowfield import DEFAULT_POLICY, trace_streamlines
from airfoil_atlas.geometry import build_contour, generate_airfoil
from airfoil_atlas.solver import lift_coefficient, pressure_lift_coefficient, solve_panel_method

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

PRESSURE_ENVELOPE_SCALE = 0.08
SHEAR_ENVELOPE_SCALE = 0.05
CD0 = 0.008
K_INDUCED = 0.08
ARROW_GAIN = 8e-5


@dataclass(frozen=True)
class ForceArrow:
    origin: np.ndarray
    direction: np.ndarray
    length: float


@dataclass(frozen=True)
class SceneData:
    """Everything the renderer draws for one parameter set."""

    surface: object
    contour: np.ndarray
    chord: float
    solution: object
    pressure_upper: np.ndarray
    pressure_lower: np.ndarray
    shear_upper: np.ndarray
    shear_lower: np.ndarray
    shear_stress: np.ndarray
    streamlines: list
    rho: float
    q: float
    re_chord: float
    cl: float
    cl_kutta: float
    cl_pressure: float
    drag: object
    lift_n: float
    drag_n: float
    lift_arrow: ForceArrow
    drag_arrow: ForceArrow


def envelope(solution, magnitudes, scale):
    """Offset control points along their normals; split upper and lower.

    The upper branch runs leading edge to trailing edge, the lower branch
    trailing edge to leading edge.
    """
    if solution.is_empty:
        empty = np.zeros((0, 2))
        return empty, empty
    points = solution.control_points + solution.normals * (scale * np.asarray(magnitudes))[:, None]
    is_upper = solution.control_points[:, 1] >= 0.0
    upper, lower = points[is_upper], points[~is_upper]
    upper = upper[np.argsort(upper[:, 0], kind="stable")]
    lower = lower[np.argsort(-lower[:, 0], kind="stable")]
    return upper, lower


def force_arrows(alpha, chord, lift_n, drag_n):
    origin = np.array([0.25 * chord, 0.0])
    scale = 0.15 * chord
    lift_len = float(np.clip(lift_n * ARROW_GAIN + scale, 0.2 * chord, 0.9 * chord))
    drag_len = float(np.clip(drag_n * ARROW_GAIN + 0.5 * scale, 0.2 * chord, 0.9 * chord))
    return (
        ForceArrow(origin=origin, direction=lift_direction(alpha), length=lift_len),
        ForceArrow(origin=origin, direction=drag_direction(alpha), length=drag_len),
    )


def compute_scene(state, policy=DEFAULT_POLICY):
    """Run geometry, solver, envelopes, streamlines and forces for ``state``."""
    shape = state.shape.clamped()
    chord = shape.chord
    alpha = state.alpha
    rho = state.density

    surface = generate_airfoil(shape)
    contour = build_contour(surface)
    solution = solve_panel_method(contour, state.freestream_speed, alpha)
    logger.debug("Solved %d panels, circulation %.4g", solution.panel_count, solution.circulation)

    pressure_upper, pressure_lower = envelope(
        solution, np.abs(solution.pressure_coefficient), PRESSURE_ENVELOPE_SCALE * chord
    )
    tau = panel_shear_stress(solution, rho, chord, state.regime)
    shear_norm = tau.max() if tau.size and tau.max() > 0 else 1.0
    shear_upper, shear_lower = envelope(solution, tau / shear_norm, SHEAR_ENVELOPE_SCALE * chord)

    streamlines = []
    if state.show_streamlines:
        streamlines = trace_streamlines(
            solution, state.freestream_speed, alpha, chord, state.streamline_count, policy
        )

    q = dynamic_pressure(rho, state.freestream_speed)
    re_chord = reynolds_number_chord(rho, state.freestream_speed, chord, VISCOSITY_AIR)
    cl = thin_airfoil_lift_coefficient(alpha)
    drag = drag_coefficients(re_chord, cl, state.regime, CD0, K_INDUCED)

    area = chord * 1.0  # unit span
    lift_n = lift_force(q, area, cl)
    drag_n = drag_force(q, area, drag.total)
    lift_arrow, drag_arrow = force_arrows(alpha, chord, lift_n, drag_n)

    return SceneData(
        surface=surface,
        contour=contour,
        chord=chord,
        solution=solution,
        pressure_upper=pressure_upper,
        pressure_lower=pressure_lower,
        shear_upper=shear_upper,
        shear_lower=shear_lower,
        shear_stress=tau,
        streamlines=streamlines,
        rho=rho,
        q=q,
        re_chord=re_chord,
        cl=cl,
        cl_kutta=lift_coefficient(solution, state.freestream_speed, chord),
        cl_pressure=pressure_lift_coefficient(solution, alpha, chord),
        drag=drag,
        lift_n=lift_n,
        drag_n=drag_n,
        lift_arrow=lift_arrow,
        drag_arrow=drag_arrow,
    )
