from dataclasses import dataclass

import numpy as np

LAMINAR = "laminar"
TURBULENT = "turbulent"

VISCOSITY_AIR = 1.81e-5  # Pa·s
MIN_LOCAL_SPEED = 0.1  # m/s


@dataclass(frozen=True)
class DragBreakdown:
    friction: float
    pressure: float
    total: float


def normalize_regime(regime):
    """Accept "laminar"/"turbulent" or a laminar flag."""
    if isinstance(regime, bool):
        return LAMINAR if regime else TURBULENT
    if isinstance(regime, str) and regime.lower() in (LAMINAR, TURBULENT):
        return regime.lower()
    raise ValueError(f"Unknown boundary-layer regime: {regime!r}")


# ============================================================================
# FLAT-PLATE CORRELATIONS
# ============================================================================
def reynolds_number(rho, velocity, x, mu=VISCOSITY_AIR):
    return rho * velocity * x / mu


def laminar_skin_friction(re_x):
    """Blasius local skin friction, 0.664 / sqrt(Re_x)."""
    return 0.664 / np.sqrt(np.maximum(re_x, 1.0))


def turbulent_skin_friction(re_x):
    """1/7th power-law local skin friction, 0.0592 / Re_x^0.2."""
    return 0.0592 / np.maximum(re_x, 1.0) ** 0.2


def skin_friction_coefficient(re_x, regime=LAMINAR):
    if normalize_regime(regime) == LAMINAR:
        return laminar_skin_friction(re_x)
    return turbulent_skin_friction(re_x)


def wall_shear_stress(dynamic_pressure, cf):
    return dynamic_pressure * cf


# ============================================================================
# DRAG
# ============================================================================
def friction_drag_coefficient(re_chord, regime=LAMINAR, samples=80):
    """Trapezoid integral of the local Cf over x/c in (0, 1]."""
    samples = max(2, int(samples))
    xc = np.linspace(1.0 / samples, 1.0, samples)
    cf = skin_friction_coefficient(re_chord * xc, regime)
    return float(np.trapezoid(cf, xc))


def pressure_drag_coefficient(cl, cd0=0.008, k=0.08):
    return cd0 + k * cl**2


def drag_coefficients(re_chord, cl, regime=LAMINAR, cd0=0.008, k=0.08, samples=80):
    friction = friction_drag_coefficient(re_chord, regime, samples)
    pressure = pressure_drag_coefficient(cl, cd0, k)
    return DragBreakdown(friction=friction, pressure=pressure, total=friction + pressure)


def panel_shear_stress(solution, rho, chord, regime=LAMINAR, mu=VISCOSITY_AIR):
    """Wall shear at every panel from its solved surface speed.

    The station is the control-point x clamped onto the chord; the local
    speed is floored so stagnation panels keep a finite Reynolds number.
    """
    if solution.is_empty:
        return np.zeros(0)
    x = np.clip(solution.control_points[:, 0], 0.0, chord)
    speed = np.maximum(MIN_LOCAL_SPEED, np.abs(solution.tangential_velocity))
    re_x = reynolds_number(rho, speed, x, mu)
    cf = skin_friction_coefficient(re_x, regime)
    q_local = 0.5 * rho * speed**2
    return wall_shear_stress(q_local, cf)
