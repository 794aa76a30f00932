import logging
from dataclasses import dataclass

import numpy as np

from airfoil_atlas.panels import build_panels, panel_arrays, unit_velocities

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

PIVOT_FLOOR = 1e-12
SPEED_FLOOR = 1e-6
TE_SPLIT_FRACTION = 0.5


def freestream_velocity(freestream_speed, angle_of_attack):
    return freestream_speed * np.array([np.cos(angle_of_attack), np.sin(angle_of_attack)])


# ============================================================================
# SOLUTION
# ============================================================================
@dataclass(frozen=True)
class PanelMethodSolution:
    """Solved source/vortex panel system for one contour and flow condition.

    ``circulation`` is the vortex strength per unit length shared by every
    panel (clockwise positive); ``total_circulation`` integrates it around
    the contour.
    """

    panels: list
    source_strengths: np.ndarray
    circulation: float
    tangential_velocity: np.ndarray
    pressure_coefficient: np.ndarray

    @classmethod
    def empty(cls):
        return cls(
            panels=[],
            source_strengths=np.zeros(0),
            circulation=0.0,
            tangential_velocity=np.zeros(0),
            pressure_coefficient=np.zeros(0),
        )

    @property
    def panel_count(self):
        return len(self.panels)

    @property
    def is_empty(self):
        return not self.panels

    @property
    def control_points(self):
        if self.is_empty:
            return np.zeros((0, 2))
        return np.array([p.control for p in self.panels])

    @property
    def normals(self):
        return panel_arrays(self.panels).normals

    @property
    def perimeter(self):
        return float(sum(p.length for p in self.panels))

    @property
    def total_circulation(self):
        return self.circulation * self.perimeter

    @property
    def trailing_edge_panels(self):
        return find_trailing_edge_panels(self.panels)


# ============================================================================
# LINEAR ALGEBRA
# ============================================================================
def gaussian_solve(matrix, rhs, pivot_floor=PIVOT_FLOOR):
    """Dense Gaussian elimination with partial pivoting.

    Pivots smaller than ``pivot_floor`` are replaced by the floor (keeping
    their sign) so a singular system still returns finite numbers.
    """
    a = np.array(matrix, dtype=float)
    b = np.array(rhs, dtype=float)
    n = len(b)
    floored = 0

    for k in range(n):
        p = k + int(np.argmax(np.abs(a[k:, k])))
        if p != k:
            a[[k, p]] = a[[p, k]]
            b[[k, p]] = b[[p, k]]
        pivot = a[k, k]
        if abs(pivot) < pivot_floor:
            pivot = pivot_floor if pivot >= 0 else -pivot_floor
            a[k, k] = pivot
            floored += 1
        factors = a[k + 1 :, k] / pivot
        a[k + 1 :, k:] -= np.outer(factors, a[k, k:])
        b[k + 1 :] -= factors * b[k]

    x = np.zeros(n)
    for k in range(n - 1, -1, -1):
        x[k] = (b[k] - a[k, k + 1 :] @ x[k + 1 :]) / a[k, k]

    if floored:
        logger.warning("Near-singular system: %d of %d pivots floored to %g", floored, n, pivot_floor)
    return x


# ============================================================================
# PANEL METHOD SOLVER
# ============================================================================
def find_trailing_edge_panels(panels):
    """Indices of the rearmost panel on each side of the chord line.

    Upper: largest control-point x with y >= 0. Lower: largest x with y <= 0.
    """
    if not panels:
        return None, None
    controls = np.array([p.control for p in panels])
    x, y = controls[:, 0], controls[:, 1]

    upper = np.where(y >= 0.0)[0]
    lower = np.where(y <= 0.0)[0]
    if len(upper) == 0:
        upper = np.arange(len(panels))
    if len(lower) == 0:
        lower = np.arange(len(panels))
    iu, il = int(upper[np.argmax(x[upper])]), int(lower[np.argmax(x[lower])])

    extent = x.max() - x.min()
    if abs(x[iu] - x[il]) > TE_SPLIT_FRACTION * extent:
        logger.warning(
            "Trailing-edge panels far apart: upper at x=%.4g, lower at x=%.4g", x[iu], x[il]
        )
    return iu, il


def influence_matrices(panels):
    """Normal and tangential unit influences at every control point.

    Element ``[i, j]`` is the velocity component of panel ``j`` at control
    point ``i``, along panel ``i``'s normal (``An``, ``Bn``) or tangent
    (``At``, ``Bt``). ``A`` is the source, ``B`` the vortex.
    """
    geometry = panel_arrays(panels)
    controls = np.array([p.control for p in panels])
    source, vortex = unit_velocities(geometry, controls)

    normals, tangents = geometry.normals, geometry.tangents
    An = np.einsum("ijk,ik->ij", source, normals)
    Bn = np.einsum("ijk,ik->ij", vortex, normals)
    At = np.einsum("ijk,ik->ij", source, tangents)
    Bt = np.einsum("ijk,ik->ij", vortex, tangents)
    return An, Bn, At, Bt


def solve_panel_method(contour, freestream_speed, angle_of_attack):
    """Solve for panel source strengths and the shared circulation.

    Flow tangency holds at every control point. The Kutta condition holds at
    the trailing edge: the two trailing panels carry the same speed.
    """
    if contour is None:
        logger.warning("No contour given, returning an empty solution")
        return PanelMethodSolution.empty()
    points = np.asarray(contour, dtype=float).reshape(-1, 2)
    if len(points) < 3:
        logger.warning("Contour has %d points, returning an empty solution", len(points))
        return PanelMethodSolution.empty()

    panels = build_panels(points)
    n = len(panels)
    if n == 0:
        logger.warning("Contour produced no panels, returning an empty solution")
        return PanelMethodSolution.empty()

    geometry = panel_arrays(panels)
    An, Bn, At, Bt = influence_matrices(panels)
    vinf = freestream_velocity(freestream_speed, angle_of_attack)
    vinf_n = geometry.normals @ vinf
    vinf_t = geometry.tangents @ vinf

    A = np.zeros((n + 1, n + 1))
    rhs = np.zeros(n + 1)

    # Flow tangency
    A[:n, :n] = An
    A[:n, n] = Bn.sum(axis=1)
    rhs[:n] = -vinf_n

    # Kutta condition. Speeds are compared in the downstream direction; the
    # lower panel runs upstream (clockwise loop), so its tangent flips sign.
    iu, il = find_trailing_edge_panels(panels)
    logger.debug("Trailing-edge panels: upper=%d lower=%d", iu, il)
    A[n, :n] = At[iu] + At[il]
    A[n, n] = Bt[iu].sum() + Bt[il].sum()
    rhs[n] = -(vinf_t[iu] + vinf_t[il])

    logger.debug("Solving %dx%d panel system", n + 1, n + 1)
    solution = gaussian_solve(A, rhs)
    sigma = solution[:n]
    gamma = float(solution[n])

    vt = vinf_t + At @ sigma + gamma * Bt.sum(axis=1)
    cp = 1.0 - (vt / max(freestream_speed, SPEED_FLOOR)) ** 2
    logger.debug("Circulation %.6g, source sum %.3g", gamma, float(sigma @ geometry.lengths))

    return PanelMethodSolution(
        panels=panels,
        source_strengths=sigma,
        circulation=gamma,
        tangential_velocity=vt,
        pressure_coefficient=cp,
    )


# ============================================================================
# POST-PROCESSING
# ============================================================================
def tangency_residual(solution, freestream_speed, angle_of_attack):
    """Normal velocity left at each control point; zero for an exact solve."""
    if solution.is_empty:
        return np.zeros(0)
    An, Bn, _, _ = influence_matrices(solution.panels)
    vinf = freestream_velocity(freestream_speed, angle_of_attack)
    return solution.normals @ vinf + An @ solution.source_strengths + solution.circulation * Bn.sum(axis=1)


def lift_coefficient(solution, freestream_speed, chord):
    """Kutta-Joukowski lift coefficient, Cl = 2 Gamma / (V c)."""
    if solution.is_empty:
        return 0.0
    return 2.0 * solution.total_circulation / (max(freestream_speed, SPEED_FLOOR) * chord)


def pressure_lift_coefficient(solution, angle_of_attack, chord):
    """Lift coefficient from integrating -Cp n ds over the panels."""
    if solution.is_empty:
        return 0.0
    geometry = panel_arrays(solution.panels)
    force = -(solution.pressure_coefficient * geometry.lengths) @ geometry.normals / chord
    lift_dir = np.array([-np.sin(angle_of_attack), np.cos(angle_of_attack)])
    return float(force @ lift_dir)
