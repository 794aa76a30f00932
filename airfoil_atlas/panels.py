from collections import namedtuple
from dataclasses import dataclass

import numpy as np

CLOSURE_TOL = 1e-6
R2_FLOOR = 1e-12
# Relative to the loop extent; catches the duplicated trailing-edge point
DEGENERATE_LENGTH = 1e-12
ON_PANEL_TOL = 1e-9

TWO_PI = 2.0 * np.pi


# ============================================================================
# PANEL GEOMETRY
# ============================================================================
@dataclass(frozen=True)
class Panel:
    start: np.ndarray
    end: np.ndarray
    control: np.ndarray
    tangent: np.ndarray
    normal: np.ndarray
    length: float


PanelArrays = namedtuple("PanelArrays", ["starts", "tangents", "normals", "lengths"])
PanelInfluence = namedtuple("PanelInfluence", ["source", "vortex"])


def signed_area(points):
    """Shoelace area of a closed loop; positive when counter-clockwise."""
    pts = np.asarray(points, dtype=float)
    if len(pts) < 3:
        return 0.0
    x, y = pts[:, 0], pts[:, 1]
    return 0.5 * float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def close_loop(points, tol=CLOSURE_TOL):
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    if len(pts) > 1 and np.hypot(*(pts[-1] - pts[0])) > tol:
        pts = np.vstack([pts, pts[0]])
    return pts


def build_panels(points):
    """Split a loop into clockwise straight panels.

    The loop is closed if needed and reversed when counter-clockwise.
    Normals are the tangent rotated +90 degrees, which is the exterior side
    of a clockwise traversal.
    """
    pts = close_loop(points)
    if len(pts) < 2:
        return []
    if signed_area(pts[:-1]) > 0.0:
        pts = np.flip(pts, axis=0)

    extent = max(float(np.ptp(pts[:, 0])), float(np.ptp(pts[:, 1])), 1.0)
    min_length = DEGENERATE_LENGTH * extent

    panels = []
    for i in range(len(pts) - 1):
        start, end = pts[i].copy(), pts[i + 1].copy()
        d = end - start
        length = float(np.hypot(d[0], d[1]))
        if length <= min_length:
            continue
        tangent = d / length
        panels.append(
            Panel(
                start=start,
                end=end,
                control=0.5 * (start + end),
                tangent=tangent,
                normal=np.array([-tangent[1], tangent[0]]),
                length=length,
            )
        )
    return panels


def panel_arrays(panels):
    if not panels:
        empty = np.zeros((0, 2))
        return PanelArrays(empty, empty, empty, np.zeros(0))
    return PanelArrays(
        starts=np.array([p.start for p in panels]),
        tangents=np.array([p.tangent for p in panels]),
        normals=np.array([p.normal for p in panels]),
        lengths=np.array([p.length for p in panels]),
    )


# ============================================================================
# INFLUENCE COEFFICIENTS
# ============================================================================
def unit_velocities(geometry, points):
    """Velocity of unit-strength constant source and vortex panels.

    Returns ``(source, vortex)``, each of shape ``(n_points, n_panels, 2)``.
    A point lying on a panel takes the limit from the exterior side.
    Positive vortex strength is clockwise.
    """
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    tx = geometry.tangents[:, 0]
    ty = geometry.tangents[:, 1]
    L = geometry.lengths

    dx = pts[:, None, 0] - geometry.starts[None, :, 0]
    dy = pts[:, None, 1] - geometry.starts[None, :, 1]
    xl = dx * tx + dy * ty
    yl = -dx * ty + dy * tx

    r1_sq = np.maximum(xl**2 + yl**2, R2_FLOOR)
    r2_sq = np.maximum((xl - L) ** 2 + yl**2, R2_FLOOR)
    log_term = 0.5 * np.log(r1_sq / r2_sq)
    angle = np.arctan2(yl, xl - L) - np.arctan2(yl, xl)

    on_panel = (np.abs(yl) <= ON_PANEL_TOL * L) & (xl > 0.0) & (xl < L)
    angle = np.where(on_panel, np.pi, angle)

    us, vs = log_term / TWO_PI, angle / TWO_PI
    uv, vv = angle / TWO_PI, -log_term / TWO_PI

    # Local frame back to global: x along the tangent, y along the normal
    source = np.stack([us * tx - vs * ty, us * ty + vs * tx], axis=-1)
    vortex = np.stack([uv * tx - vv * ty, uv * ty + vv * tx], axis=-1)
    return source, vortex


def influence_arrays(panels, points):
    return unit_velocities(panel_arrays(panels), points)


def panel_influence(panel, point):
    """Unit source and vortex velocity induced by one panel at one point."""
    source, vortex = influence_arrays([panel], point)
    return PanelInfluence(source=source[0, 0], vortex=vortex[0, 0])
