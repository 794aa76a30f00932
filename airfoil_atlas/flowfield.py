import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from airfoil_atlas.panels import panel_arrays, unit_velocities
from airfoil_atlas.solver import freestream_velocity

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


# ============================================================================
# VELOCITY FIELD
# ============================================================================
def _induced(geometry, solution, points):
    source, vortex = unit_velocities(geometry, points)
    return np.einsum("pjk,j->pk", source, solution.source_strengths) + solution.circulation * vortex.sum(axis=1)


def evaluate_velocity(solution, point, freestream_speed, angle_of_attack):
    """Freestream plus the velocity induced by every solved panel."""
    vinf = freestream_velocity(freestream_speed, angle_of_attack)
    if solution.is_empty:
        return vinf
    geometry = panel_arrays(solution.panels)
    return vinf + _induced(geometry, solution, point)[0]


def evaluate_velocity_grid(solution, points, freestream_speed, angle_of_attack):
    """Vectorised :func:`evaluate_velocity` over an ``(N, 2)`` array."""
    pts = np.asarray(points, dtype=float).reshape(-1, 2)
    vinf = freestream_velocity(freestream_speed, angle_of_attack)
    if solution.is_empty:
        return np.tile(vinf, (len(pts), 1))
    return vinf + _induced(panel_arrays(solution.panels), solution, pts)


def velocity_function(solution, freestream_speed, angle_of_attack):
    """Point -> velocity callable with the panel geometry unpacked once."""
    vinf = freestream_velocity(freestream_speed, angle_of_attack)
    if solution.is_empty:
        return lambda point: vinf.copy()
    geometry = panel_arrays(solution.panels)

    def velocity_at(point):
        return vinf + _induced(geometry, solution, point)[0]

    return velocity_at


# ============================================================================
# STREAMLINES
# ============================================================================
@dataclass(frozen=True)
class StreamlinePolicy:
    """Step size, budget and exit box for streamline marching.

    Lengths are fractions of the characteristic length. ``stagnation_speed``
    stops a line whose local speed falls below it; ``None`` never stops early.
    """

    step_fraction: float = 0.03
    max_steps: int = 380
    x_max: float = 1.6
    x_min: float = -0.8
    y_max: float = 1.6
    speed_floor: float = 1e-5
    stagnation_speed: Optional[float] = None
    include_seed: bool = False

    def outside(self, point, length):
        x, y = point
        return x > self.x_max * length or x < self.x_min * length or abs(y) > self.y_max * length


DEFAULT_POLICY = StreamlinePolicy()
STAGNATION_EXIT_POLICY = StreamlinePolicy(stagnation_speed=1e-3)


def integrate_streamline(seed, velocity_fn, characteristic_length, policy=DEFAULT_POLICY):
    """March a tracer with RK4 at a fixed arc length per step.

    Each stage velocity is normalised to unit speed, so points are evenly
    spaced along the line whatever the local speed.
    """
    h = policy.step_fraction * characteristic_length
    p = np.array(seed, dtype=float).reshape(2)
    points = [p.copy()] if policy.include_seed else []

    def stage(q):
        v = np.asarray(velocity_fn(q), dtype=float)
        speed = max(policy.speed_floor, float(np.hypot(v[0], v[1])))
        return v / speed * h, speed

    for _ in range(policy.max_steps):
        k1, speed = stage(p)
        if policy.stagnation_speed is not None and speed < policy.stagnation_speed:
            logger.debug("Streamline from %s stopped near stagnation at %s", seed, p)
            break
        k2, _ = stage(p + 0.5 * k1)
        k3, _ = stage(p + 0.5 * k2)
        k4, _ = stage(p + k3)
        p = p + (k1 + 2 * k2 + 2 * k3 + k4) / 6.0
        points.append(p.copy())

        if policy.outside(p, characteristic_length):
            break

    return np.array(points).reshape(-1, 2)


def seed_points(count, chord, x_fraction=-0.6, span_fraction=1.6):
    """Seeds on a vertical line upstream, centred on the chord line."""
    count = int(count)
    if count <= 0:
        return np.zeros((0, 2))
    spacing = span_fraction * chord / max(1, count - 1)
    bias = (count - 1) * 0.5
    y = (np.arange(count) - bias) * spacing
    return np.column_stack([np.full(count, x_fraction * chord), y])


def trace_streamlines(solution, freestream_speed, angle_of_attack, chord, count, policy=DEFAULT_POLICY):
    velocity_at = velocity_function(solution, freestream_speed, angle_of_attack)
    return [integrate_streamline(seed, velocity_at, chord, policy) for seed in seed_points(count, chord)]
