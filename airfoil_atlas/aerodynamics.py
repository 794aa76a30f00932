import numpy as np

CL_LIMIT = 1.6


def dynamic_pressure(rho, velocity):
    return 0.5 * rho * velocity**2


def reynolds_number_chord(rho, velocity, chord, mu):
    return rho * velocity * chord / mu


def thin_airfoil_lift_coefficient(alpha, limit=CL_LIMIT):
    """Thin-airfoil lift, 2*pi*alpha, held inside +-limit as a crude stall."""
    return float(np.clip(2 * np.pi * alpha, -limit, limit))


def lift_force(q, area, cl):
    return q * area * cl


def drag_force(q, area, cd):
    return q * area * cd


def lift_direction(alpha):
    """Unit vector normal to the freestream."""
    return np.array([-np.sin(alpha), np.cos(alpha)])


def drag_direction(alpha):
    """Unit vector along the freestream, pointing upstream.

    This is the direction the drag arrow is drawn in.
    """
    return np.array([-np.cos(alpha), -np.sin(alpha)])
