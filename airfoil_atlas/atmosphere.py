import numpy as np

G0 = 9.80665  # m/s²
RHO0 = 1.225  # kg/m³
P0 = 101325.0  # Pa
T0 = 288.15  # K
LAPSE_TROPOSPHERE = 0.0065  # K/m
R_AIR = 287.05  # J/(kg·K)
SCALE_HEIGHT = 8500.0  # m
TROPOPAUSE = 11000.0  # m


def exponential_density(altitude):
    """Isothermal approximation, rho0 * exp(-h / H)."""
    return RHO0 * np.exp(-altitude / SCALE_HEIGHT)


def isa_density(altitude):
    """ISA troposphere density; altitude clamped to [0, 11 km]."""
    h = np.clip(altitude, 0.0, TROPOPAUSE)
    T = T0 - LAPSE_TROPOSPHERE * h
    p = P0 * (T / T0) ** (G0 / (R_AIR * LAPSE_TROPOSPHERE))
    return p / (R_AIR * T)


def density_at_altitude(altitude, model="isa"):
    if model == "isa":
        return float(isa_density(altitude))
    if model == "exponential":
        return float(exponential_density(altitude))
    raise ValueError(f"Unknown atmosphere model: {model!r}")
