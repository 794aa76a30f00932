from dataclasses import dataclass, replace

import numpy as np

MIN_POINT_COUNT = 20

# Last coefficient of the NACA half-thickness polynomial
TE_CLOSED = 0.1036
TE_OPEN = 0.1015


# ============================================================================
# SHAPE PARAMETERS
# ============================================================================
@dataclass(frozen=True)
class AirfoilShape:
    """NACA 4-digit shape parameters, as chord fractions."""

    max_camber: float
    camber_location: float
    thickness: float
    chord: float = 1.0
    point_count: int = 140
    closed_te: bool = True

    @classmethod
    def from_series(cls, series, chord=1.0, point_count=140, closed_te=True):
        series = str(series).strip()
        if len(series) != 4 or not series.isdigit():
            raise ValueError(f"Not a NACA 4-digit series: {series!r}")
        return cls(
            max_camber=int(series[0]) / 100,
            camber_location=int(series[1]) / 10,
            thickness=int(series[2:4]) / 100,
            chord=chord,
            point_count=point_count,
            closed_te=closed_te,
        )

    def clamped(self):
        """Copy with every parameter forced into its valid range."""
        chord = float(self.chord)
        if not chord > 0.0:
            chord = 1.0
        return replace(
            self,
            max_camber=float(np.clip(self.max_camber, 0.0, 1.0)),
            camber_location=float(np.clip(self.camber_location, 0.0, 1.0)),
            thickness=float(np.clip(self.thickness, 0.0, 1.0)),
            chord=chord,
            point_count=max(MIN_POINT_COUNT, int(np.floor(self.point_count))),
        )


@dataclass(frozen=True)
class AirfoilSurface:
    """Upper, lower and camber points, one row per cosine-spaced station.

    Station ``i`` shares the camber-line angle on both surfaces, not the
    x coordinate: thickness is applied along the camber normal.
    """

    upper: np.ndarray
    lower: np.ndarray
    camber: np.ndarray

    @property
    def station_count(self):
        return len(self.camber)


# ============================================================================
# GEOMETRY GENERATION
# ============================================================================
class NACA4Airfoil:
    """Generate NACA 4-digit airfoil coordinates."""

    def __init__(self, shape):
        self.shape = shape.clamped()
        self.m = self.shape.max_camber
        self.p = self.shape.camber_location
        self.t = self.shape.thickness
        self.num_points = self.shape.point_count

    def stations(self):
        beta = np.linspace(0, np.pi, self.num_points + 1)
        return 0.5 * (1 - np.cos(beta))

    def camber_line(self, x):
        yc = np.zeros_like(x)
        dycdx = np.zeros_like(x)
        if self.m <= 0 or self.p <= 0:
            return yc, dycdx

        m, p = self.m, self.p
        for i in range(len(x)):
            if x[i] < p or p >= 1.0:
                yc[i] = m / p**2 * (2 * p * x[i] - x[i] ** 2)
                dycdx[i] = 2 * m / p**2 * (p - x[i])
            else:
                yc[i] = m / (1 - p) ** 2 * ((1 - 2 * p) + 2 * p * x[i] - x[i] ** 2)
                dycdx[i] = 2 * m / (1 - p) ** 2 * (p - x[i])
        return yc, dycdx

    def half_thickness(self, x):
        k4 = TE_CLOSED if self.shape.closed_te else TE_OPEN
        return 5 * self.t * (
            0.2969 * np.sqrt(x)
            - 0.1260 * x
            - 0.3516 * x**2
            + 0.2843 * x**3
            - k4 * x**4
        )

    def generate(self):
        x = self.stations()
        yc, dycdx = self.camber_line(x)
        yt = self.half_thickness(x)

        theta = np.arctan(dycdx)
        xU = x - yt * np.sin(theta)
        xL = x + yt * np.sin(theta)
        yU = yc + yt * np.cos(theta)
        yL = yc - yt * np.cos(theta)

        c = self.shape.chord
        return AirfoilSurface(
            upper=c * np.column_stack([xU, yU]),
            lower=c * np.column_stack([xL, yL]),
            camber=c * np.column_stack([x, yc]),
        )


def generate_airfoil(shape):
    return NACA4Airfoil(shape).generate()


def build_contour(surface):
    """Upper surface leading edge to trailing edge, then lower surface back."""
    return np.concatenate([surface.upper, np.flip(surface.lower, axis=0)])
