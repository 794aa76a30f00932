import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path

import numpy as np

from airfoil_atlas.atmosphere import density_at_altitude
from airfoil_atlas.boundary_layer import LAMINAR, TURBULENT
from airfoil_atlas.geometry import AirfoilShape


@dataclass(frozen=True)
class AtlasState:
    """Control-panel state: flow conditions, shape and overlay toggles."""

    alpha_deg: float = 6.0
    freestream_speed: float = 42.0  # m/s
    chord: float = 1.2  # m
    m: float = 0.02
    p: float = 0.4
    t: float = 0.12
    chord_points: int = 140
    streamline_count: int = 12
    laminar: bool = True
    use_altitude: bool = False
    altitude: float = 0.0  # m
    rho: float = 1.225  # kg/m³
    atmosphere: str = "isa"
    show_streamlines: bool = True
    show_pressure: bool = True
    show_shear: bool = True

    @property
    def alpha(self):
        return float(np.deg2rad(self.alpha_deg))

    @property
    def regime(self):
        return LAMINAR if self.laminar else TURBULENT

    @property
    def density(self):
        if self.use_altitude:
            return density_at_altitude(self.altitude, self.atmosphere)
        return self.rho

    @property
    def shape(self):
        return AirfoilShape(
            max_camber=self.m,
            camber_location=self.p,
            thickness=self.t,
            chord=self.chord,
            point_count=self.chord_points,
        )

    def update(self, **changes):
        return replace(self, **changes)

    def to_dict(self):
        return asdict(self)


def state_keys():
    return [f.name for f in fields(AtlasState)]


def load_state(path, base=None):
    """Apply the overrides in a JSON file to ``base`` (defaults if None)."""
    with open(Path(path), "r") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"State file {path} must hold a JSON object")
    unknown = sorted(set(data) - set(state_keys()))
    if unknown:
        raise TypeError(f"Unknown state keys in {path}: {', '.join(unknown)}")
    return (base or AtlasState()).update(**data)
