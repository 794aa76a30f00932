import numpy as np
import pytest

from airfoil_atlas.geometry import AirfoilShape, build_contour, generate_airfoil
from airfoil_atlas.solver import solve_panel_method


@pytest.fixture(scope="session")
def naca2412_contour():
    shape = AirfoilShape(max_camber=0.02, camber_location=0.4, thickness=0.12, chord=1.0, point_count=80)
    return build_contour(generate_airfoil(shape))


@pytest.fixture(scope="session")
def naca0012_contour():
    shape = AirfoilShape.from_series("0012", point_count=60)
    return build_contour(generate_airfoil(shape))


@pytest.fixture(scope="session")
def naca2412_solution(naca2412_contour):
    return solve_panel_method(naca2412_contour, 40.0, np.deg2rad(5.0))


@pytest.fixture(scope="session")
def naca0012_solution(naca0012_contour):
    return solve_panel_method(naca0012_contour, 10.0, 0.0)
