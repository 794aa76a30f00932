import logging

import numpy as np
import pytest

from airfoil_atlas.panels import build_panels
from airfoil_atlas.solver import (
    PanelMethodSolution,
    find_trailing_edge_panels,
    gaussian_solve,
    lift_coefficient,
    pressure_lift_coefficient,
    solve_panel_method,
    tangency_residual,
)


def circle(n=72, radius=1.0):
    theta = np.linspace(0.0, 2 * np.pi, n, endpoint=False)
    return radius * np.column_stack([np.cos(theta), np.sin(theta)])


def test_gaussian_solve_matches_numpy():
    rng = np.random.default_rng(7)
    A = rng.normal(size=(12, 12)) + 12 * np.eye(12)
    b = rng.normal(size=12)
    np.testing.assert_allclose(gaussian_solve(A, b), np.linalg.solve(A, b), rtol=1e-10)


def test_gaussian_solve_needs_pivoting():
    A = np.array([[0.0, 1.0], [1.0, 1.0]])
    np.testing.assert_allclose(gaussian_solve(A, [2.0, 3.0]), [1.0, 2.0])


def test_gaussian_solve_singular_system_stays_finite():
    A = np.array([[1.0, 2.0], [2.0, 4.0]])
    x = gaussian_solve(A, [1.0, 2.0])
    assert np.all(np.isfinite(x))


def test_gaussian_solve_does_not_modify_inputs():
    A = np.array([[0.0, 1.0], [1.0, 1.0]])
    b = np.array([2.0, 3.0])
    gaussian_solve(A, b)
    np.testing.assert_array_equal(A, [[0.0, 1.0], [1.0, 1.0]])
    np.testing.assert_array_equal(b, [2.0, 3.0])


@pytest.mark.parametrize("contour", [None, [], [[0.0, 0.0], [1.0, 0.0]]])
def test_degenerate_contour_gives_empty_solution(contour):
    solution = solve_panel_method(contour, 10.0, 0.1)
    assert solution.is_empty
    assert solution.panel_count == 0
    assert solution.circulation == 0.0
    assert solution.pressure_coefficient.size == 0
    assert lift_coefficient(solution, 10.0, 1.0) == 0.0


def test_empty_solution_helpers():
    solution = PanelMethodSolution.empty()
    assert solution.control_points.shape == (0, 2)
    assert solution.trailing_edge_panels == (None, None)
    assert tangency_residual(solution, 1.0, 0.0).size == 0


def test_cylinder_pressure_distribution():
    solution = solve_panel_method(circle(), 1.0, 0.0)
    theta = np.arctan2(solution.control_points[:, 1], solution.control_points[:, 0])
    np.testing.assert_allclose(solution.pressure_coefficient, 1 - 4 * np.sin(theta) ** 2, atol=0.1)
    assert solution.circulation == pytest.approx(0.0, abs=1e-8)


def test_tangency_residual_vanishes(naca2412_solution):
    residual = tangency_residual(naca2412_solution, 40.0, np.deg2rad(5.0))
    assert np.max(np.abs(residual)) < 1e-8 * 40.0


def test_kutta_condition_holds(naca2412_solution):
    iu, il = naca2412_solution.trailing_edge_panels
    assert iu != il
    vt = naca2412_solution.tangential_velocity
    assert abs(vt[iu]) == pytest.approx(abs(vt[il]), rel=1e-8)
    # Both sides leave the trailing edge in the same direction
    flow_u = vt[iu] * naca2412_solution.panels[iu].tangent
    flow_l = vt[il] * naca2412_solution.panels[il].tangent
    assert np.dot(flow_u, flow_l) > 0.0


def test_trailing_edge_panels_are_rearmost(naca2412_solution):
    iu, il = find_trailing_edge_panels(naca2412_solution.panels)
    controls = naca2412_solution.control_points
    assert controls[iu, 1] >= 0.0
    assert controls[il, 1] <= 0.0
    assert controls[iu, 0] == pytest.approx(controls[:, 0].max())


def test_trailing_edge_panels_far_apart_are_reported(caplog):
    # Lower surface lies above the chord line everywhere except the nose
    loop = np.array([[0.0, 0.02], [0.5, 0.3], [1.0, 0.1], [0.5, 0.2], [0.0, -0.02]])
    panels = build_panels(loop)
    with caplog.at_level(logging.WARNING, logger="airfoil_atlas.solver"):
        iu, il = find_trailing_edge_panels(panels)
    assert panels[iu].control[0] == pytest.approx(0.75)
    assert panels[il].control[0] == pytest.approx(0.0)
    assert "far apart" in caplog.text


def test_trailing_edge_panels_of_airfoil_are_not_reported(naca2412_solution, caplog):
    with caplog.at_level(logging.WARNING, logger="airfoil_atlas.solver"):
        find_trailing_edge_panels(naca2412_solution.panels)
    assert "far apart" not in caplog.text


def test_symmetric_section_at_zero_incidence(naca0012_solution):
    solution = naca0012_solution
    assert solution.circulation == pytest.approx(0.0, abs=1e-8)

    controls = solution.control_points
    upper = controls[:, 1] > 0.0
    iu = np.argsort(controls[upper, 0])
    il = np.argsort(controls[~upper, 0])
    np.testing.assert_allclose(controls[upper][iu, 0], controls[~upper][il, 0], atol=1e-12)
    np.testing.assert_allclose(
        solution.pressure_coefficient[upper][iu],
        solution.pressure_coefficient[~upper][il],
        atol=1e-8,
    )


def test_cp_recovered_from_tangential_velocity(naca2412_solution):
    expected = 1.0 - (naca2412_solution.tangential_velocity / 40.0) ** 2
    np.testing.assert_allclose(naca2412_solution.pressure_coefficient, expected)


def test_zero_freestream_speed_does_not_divide_by_zero(naca0012_contour):
    solution = solve_panel_method(naca0012_contour, 0.0, 0.0)
    assert np.all(np.isfinite(solution.pressure_coefficient))
    np.testing.assert_allclose(solution.tangential_velocity, 0.0, atol=1e-12)


def test_negative_incidence_gives_negative_circulation(naca0012_contour):
    solution = solve_panel_method(naca0012_contour, 10.0, np.deg2rad(-4.0))
    assert solution.circulation < 0.0


def test_lift_estimates_agree(naca2412_solution):
    cl_kj = lift_coefficient(naca2412_solution, 40.0, 1.0)
    cl_p = pressure_lift_coefficient(naca2412_solution, np.deg2rad(5.0), 1.0)
    assert 0.6 < cl_kj < 1.1
    assert cl_p == pytest.approx(cl_kj, rel=0.05)


def test_clockwise_input_gives_same_solution(naca2412_contour):
    forward = solve_panel_method(naca2412_contour, 40.0, 0.1)
    backward = solve_panel_method(naca2412_contour[::-1], 40.0, 0.1)
    assert backward.circulation == pytest.approx(forward.circulation, rel=1e-6)
