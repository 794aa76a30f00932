"""Panel-method flow solver and visualiser for NACA 4-digit airfoils."""

from airfoil_atlas.boundary_layer import (
    DragBreakdown,
    drag_coefficients,
    skin_friction_coefficient,
    wall_shear_stress,
)
from airfoil_atlas.flowfield import (
    StreamlinePolicy,
    evaluate_velocity,
    integrate_streamline,
    velocity_function,
)
from airfoil_atlas.geometry import AirfoilShape, AirfoilSurface, build_contour, generate_airfoil
from airfoil_atlas.panels import Panel, build_panels, panel_influence
from airfoil_atlas.solver import PanelMethodSolution, solve_panel_method

__version__ = "0.1.0"

__all__ = [
    "AirfoilShape",
    "AirfoilSurface",
    "DragBreakdown",
    "Panel",
    "PanelMethodSolution",
    "StreamlinePolicy",
    "build_contour",
    "build_panels",
    "drag_coefficients",
    "evaluate_velocity",
    "generate_airfoil",
    "integrate_streamline",
    "panel_influence",
    "skin_friction_coefficient",
    "solve_panel_method",
    "velocity_function",
    "wall_shear_stress",
]
