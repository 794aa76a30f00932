import json
import warnings

import numpy as np
import pytest

from airfoil_atlas.cli import main, run_aoa_sweep, run_case
from airfoil_atlas.config import AtlasState, load_state
from airfoil_atlas.scene import compute_scene, envelope

FAST = AtlasState(chord_points=40, streamline_count=3)


@pytest.fixture(scope="module")
def scene():
    return compute_scene(FAST)


def test_state_defaults():
    state = AtlasState()
    assert state.alpha_deg == 6.0
    assert state.freestream_speed == 42.0
    assert state.chord == 1.2
    assert state.chord_points == 140
    assert state.streamline_count == 12
    assert state.regime == "laminar"
    assert state.density == 1.225
    assert state.alpha == pytest.approx(np.deg2rad(6.0))


def test_state_update_returns_new_state():
    state = AtlasState()
    changed = state.update(alpha_deg=2.0, laminar=False)
    assert changed.alpha_deg == 2.0
    assert changed.regime == "turbulent"
    assert state.alpha_deg == 6.0
    with pytest.raises(TypeError):
        state.update(wingspan=3.0)


def test_altitude_density():
    state = AtlasState(use_altitude=True, altitude=3000.0)
    assert state.density < 1.0
    assert state.update(atmosphere="exponential").density == pytest.approx(1.225 * np.exp(-3000 / 8500))


def test_load_state(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"alpha_deg": -3.0, "t": 0.09}))
    state = load_state(path)
    assert state.alpha_deg == -3.0
    assert state.t == 0.09
    assert state.chord == 1.2


def test_load_state_rejects_bad_files(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]")
    with pytest.raises(ValueError):
        load_state(path)
    path.write_text(json.dumps({"flaps": 1}))
    with pytest.raises(TypeError):
        load_state(path)


def test_scene_solution(scene):
    assert scene.solution.panel_count == 80
    assert scene.solution.circulation > 0.0
    assert scene.cl_kutta > 0.0
    assert scene.cl == pytest.approx(2 * np.pi * np.deg2rad(6.0))


def test_envelopes_cover_every_panel(scene):
    n = scene.solution.panel_count
    assert len(scene.pressure_upper) + len(scene.pressure_lower) == n
    assert len(scene.shear_upper) + len(scene.shear_lower) == n
    assert np.all(np.diff(scene.pressure_upper[:, 0]) >= 0)
    assert np.all(np.diff(scene.pressure_lower[:, 0]) <= 0)


def test_envelope_offsets_along_normals(scene):
    solution = scene.solution
    magnitudes = np.linspace(0.0, 1.0, solution.panel_count)
    upper, lower = envelope(solution, magnitudes, 0.1)
    offsets = np.vstack([upper, lower])
    distances = np.min(
        np.linalg.norm(offsets[:, None, :] - solution.control_points[None, :, :], axis=-1), axis=1
    )
    assert distances.max() <= 0.1 + 1e-12


def test_shear_envelope_is_normalised(scene):
    assert scene.shear_stress.max() > 0.0
    shear = np.vstack([scene.shear_upper, scene.shear_lower])
    controls = scene.solution.control_points
    offset = np.min(np.linalg.norm(shear[:, None, :] - controls[None, :, :], axis=-1), axis=1)
    assert offset.max() <= 0.05 * FAST.chord + 1e-12


def test_streamlines(scene):
    assert len(scene.streamlines) == 3
    assert compute_scene(FAST.update(show_streamlines=False)).streamlines == []


def test_forces(scene):
    chord = FAST.chord
    assert scene.drag.total == pytest.approx(scene.drag.friction + scene.drag.pressure)
    assert scene.lift_n == pytest.approx(scene.q * chord * scene.cl)
    for arrow in (scene.lift_arrow, scene.drag_arrow):
        assert 0.2 * chord <= arrow.length <= 0.9 * chord
        np.testing.assert_allclose(arrow.origin, [0.25 * chord, 0.0])
    assert np.dot(scene.lift_arrow.direction, scene.drag_arrow.direction) == pytest.approx(0.0, abs=1e-12)


def test_out_of_range_state_is_clamped():
    scene = compute_scene(AtlasState(t=1.5, m=-0.1, chord_points=5, show_streamlines=False))
    assert scene.surface.station_count == 21
    thickness = np.max(scene.surface.upper[:, 1] - scene.surface.lower[:, 1])
    assert thickness == pytest.approx(1.0 * FAST.chord, rel=0.05)
    assert np.all(np.isfinite(scene.solution.pressure_coefficient))


def test_aoa_sweep_lift_increases():
    polar = run_aoa_sweep(FAST, np.arange(-2.0, 4.5, 2.0), verbose=False)
    assert polar["aoa"].tolist() == [-2.0, 0.0, 2.0, 4.0]
    assert np.all(np.diff(polar["cl_kutta"]) > 0)
    assert np.all(polar["cd"] > 0)


def test_cli_writes_plots(tmp_path):
    code = main([
        "--output", str(tmp_path),
        "--chord-points", "30",
        "--streamline-count", "3",
        "--laminar", "false",
        "--sweep", "0", "2", "2",
        "--quiet",
    ])
    assert code == 0
    for name in ("scene.png", "cp.png", "cl_vs_aoa.png", "cd_vs_aoa.png"):
        assert (tmp_path / name).exists()


def test_zero_chord_case_plots_with_clamped_chord(tmp_path):
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        scene = run_case(AtlasState(chord=0.0, show_streamlines=False), output_dir=tmp_path, verbose=False)
    assert scene.chord == 1.0
    assert scene.surface.upper[:, 0].max() == pytest.approx(1.0)
    for name in ("scene.png", "cp.png"):
        assert (tmp_path / name).stat().st_size > 0
