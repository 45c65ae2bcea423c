import os
from types import SimpleNamespace

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pytest  # noqa: E402

from particle_trace import main as app  # noqa: E402
from particle_trace.config import settings  # noqa: E402
from particle_trace.simulation.session import SessionState, SimulationSession  # noqa: E402
from particle_trace.visualization.plots import plot_kinematics, plot_reconstruction  # noqa: E402
from particle_trace.simulation.runner import run_headless  # noqa: E402
from particle_trace.visualization.viewer import TrajectoryViewer  # noqa: E402


@pytest.fixture
def viewer():
    v = TrajectoryViewer(SimulationSession(rng=np.random.default_rng(0)))
    yield v
    plt.close(v.fig)


def _press(v, key):
    v._on_key(SimpleNamespace(key=key))


def test_key_presses_are_consumed_once(viewer):
    _press(viewer, " ")
    out = viewer.step_frame(0)
    assert out.state == SessionState.RUNNING

    out = viewer.step_frame(10)
    assert out.state == SessionState.RUNNING
    assert len(out.samples) == 2


def test_unknown_keys_are_ignored(viewer):
    _press(viewer, "q")
    out = viewer.step_frame(0)
    assert out.state == SessionState.PAUSED


def test_end_run_scrub_and_new_run(viewer):
    _press(viewer, " ")
    for ms in range(0, 50, 10):
        viewer.step_frame(ms)

    _press(viewer, "enter")
    out = viewer.step_frame(60)
    assert out.state == SessionState.STOPPED
    assert viewer.slider_ax.get_visible()

    viewer.slider.set_val(1.0)
    out = viewer.step_frame(70)
    assert out.scrub_time == pytest.approx(0.04)

    _press(viewer, "p")
    out = viewer.step_frame(80)
    assert viewer.trace_plot.get_visible()
    assert "Time:" in viewer.info_text.get_text()

    _press(viewer, "n")
    out = viewer.step_frame(90)
    assert out.state == SessionState.PAUSED
    assert viewer.slider.val == 0.0
    assert not viewer.slider_ax.get_visible()
    assert not viewer.trace_plot.get_visible()


def test_plots_are_saved(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "OUTPUT_DIR", str(tmp_path))
    session = run_headless(ticks=6)

    recon = plot_reconstruction(session.trajectory, n=20)
    kin = plot_kinematics(session.trajectory, session.estimator, n=20)
    assert os.path.exists(recon)
    assert os.path.exists(kin)


def test_main_runs_headless(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "OUTPUT_DIR", str(tmp_path))
    monkeypatch.setattr(settings, "HEADLESS_TICKS", 8)
    monkeypatch.setattr(settings, "PLOT_SAMPLES", 20)

    assert app.is_headless()
    app.main()
    assert os.path.exists(os.path.join(str(tmp_path), "reconstruction.png"))
    assert os.path.exists(os.path.join(str(tmp_path), "kinematics.png"))


def test_slider_round_trips_with_right_to_left_scrub(viewer, monkeypatch):
    monkeypatch.setattr(settings, "SCRUB_RIGHT_TO_LEFT", True)
    _press(viewer, " ")
    for ms in range(0, 50, 10):
        viewer.step_frame(ms)

    _press(viewer, "enter")
    out = viewer.step_frame(60)
    assert out.scrub_time == pytest.approx(0.0)
    assert viewer.slider.val == pytest.approx(1.0)

    viewer.slider.set_val(0.25)
    out = viewer.step_frame(70)
    assert out.scrub_time == pytest.approx(0.03)
    assert out.scrub_position == pytest.approx(0.25)
    assert viewer.slider.val == pytest.approx(0.25)
