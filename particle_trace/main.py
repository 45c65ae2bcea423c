# particle_trace/main.py
import logging
import traceback

import matplotlib

from particle_trace.config import settings
from particle_trace.simulation.runner import run_headless
from particle_trace.visualization.plots import plot_kinematics, plot_reconstruction

# --- Setup logger ------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-7s  %(message)s",
    datefmt="%H:%M:%S"
)
log = logging.getLogger("main")

_NON_INTERACTIVE_BACKENDS = {"agg", "cairo", "pdf", "pgf", "ps", "svg", "template"}


def is_headless() -> bool:
    return matplotlib.get_backend().lower() in _NON_INTERACTIVE_BACKENDS


def run_headless_demo():
    """
    Scripted run for environments without a display: simulate, reconstruct, save plots.
    """
    session = run_headless(seed=settings.DEFAULT_RANDOM_SEED)
    if session.trajectory is None:
        log.warning("Not enough samples recorded (%d); nothing to reconstruct.", len(session.recorder))
        return session

    out = session.snapshot()
    log.info(
        "Reconstructed %d samples, t=[%.3f, %.3f] s, speed(t0)=%.4f, accel(t0)=%.4f",
        len(session.trajectory), session.trajectory.t_first, session.trajectory.t_last,
        out.speed, out.acceleration_magnitude
    )

    try:
        plot_reconstruction(session.trajectory)
        plot_kinematics(session.trajectory, session.estimator)
        log.info("Plots generated.")
    except Exception as e:
        log.warning("Plotting failed: %s", e)
    return session


def main():
    try:
        settings.validate_settings()

        if is_headless():
            log.info("No interactive matplotlib backend (%s); running headless.", matplotlib.get_backend())
            run_headless_demo()
            return

        # imported here so a headless run never builds a figure manager
        from particle_trace.visualization.viewer import launch_viewer

        log.info("Opening viewer. SPACE to start, ENTER to end the run, N for a new run, P for the trace.")
        launch_viewer()
        log.info("Window closed.")

    except Exception:
        log.error("Fatal exception during run:")
        traceback.print_exc()


if __name__ == "__main__":
    main()
