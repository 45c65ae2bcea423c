from typing import Optional

import numpy as np

from particle_trace.config import settings
from particle_trace.simulation.session import FrameInput, SimulationSession


def run_headless(
    ticks: Optional[int] = None,
    frame_interval_ms: Optional[int] = None,
    seed: Optional[int] = None,
    new_run: bool = False,
    start_ms: int = 0,
) -> SimulationSession:
    """
    Drive a session without a window, using a synthetic clock.
    Frame 0 resumes the run, `ticks` frames integrate, the last frame ends the simulation.
    new_run=True first starts a fresh run (random-walk policy by default).
    """
    ticks = int(settings.HEADLESS_TICKS if ticks is None else ticks)
    interval = int(settings.FRAME_INTERVAL_MS if frame_interval_ms is None else frame_interval_ms)
    if ticks < 1:
        raise ValueError("ticks must be >= 1")
    if interval <= 0:
        raise ValueError("frame_interval_ms must be > 0")

    rng = np.random.default_rng(settings.DEFAULT_RANDOM_SEED if seed is None else seed)
    session = SimulationSession(rng=rng)

    now = int(start_ms)
    session.tick(FrameInput(timestamp_ms=now, new_run=new_run, toggle_pause=True))
    for _ in range(ticks - 1):
        now += interval
        session.tick(FrameInput(timestamp_ms=now))
    now += interval
    session.tick(FrameInput(timestamp_ms=now, end_simulation=True))
    return session
