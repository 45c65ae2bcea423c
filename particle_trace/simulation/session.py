"""
Simulation session: the single owner of particle, recorder and reconstruction.

Lifecycle:
    PAUSED -> RUNNING -> STOPPED (reconstruct once) -> new run -> PAUSED

One call to tick() per rendered frame. Within a frame the order is fixed:
triggers -> integrate -> record -> (on stop) reconstruct -> derive -> scrub.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from particle_trace.config import settings
from particle_trace.interpolation.derivatives import DerivativeEstimator
from particle_trace.interpolation.lagrange import TrajectoryInterpolator
from particle_trace.physics.particle import Particle
from particle_trace.physics.policies import FixedAcceleration, make_policy
from particle_trace.physics.vector import Vector3
from particle_trace.simulation.recorder import TrajectoryRecorder, TrajectorySample
from particle_trace.simulation.scrub import ScrubMapper

logger = logging.getLogger(__name__)


class SessionState(Enum):
    PAUSED = "paused"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class FrameInput:
    """
    Everything the render/input loop hands to the core for one frame.
    Trigger flags are edge-triggered: each is consumed by exactly one tick.
    """
    timestamp_ms: int
    pointer: Optional[float] = None
    toggle_pause: bool = False
    end_simulation: bool = False
    new_run: bool = False
    toggle_trace: bool = False


@dataclass
class FrameOutput:
    state: SessionState
    position: Vector3
    speed: Optional[float]
    acceleration_magnitude: Optional[float]
    samples: Tuple[TrajectorySample, ...] = field(default_factory=tuple)
    show_trace: bool = False
    scrub_time: Optional[float] = None
    scrub_position: Optional[float] = None


class SimulationSession:
    def __init__(self, rng=None, estimator: Optional[DerivativeEstimator] = None):
        self.rng = rng if rng is not None else np.random.default_rng(settings.DEFAULT_RANDOM_SEED)
        self.estimator = estimator if estimator is not None else DerivativeEstimator(settings.DERIVATIVE_EPS)
        self.recorder = TrajectoryRecorder()
        self.particle = Particle(policy=FixedAcceleration())
        self.state = SessionState.PAUSED
        self.show_trace = False
        self.trajectory: Optional[TrajectoryInterpolator] = None
        self.mapper: Optional[ScrubMapper] = None
        self.scrub_time: Optional[float] = None
        self.run_index = 0
        self._run_start_ms: Optional[int] = None

    # ------------------------------------------------------------------ triggers
    def toggle_pause(self):
        if self.state == SessionState.RUNNING:
            self.state = SessionState.PAUSED
            logger.info("Run %d paused after %d samples", self.run_index, len(self.recorder))
        elif self.state == SessionState.PAUSED:
            self.state = SessionState.RUNNING
            logger.info("Run %d running", self.run_index)

    def end_simulation(self):
        """
        RUNNING/PAUSED -> STOPPED. Freezes the recorder and reconstructs exactly once.
        """
        if self.state == SessionState.STOPPED:
            return
        self.recorder.stop()
        self.state = SessionState.STOPPED
        self._reconstruct()

    def new_run(self):
        self.run_index += 1
        policy = make_policy(settings.NEW_RUN_POLICY, rng=self.rng)
        self.particle = Particle(policy=policy)
        self.recorder.clear()
        self.trajectory = None
        self.mapper = None
        self.scrub_time = None
        self.show_trace = False
        self.state = SessionState.PAUSED
        self._run_start_ms = None
        logger.info("New run %d (policy=%s)", self.run_index, policy.name)

    def toggle_trace(self):
        if self.state == SessionState.STOPPED:
            self.show_trace = not self.show_trace

    # ------------------------------------------------------------------ frame
    def tick(self, frame: FrameInput) -> FrameOutput:
        if frame.new_run:
            self.new_run()
        if self._run_start_ms is None:
            self._run_start_ms = int(frame.timestamp_ms)
        if frame.toggle_pause:
            self.toggle_pause()
        if frame.end_simulation:
            self.end_simulation()
        if frame.toggle_trace:
            self.toggle_trace()

        if self.state == SessionState.RUNNING:
            self._advance(int(frame.timestamp_ms))

        if self.state == SessionState.STOPPED and frame.pointer is not None:
            self.scrub(frame.pointer)

        return self.snapshot()

    def _advance(self, now_ms: int):
        self.particle.step()

        last = self.recorder.last
        if last is not None and now_ms <= last.timestamp_ms:
            # interpolation needs distinct times; a frame in the same millisecond is not recorded
            logger.debug("Dropping sample at %d ms (not after previous sample)", now_ms)
        else:
            self.recorder.record(now_ms, self.particle.position)

        if settings.SCALE_ACCELERATION_BY_DT:
            dt = (now_ms - self._run_start_ms) / settings.DT_DIVISOR
            self.particle.scale_acceleration(dt)

    def _reconstruct(self):
        n = len(self.recorder)
        if n < settings.MIN_RECONSTRUCTION_SAMPLES:
            logger.info("Reconstruction deferred: %d sample(s) recorded", n)
            return
        self.trajectory = TrajectoryInterpolator.from_control_points(*self.recorder.control_points())
        self.mapper = ScrubMapper(
            self.trajectory.t_first, self.trajectory.t_last,
            right_to_left=settings.SCRUB_RIGHT_TO_LEFT,
        )
        self.scrub_time = self.mapper.t_first
        logger.info(
            "Reconstructed trajectory from %d samples over %.3f s",
            n, self.mapper.span
        )

    # ------------------------------------------------------------------ queries
    def scrub(self, pointer: float) -> Optional[float]:
        if self.mapper is None:
            return None
        self.scrub_time = self.mapper.time_at(pointer)
        return self.scrub_time

    def snapshot(self) -> FrameOutput:
        samples = self.recorder.samples

        if self.state == SessionState.STOPPED and self.trajectory is not None:
            t = self.scrub_time
            return FrameOutput(
                state=self.state,
                position=self.trajectory.position_at(t),
                speed=self.estimator.speed(self.trajectory, t),
                acceleration_magnitude=self.estimator.acceleration_magnitude(self.trajectory, t),
                samples=samples,
                show_trace=self.show_trace,
                scrub_time=t,
                scrub_position=self.mapper.position_of(t),
            )

        if self.state == SessionState.STOPPED:
            return FrameOutput(
                state=self.state,
                position=self.particle.position,
                speed=None,
                acceleration_magnitude=None,
                samples=samples,
                show_trace=self.show_trace,
            )

        return FrameOutput(
            state=self.state,
            position=self.particle.position,
            speed=self.particle.velocity.norm(),
            acceleration_magnitude=self.particle.acceleration.norm(),
            samples=samples,
        )
