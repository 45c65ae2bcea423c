# particle_trace/physics/policies.py
import numpy as np

from particle_trace.config import settings
from particle_trace.physics.vector import Vector3


class AccelerationPolicy:
    """
    Base acceleration policy. Returns the acceleration to use for the next tick.
    """
    name = "base"

    def next_acceleration(self, state) -> Vector3:
        raise NotImplementedError


class FixedAcceleration(AccelerationPolicy):
    """Leaves the acceleration untouched; only the caller mutates it."""
    name = "fixed"

    def next_acceleration(self, state) -> Vector3:
        return state.a


class RandomWalkAcceleration(AccelerationPolicy):
    """
    Random-walk force field. With probability `refresh_probability` per tick
    every component is redrawn independently from U(-range, range) / divisor.
    """
    name = "random_walk"

    def __init__(self, accel_range: float = None, divisor: float = None,
                 refresh_probability: float = None, rng=None):
        """
        Unset arguments are read from settings at construction time.
        """
        if accel_range is None:
            accel_range = settings.RANDOM_WALK_RANGE
        if divisor is None:
            divisor = settings.RANDOM_WALK_DIVISOR
        if refresh_probability is None:
            refresh_probability = settings.RANDOM_WALK_REFRESH_PROBABILITY
        if accel_range < 0:
            raise ValueError("accel_range must be >= 0")
        if divisor == 0:
            raise ValueError("divisor must be non-zero")
        if not (0.0 <= refresh_probability <= 1.0):
            raise ValueError(f"refresh_probability must be in [0, 1], got {refresh_probability}")
        self.accel_range = float(accel_range)
        self.divisor = float(divisor)
        self.refresh_probability = float(refresh_probability)
        self.rng = rng if rng is not None else np.random.default_rng()

    def next_acceleration(self, state) -> Vector3:
        if self.rng.random() >= self.refresh_probability:
            return state.a
        draw = self.rng.uniform(-self.accel_range, self.accel_range, size=3) / self.divisor
        return Vector3.from_iterable(draw)


def make_policy(name: str, rng=None) -> AccelerationPolicy:
    if name == FixedAcceleration.name:
        return FixedAcceleration()
    if name == RandomWalkAcceleration.name:
        return RandomWalkAcceleration(
            accel_range=settings.RANDOM_WALK_RANGE,
            divisor=settings.RANDOM_WALK_DIVISOR,
            refresh_probability=settings.RANDOM_WALK_REFRESH_PROBABILITY,
            rng=rng,
        )
    raise ValueError(f"Unknown acceleration policy: {name}")
