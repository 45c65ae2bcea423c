import warnings

import numpy as np
import pytest

from particle_trace.config import settings
from particle_trace.config.settings import INITIAL_ACCELERATION, INITIAL_POSITION, INITIAL_VELOCITY
from particle_trace.physics.particle import Particle
from particle_trace.physics.policies import (
    FixedAcceleration,
    RandomWalkAcceleration,
    make_policy,
)
from particle_trace.physics.vector import Vector3


def test_vector_arithmetic():
    a = Vector3(1.0, 2.0, 3.0)
    b = Vector3(0.5, -1.0, 2.0)
    assert a + b == Vector3(1.5, 1.0, 5.0)
    assert a - b == Vector3(0.5, 3.0, 1.0)
    assert a.scale(2.0) == Vector3(2.0, 4.0, 6.0)
    assert 2.0 * a == a * 2.0
    assert Vector3(3.0, 4.0, 0.0).norm() == pytest.approx(5.0)

    with pytest.raises(ValueError):
        Vector3.from_iterable([1.0, 2.0])


def test_fixed_particle_semi_implicit_euler():
    p = Particle()
    assert tuple(p.position) == INITIAL_POSITION
    assert tuple(p.velocity) == INITIAL_VELOCITY

    p.step()
    ax, ay, az = INITIAL_ACCELERATION
    expected_v = (INITIAL_VELOCITY[0] + ax, INITIAL_VELOCITY[1] + ay, INITIAL_VELOCITY[2] + az)
    expected_r = tuple(r + v for r, v in zip(INITIAL_POSITION, expected_v))
    assert tuple(p.velocity) == pytest.approx(expected_v)
    assert tuple(p.position) == pytest.approx(expected_r)
    assert tuple(p.acceleration) == pytest.approx(INITIAL_ACCELERATION)


def test_scale_acceleration():
    p = Particle(acceleration=(1.0, -2.0, 0.5))
    p.scale_acceleration(0.5)
    assert p.acceleration == Vector3(0.5, -1.0, 0.25)


def test_no_bounds_on_runaway_motion():
    p = Particle(position=(0, 0, 0), velocity=(0, 0, 0), acceleration=(1e6, 0, 0))
    for _ in range(100):
        p.step()
    assert p.position.x > 1e9


def test_random_walk_always_refreshes_within_range():
    rng = np.random.default_rng(7)
    policy = RandomWalkAcceleration(accel_range=1.0, divisor=4.0, refresh_probability=1.0, rng=rng)
    p = Particle(acceleration=(9.0, 9.0, 9.0), policy=policy)

    for _ in range(50):
        p.step()
        assert all(-0.25 <= c <= 0.25 for c in p.acceleration)


def test_random_walk_never_refreshes():
    policy = RandomWalkAcceleration(refresh_probability=0.0, rng=np.random.default_rng(1))
    p = Particle(acceleration=(0.1, 0.2, 0.3), policy=policy)
    for _ in range(20):
        p.step()
    assert p.acceleration == Vector3(0.1, 0.2, 0.3)


def test_random_walk_is_reproducible_with_seed():
    def run(seed):
        p = Particle(policy=RandomWalkAcceleration(rng=np.random.default_rng(seed)))
        return [tuple(p.step().r) for _ in range(30)]

    assert run(3) == run(3)


def test_random_walk_validation():
    with pytest.raises(ValueError):
        RandomWalkAcceleration(refresh_probability=1.5)
    with pytest.raises(ValueError):
        RandomWalkAcceleration(divisor=0.0)


def test_make_policy():
    assert isinstance(make_policy("fixed"), FixedAcceleration)
    assert isinstance(make_policy("random_walk"), RandomWalkAcceleration)
    with pytest.raises(ValueError):
        make_policy("brownian")


def test_norm_of_overflowing_vector_is_inf_without_warning():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert Vector3(1e200, 1e200, 0.0).norm() == float("inf")


def test_make_policy_reads_current_settings(monkeypatch):
    monkeypatch.setattr(settings, "RANDOM_WALK_RANGE", 0.0)
    monkeypatch.setattr(settings, "RANDOM_WALK_DIVISOR", 2.0)
    monkeypatch.setattr(settings, "RANDOM_WALK_REFRESH_PROBABILITY", 1.0)
    policy = make_policy("random_walk", rng=np.random.default_rng(0))

    assert (policy.accel_range, policy.divisor, policy.refresh_probability) == (0.0, 2.0, 1.0)
    p = Particle(policy=policy)
    p.step()
    assert tuple(p.acceleration) == (0.0, 0.0, 0.0)


def test_particle_defaults_read_current_settings(monkeypatch):
    monkeypatch.setattr(settings, "INITIAL_POSITION", (1.0, 2.0, 3.0))
    assert Particle().position == Vector3(1.0, 2.0, 3.0)
