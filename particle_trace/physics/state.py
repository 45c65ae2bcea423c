# particle_trace/physics/state.py
from particle_trace.physics.vector import Vector3


class State:
    """
    Kinematic state of a single particle.
    r = position, v = velocity, a = acceleration
    """
    def __init__(self, position, velocity, acceleration=(0.0, 0.0, 0.0)):
        self.r = _as_vector(position)
        self.v = _as_vector(velocity)
        self.a = _as_vector(acceleration)

    def copy(self):
        return State(self.r, self.v, self.a)

    def __repr__(self):
        return f"State(r={tuple(self.r)}, v={tuple(self.v)}, a={tuple(self.a)})"


def _as_vector(value) -> Vector3:
    if isinstance(value, Vector3):
        return value
    return Vector3.from_iterable(value)
