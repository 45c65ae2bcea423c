# particle_trace/interpolation/derivatives.py
from particle_trace.config import settings
from particle_trace.physics.vector import Vector3


class DerivativeEstimator:
    """
    Forward finite differences on top of an interpolator's evaluate():
        v(t) = (f(t + eps) - f(t)) / eps
        a(t) = (v(t + eps) - v(t)) / eps
    Nothing is cached: every query re-evaluates the full Lagrange sum
    (2 evaluations for v, 4 for a).
    """
    def __init__(self, eps: float = None):
        if eps is None:
            eps = settings.DERIVATIVE_EPS
        if eps <= 0:
            raise ValueError("eps must be > 0")
        self.eps = float(eps)

    def first(self, axis, t: float) -> float:
        return (axis.evaluate(t + self.eps) - axis.evaluate(t)) / self.eps

    def second(self, axis, t: float) -> float:
        return (self.first(axis, t + self.eps) - self.first(axis, t)) / self.eps

    def velocity(self, trajectory, t: float) -> Vector3:
        return Vector3(*(self.first(axis, t) for axis in trajectory.axes))

    def acceleration(self, trajectory, t: float) -> Vector3:
        return Vector3(*(self.second(axis, t) for axis in trajectory.axes))

    def speed(self, trajectory, t: float) -> float:
        return self.velocity(trajectory, t).norm()

    def acceleration_magnitude(self, trajectory, t: float) -> float:
        return self.acceleration(trajectory, t).norm()
