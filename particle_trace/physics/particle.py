# particle_trace/physics/particle.py
from particle_trace.config import settings
from particle_trace.physics.policies import FixedAcceleration
from particle_trace.physics.solver import SemiImplicitEulerSolver
from particle_trace.physics.state import State


class Particle:
    """
    Single particle with a pluggable acceleration update policy.
    The state is mutated only by step() and scale_acceleration().
    Unset initial values come from settings at construction time.
    """
    def __init__(self, position=None, velocity=None, acceleration=None, policy=None, solver=None):
        self.state = State(
            settings.INITIAL_POSITION if position is None else position,
            settings.INITIAL_VELOCITY if velocity is None else velocity,
            settings.INITIAL_ACCELERATION if acceleration is None else acceleration,
        )
        self.policy = policy if policy is not None else FixedAcceleration()
        self.solver = solver if solver is not None else SemiImplicitEulerSolver()

    @property
    def position(self):
        return self.state.r

    @property
    def velocity(self):
        return self.state.v

    @property
    def acceleration(self):
        return self.state.a

    def step(self):
        """
        Advance by exactly one tick: refresh acceleration via the policy, then integrate.
        """
        current = self.state.copy()
        current.a = self.policy.next_acceleration(current)
        self.state = self.solver.step(current)
        return self.state

    def scale_acceleration(self, dt: float):
        self.state.a = self.state.a.scale(float(dt))

    def __repr__(self):
        return f"Particle({self.policy.name}) {self.state!r}"
