# particle_trace/physics/solver.py
from particle_trace.physics.state import State


class SemiImplicitEulerSolver:
    """
    One discrete tick of semi-implicit Euler integration:
        v <- v + a
        r <- r + v   (uses the updated velocity)
    The step is measured in ticks, not seconds; no bounds are enforced.
    """

    def step(self, state):
        """
        Perform a single tick and return the new State.
        """
        v_next = state.v + state.a
        r_next = state.r + v_next
        return State(r_next, v_next, state.a)
