# particle_trace/simulation/scrub.py
from particle_trace.config import settings


class ScrubMapper:
    """
    Maps a normalized slider position p onto a query time in [t_first, t_last] (seconds).

    right_to_left=False: p=0 -> t_first, p=1 -> t_last
    right_to_left=True:  p=0 -> t_last,  p=1 -> t_first
    """
    def __init__(self, t_first: float, t_last: float, right_to_left: bool = None):
        if right_to_left is None:
            right_to_left = settings.SCRUB_RIGHT_TO_LEFT
        t_first = float(t_first)
        t_last = float(t_last)
        if t_first > t_last:
            raise ValueError(f"t_first ({t_first}) must be <= t_last ({t_last})")
        self.t_first = t_first
        self.t_last = t_last
        self.right_to_left = bool(right_to_left)

    @property
    def span(self) -> float:
        return self.t_last - self.t_first

    def clamp(self, t: float) -> float:
        return max(self.t_first, min(self.t_last, float(t)))

    def time_at(self, p: float) -> float:
        p = float(p)
        if self.right_to_left:
            t = self.t_last - p * self.span
        else:
            t = self.t_first + p * self.span
        return self.clamp(t)

    def position_of(self, t: float) -> float:
        """Inverse mapping, for slider feedback. Returns p in [0, 1]."""
        if self.span == 0:
            return 0.0
        p = (self.clamp(t) - self.t_first) / self.span
        return 1.0 - p if self.right_to_left else p
