"""
Lagrange interpolation of recorded particle trajectories.

Each axis is fitted independently with the unique polynomial of degree n-1
passing through its n control points:

    P(t) = sum_i value_i * prod_{j != i} (t - t_j) / (t_i - t_j)

Evaluation is the direct O(n^2) summation. Lagrange fits are ill-conditioned
for many points and diverge quickly outside [min t_i, max t_i]; both are
accepted output and are never clamped.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import numpy as np

from particle_trace.physics.vector import Vector3


class DuplicateControlPointError(ValueError):
    """Two control points of one axis share the same t."""


class EmptyInterpolatorError(RuntimeError):
    """Evaluation requested on an interpolator without control points."""


@dataclass(frozen=True)
class ControlPoint:
    """
    One must-pass-through sample of a single axis.

    Attributes:
        t: Elapsed seconds since the first trajectory sample
        value: Coordinate value at t
    """
    t: float
    value: float


class LagrangeInterpolator:
    """
    Per-axis Lagrange engine.

    Usage:
        x_axis = LagrangeInterpolator([ControlPoint(0.0, 0.0), ControlPoint(1.0, 2.0)])
        x_axis.add_point(2.0, 4.0)
        x_axis.evaluate(0.5)  # -> 1.0
    """

    def __init__(self, points: Optional[Iterable[ControlPoint]] = None):
        self._points: List[ControlPoint] = []
        self._times = set()
        for p in points or ():
            self.add_point(p.t, p.value)

    @property
    def points(self) -> List[ControlPoint]:
        return list(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def add_point(self, t: float, value: float) -> None:
        """
        Append a control point.

        Raises:
            DuplicateControlPointError: If a point with the same t already exists
        """
        t = float(t)
        if t in self._times:
            raise DuplicateControlPointError(f"control point at t={t} already exists")
        self._times.add(t)
        self._points.append(ControlPoint(t, float(value)))

    def evaluate(self, t: float) -> float:
        """
        Value of the interpolating polynomial at t.

        Raises:
            EmptyInterpolatorError: If no control points were added
        """
        nodes, values = self._arrays()
        return _lagrange_sum(nodes, values, float(t))

    def evaluate_many(self, ts) -> np.ndarray:
        """Evaluation over an array of query times (used for plotting)."""
        nodes, values = self._arrays()
        ts = np.asarray(ts, dtype=float)
        out = np.empty_like(ts)
        for k, t in np.ndenumerate(ts):
            out[k] = _lagrange_sum(nodes, values, float(t))
        return out

    def _arrays(self):
        if not self._points:
            raise EmptyInterpolatorError("cannot evaluate an interpolator with no control points")
        nodes = np.fromiter((p.t for p in self._points), dtype=float, count=len(self._points))
        values = np.fromiter((p.value for p in self._points), dtype=float, count=len(self._points))
        return nodes, values


def _lagrange_sum(nodes: np.ndarray, values: np.ndarray, t: float) -> float:
    """
    sum_i value_i * L_i(t), with L_i(t) = prod_{j != i} (t - t_j) / (t_i - t_j).
    Row i of the ratio matrix holds the factors of L_i; the diagonal is set to 1.
    """
    denom = nodes[:, None] - nodes[None, :]
    np.fill_diagonal(denom, 1.0)
    with np.errstate(over="ignore", invalid="ignore"):
        ratios = (t - nodes)[None, :] / denom
        np.fill_diagonal(ratios, 1.0)
        return float(np.dot(values, ratios.prod(axis=1)))


class TrajectoryInterpolator:
    """
    Reconstructed 3D trajectory: one LagrangeInterpolator per axis.
    Read-only once built.
    """

    def __init__(self, x: LagrangeInterpolator, y: LagrangeInterpolator, z: LagrangeInterpolator):
        if not (len(x) == len(y) == len(z)):
            raise ValueError("axis interpolators must have the same number of control points")
        self.x = x
        self.y = y
        self.z = z

    @classmethod
    def from_control_points(cls, xs: Sequence[ControlPoint], ys: Sequence[ControlPoint],
                            zs: Sequence[ControlPoint]) -> "TrajectoryInterpolator":
        if not xs:
            raise EmptyInterpolatorError("cannot reconstruct a trajectory from zero samples")
        return cls(LagrangeInterpolator(xs), LagrangeInterpolator(ys), LagrangeInterpolator(zs))

    @property
    def axes(self):
        return (self.x, self.y, self.z)

    def __len__(self) -> int:
        return len(self.x)

    @property
    def t_first(self) -> float:
        return min(p.t for p in self.x.points)

    @property
    def t_last(self) -> float:
        return max(p.t for p in self.x.points)

    def position_at(self, t: float) -> Vector3:
        return Vector3(self.x.evaluate(t), self.y.evaluate(t), self.z.evaluate(t))

    def sample(self, n: int):
        """
        Evaluate the fit on n evenly spaced times over [t_first, t_last].
        Returns (ts, positions) with positions shaped (n, 3).
        """
        ts = np.linspace(self.t_first, self.t_last, int(n))
        positions = np.column_stack([axis.evaluate_many(ts) for axis in self.axes])
        return ts, positions
