# particle_trace/simulation/recorder.py
from dataclasses import dataclass
from typing import List, Optional, Tuple

from particle_trace.interpolation.lagrange import ControlPoint
from particle_trace.physics.vector import Vector3


class RecorderFrozenError(RuntimeError):
    """A sample was recorded after stop() and before clear()."""


@dataclass(frozen=True)
class TrajectorySample:
    timestamp_ms: int
    position: Vector3


class TrajectoryRecorder:
    """
    Append-only buffer of (timestamp, position) samples.
    Knows nothing about pause/resume: it accepts whatever it is given until stop().
    """
    def __init__(self):
        self._samples: List[TrajectorySample] = []
        self._stopped = False

    def __len__(self):
        return len(self._samples)

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def samples(self) -> Tuple[TrajectorySample, ...]:
        return tuple(self._samples)

    @property
    def last(self) -> Optional[TrajectorySample]:
        return self._samples[-1] if self._samples else None

    def record(self, timestamp_ms: int, position) -> TrajectorySample:
        if self._stopped:
            raise RecorderFrozenError("recorder is stopped; clear() before recording again")
        timestamp_ms = int(timestamp_ms)
        if self.last is not None and timestamp_ms < self.last.timestamp_ms:
            raise ValueError(
                f"timestamp {timestamp_ms} ms precedes last sample ({self.last.timestamp_ms} ms)"
            )
        if not isinstance(position, Vector3):
            position = Vector3.from_iterable(position)
        sample = TrajectorySample(timestamp_ms, position)
        self._samples.append(sample)
        return sample

    def stop(self):
        self._stopped = True

    def clear(self):
        self._samples = []
        self._stopped = False

    def control_points(self):
        """
        Split the samples into three per-axis control-point lists.
        t = elapsed seconds since the first sample.
        """
        if not self._samples:
            return [], [], []
        t0 = self._samples[0].timestamp_ms
        xs, ys, zs = [], [], []
        for s in self._samples:
            t = (s.timestamp_ms - t0) / 1000.0
            xs.append(ControlPoint(t, s.position.x))
            ys.append(ControlPoint(t, s.position.y))
            zs.append(ControlPoint(t, s.position.z))
        return xs, ys, zs
