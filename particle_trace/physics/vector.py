# particle_trace/physics/vector.py
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Vector3:
    """
    Immutable 3-component vector. Used for positions as well as
    velocities and accelerations.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_iterable(cls, values):
        arr = np.asarray(values, dtype=float)
        if arr.shape != (3,):
            raise ValueError(f"Cannot coerce {values!r} to 3D vector")
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    def __add__(self, other):
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other):
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scale(self, k: float):
        return Vector3(self.x * k, self.y * k, self.z * k)

    __mul__ = scale
    __rmul__ = scale

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def norm(self) -> float:
        # diverging reconstructions overflow to inf; that is a valid result
        with np.errstate(over="ignore"):
            return float(np.linalg.norm(self.to_array()))

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)
