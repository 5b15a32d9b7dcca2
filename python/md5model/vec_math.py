"""
Vector and quaternion algebra for decoded skeletal data.

Provides small immutable value types (Vector2, Vector3, Quaternion) with
componentwise addition/subtraction, dot product, scalar scaling, cross
product and the Hamilton product. No normalization is ever applied
implicitly, so results are exactly what the arithmetic produces.
"""

import numpy as np
from dataclasses import dataclass


@dataclass(frozen=True)
class Vector2:
    """2D vector, used for texture coordinates"""
    x: float
    y: float

    def __add__(self, other: 'Vector2') -> 'Vector2':
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Vector2') -> 'Vector2':
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> 'Vector2':
        return Vector2(self.x * k, self.y * k)

    __rmul__ = __mul__

    def dot(self, other: 'Vector2') -> float:
        return (self.x * other.x) + (self.y * other.y)

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=np.float64)


@dataclass(frozen=True)
class Vector3:
    """3D vector, used for positions, offsets and bounds"""
    x: float
    y: float
    z: float

    def __add__(self, other: 'Vector3') -> 'Vector3':
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: 'Vector3') -> 'Vector3':
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, k: float) -> 'Vector3':
        return Vector3(self.x * k, self.y * k, self.z * k)

    __rmul__ = __mul__

    def dot(self, other: 'Vector3') -> float:
        return (self.x * other.x) + (self.y * other.y) + (self.z * other.z)

    def cross(self, other: 'Vector3') -> 'Vector3':
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)


@dataclass(frozen=True)
class Quaternion:
    """
    Quaternion as a scalar part plus a vector part.

    Decoded orientations are unit quaternions, but nothing here enforces
    it: the operations below are plain algebra.
    """
    scalar: float
    vector: Vector3

    @classmethod
    def identity(cls) -> 'Quaternion':
        return cls(1.0, Vector3(0.0, 0.0, 0.0))

    def __add__(self, other: 'Quaternion') -> 'Quaternion':
        return Quaternion(self.scalar + other.scalar, self.vector + other.vector)

    def __sub__(self, other: 'Quaternion') -> 'Quaternion':
        return Quaternion(self.scalar - other.scalar, self.vector - other.vector)

    def __mul__(self, other: 'Quaternion') -> 'Quaternion':
        """Hamilton product"""
        s1, v1 = self.scalar, self.vector
        s2, v2 = other.scalar, other.vector
        return Quaternion(
            s1 * s2 - v1.dot(v2),
            v2 * s1 + v1 * s2 + v1.cross(v2),
        )

    def conjugate(self) -> 'Quaternion':
        return Quaternion(self.scalar, self.vector * -1.0)

    def norm_squared(self) -> float:
        return self.scalar * self.scalar + self.vector.dot(self.vector)

    def to_array(self) -> np.ndarray:
        """Return as [w, x, y, z]"""
        v = self.vector
        return np.array([self.scalar, v.x, v.y, v.z], dtype=np.float64)
