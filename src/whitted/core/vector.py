"""Host-side 3D vector type used by the scene model and camera.

Vector3 is an immutable double-precision value type. Kernel code works on
``taichi.math.vec3`` instead; use ``to_tuple()`` when uploading a Vector3
into a Taichi field.

Example:
    >>> from whitted.core.vector import Vector3
    >>> forward = Vector3(0.0, 0.0, 1.0)
    >>> right = forward.cross(Vector3(0.0, -1.0, 0.0)).normalize()
    >>> right
    Vector3(x=1.0, y=0.0, z=0.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# Returned by normalize() for zero-length input
FALLBACK_DIRECTION = (0.0, 0.0, 1.0)

# Magnitudes at or below this are treated as zero by normalize()
ZERO_LENGTH = 1e-300


@dataclass(frozen=True)
class Vector3:
    """A 3D vector of floats.

    Supports ``+``/``-`` with vectors or scalars, ``*`` and ``/`` with
    scalars (scaling) or vectors (component-wise), and unary negation.

    Attributes:
        x: X component.
        y: Y component.
        z: Z component.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_iterable(cls, values) -> Vector3:
        """Build a vector from any 3-element sequence."""
        x, y, z = values
        return cls(float(x), float(y), float(z))

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __add__(self, other: Vector3 | float) -> Vector3:
        if isinstance(other, Vector3):
            return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)
        return Vector3(self.x + other, self.y + other, self.z + other)

    def __sub__(self, other: Vector3 | float) -> Vector3:
        if isinstance(other, Vector3):
            return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)
        return Vector3(self.x - other, self.y - other, self.z - other)

    def __mul__(self, other: Vector3 | float) -> Vector3:
        if isinstance(other, Vector3):
            return Vector3(self.x * other.x, self.y * other.y, self.z * other.z)
        return Vector3(self.x * other, self.y * other, self.z * other)

    def __rmul__(self, other: float) -> Vector3:
        return self.__mul__(other)

    def __truediv__(self, other: Vector3 | float) -> Vector3:
        if isinstance(other, Vector3):
            return Vector3(self.x / other.x, self.y / other.y, self.z / other.z)
        return Vector3(self.x / other, self.y / other, self.z / other)

    def dot(self, other: Vector3) -> float:
        """Compute the dot product with another vector."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        """Compute the cross product ``self x other``."""
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude(self) -> float:
        """Compute the Euclidean length."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalize(self) -> Vector3:
        """Return the unit vector in the same direction.

        Zero-length (or non-finite) input has no direction; in that case
        the fixed unit vector ``(0, 0, 1)`` is returned instead of dividing
        by zero.

        Returns:
            A vector of length 1.
        """
        mag = self.magnitude()
        if not math.isfinite(mag) or mag <= ZERO_LENGTH:
            return Vector3(*FALLBACK_DIRECTION)
        return Vector3(self.x / mag, self.y / mag, self.z / mag)

    def is_close(self, other: Vector3, tol: float = 1e-9) -> bool:
        """Check component-wise equality within an absolute tolerance."""
        return (
            abs(self.x - other.x) <= tol
            and abs(self.y - other.y) <= tol
            and abs(self.z - other.z) <= tol
        )
