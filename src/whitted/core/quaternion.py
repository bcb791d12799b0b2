"""Quaternions for incremental camera rotation.

A vector ``p`` is rotated by a unit quaternion ``q`` as ``q * p * q^-1``,
where ``p`` is embedded as a pure quaternion ``(0, x, y, z)``.

Example:
    >>> import math
    >>> from whitted.core.quaternion import Quaternion
    >>> from whitted.core.vector import Vector3
    >>> q = Quaternion.from_angle_axis(math.pi / 2, Vector3(0.0, 1.0, 0.0))
    >>> q.rotate(Vector3(0.0, 0.0, 1.0))  # approximately (1, 0, 0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from whitted.core.vector import Vector3

TWO_PI = 2.0 * math.pi


@dataclass(frozen=True)
class Quaternion:
    """A quaternion ``w + xi + yj + zk``.

    Attributes:
        w: Scalar part.
        x: First imaginary component.
        y: Second imaginary component.
        z: Third imaginary component.
    """

    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __mul__(self, rhs: Quaternion) -> Quaternion:
        """Hamilton product ``self * rhs``."""
        return Quaternion(
            self.w * rhs.w - self.x * rhs.x - self.y * rhs.y - self.z * rhs.z,
            self.w * rhs.x + self.x * rhs.w - self.y * rhs.z + self.z * rhs.y,
            self.w * rhs.y + self.x * rhs.z + self.y * rhs.w - self.z * rhs.x,
            self.w * rhs.z - self.x * rhs.y + self.y * rhs.x + self.z * rhs.w,
        )

    def inverse(self) -> Quaternion:
        """Return the conjugate, which is the inverse of a unit quaternion."""
        return Quaternion(self.w, -self.x, -self.y, -self.z)

    @classmethod
    def from_angle_axis(cls, angle: float, axis: Vector3) -> Quaternion:
        """Build a rotation of ``angle`` radians about ``axis``.

        The angle is wrapped into ``[0, 2*pi)`` first. The axis is used as
        given and should be unit length for a pure rotation.

        Args:
            angle: Rotation angle in radians.
            axis: Rotation axis.

        Returns:
            The rotation quaternion.
        """
        angle = math.fmod(angle, TWO_PI)
        if angle < 0.0:
            angle += TWO_PI
        if angle >= TWO_PI:
            angle -= TWO_PI

        half_sin = math.sin(angle / 2.0)
        return cls(
            math.cos(angle / 2.0),
            axis.x * half_sin,
            axis.y * half_sin,
            axis.z * half_sin,
        )

    @classmethod
    def from_vector(cls, vector: Vector3) -> Quaternion:
        """Embed a vector as the pure quaternion ``(0, x, y, z)``."""
        return cls(0.0, vector.x, vector.y, vector.z)

    def to_vector(self) -> Vector3:
        """Drop the scalar part."""
        return Vector3(self.x, self.y, self.z)

    def rotate(self, vector: Vector3) -> Vector3:
        """Rotate a vector as ``q * p * q^-1``.

        The result is not re-normalized.
        """
        return (self * Quaternion.from_vector(vector) * self.inverse()).to_vector()
