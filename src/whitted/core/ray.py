"""Ray data structure and vector utilities for Taichi kernels.

All functions in this module are ``@ti.func`` and must be called from inside
a kernel. Taichi is expected to run with ``default_fp=ti.f64`` so that
``vec3`` is a double-precision vector.

Example:
    >>> import taichi as ti
    >>> from whitted.runtime import initialize_taichi
    >>> initialize_taichi("cpu")
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, 1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # inside a kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Squared lengths at or below this are treated as zero by safe_normalize
ZERO_LENGTH_SQUARED = 1e-300


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3), unit length for rays
            produced by the camera and the shader.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


@ti.func
def safe_normalize(v: vec3) -> vec3:
    """Normalize a vector, mapping zero-length input to (0, 0, 1).

    Args:
        v: The input vector.

    Returns:
        A unit vector in the direction of v, or the fallback (0, 0, 1)
        when v has no direction.
    """
    len_sq = tm.dot(v, v)
    result = vec3(0.0, 0.0, 1.0)
    if len_sq > ZERO_LENGTH_SQUARED:
        result = v / ti.sqrt(len_sq)
    return result


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The mirrored direction ``incident - 2 (incident . normal) normal``.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, n1: ti.f64, n2: ti.f64) -> vec3:
    """Refract an incident direction through a surface using Snell's law.

    Uses the vector form

        t = -n * sqrt(1 - mu^2 (1 - (n.i)^2)) + (i - n (n.i)) * mu

    with ``mu = n1 / n2``. The normal is the one reported by the
    intersection engine for this hit. When the term under the square root
    is negative the ray is totally internally reflected and the mirror
    direction is returned instead.

    Args:
        incident: The incoming direction (unit length).
        normal: The surface normal at the hit (unit length).
        n1: Refractive index of the medium the ray travels in.
        n2: Refractive index of the medium on the other side.

    Returns:
        The transmitted direction, or the reflected direction under total
        internal reflection.
    """
    mu = n1 / n2
    ni = tm.dot(normal, incident)
    k = 1.0 - mu * mu * (1.0 - ni * ni)
    result = reflect(incident, normal)
    if k >= 0.0:
        result = -normal * ti.sqrt(k) + (incident - normal * ni) * mu
    return result
