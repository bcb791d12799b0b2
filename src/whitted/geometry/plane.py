"""Axis-aligned rectangular plane primitive.

A plane is horizontal: it lies at ``position.y`` with the world up normal
``(0, 1, 0)`` and spans ``width`` along X and ``height`` along Z, centered
on its position. The normal is not flipped for rays arriving from below.

Example:
    >>> import taichi as ti
    >>> from whitted.geometry.plane import Plane, hit_plane
    >>> floor = Plane(position=ti.math.vec3(0, -2, 10), width=100.0, height=100.0)
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from whitted.geometry.sphere import HitRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Rays with |direction . up| below this are treated as parallel
PARALLEL_EPSILON = 1e-12


@ti.dataclass
class Plane:
    """A bounded horizontal rectangle.

    Attributes:
        position: The center of the rectangle (vec3).
        width: Full extent along world X.
        height: Full extent along world Z.
    """

    position: vec3
    width: ti.f64
    height: ti.f64


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    plane: Plane,
    t_min: ti.f64,
    t_max: ti.f64,
) -> HitRecord:
    """Test for ray-plane intersection.

    Solves ``t = ((P - O) . up) / (D . up)`` and bound-checks the hit point
    against the half extents. The bounds are inclusive, so a hit exactly on
    an edge counts. Rays parallel to the plane never hit.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        plane: The plane to test intersection against.
        t_min: Minimum t value to consider a valid hit.
        t_max: Upper bound on t (exclusive).

    Returns:
        A HitRecord; the normal is always (0, 1, 0) and front_face is 1
        when the ray arrives from above.
    """
    up = vec3(0.0, 1.0, 0.0)
    denom = tm.dot(ray_direction, up)

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    is_front_face = 0

    if ti.abs(denom) >= PARALLEL_EPSILON:
        t = tm.dot(plane.position - ray_origin, up) / denom
        p = ray_origin + t * ray_direction

        half_w = plane.width / 2.0
        half_h = plane.height / 2.0
        outside = (
            p.z > plane.position.z + half_h
            or p.z < plane.position.z - half_h
            or p.x > plane.position.x + half_w
            or p.x < plane.position.x - half_w
        )

        if not outside and t >= t_min and t < t_max:
            did_hit = 1
            hit_t = t
            hit_point = p
            if denom < 0.0:
                is_front_face = 1

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=up,
        front_face=is_front_face,
    )
