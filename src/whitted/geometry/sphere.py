"""Sphere primitive and ray-sphere intersection.

The intersection solves ``|O + tD - C|^2 = r^2`` with the standard quadratic
formula. Roots closer than ``t_min`` are discarded to suppress
self-intersection. The nearest remaining root is reported: when both roots
are valid the ray is entering the sphere, when only the far root is valid the
ray started inside and is leaving it.

Example:
    >>> import taichi as ti
    >>> from whitted.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, 10), radius=2.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import safe_normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere.
    """

    center: vec3
    radius: ti.f64


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: The parameter value along the ray where intersection occurred.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the surface.
            Only valid if hit == 1.
        normal: The unit surface normal at the intersection point.
            Only valid if hit == 1.
        front_face: 1 if the ray arrived from outside the primitive
            (entering), 0 if it is leaving it. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3
    front_face: ti.i32


@ti.func
def sphere_roots(ray_origin: vec3, ray_direction: vec3, sphere: Sphere):
    """Solve the ray-sphere quadratic.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The ray direction (need not be normalized).
        sphere: The sphere to test.

    Returns:
        Tuple of (found, t_near, t_far). found is 0 when the discriminant is
        negative or the direction is degenerate, in which case both roots
        are 0.
    """
    oc = ray_origin - sphere.center

    a = tm.dot(ray_direction, ray_direction)
    b = 2.0 * tm.dot(oc, ray_direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = b * b - 4.0 * a * c

    found = 0
    t_near = 0.0
    t_far = 0.0
    if discriminant >= 0.0 and a > 0.0:
        sqrt_d = ti.sqrt(discriminant)
        found = 1
        t_near = (-b - sqrt_d) / (2.0 * a)
        t_far = (-b + sqrt_d) / (2.0 * a)

    return found, t_near, t_far


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f64,
    t_max: ti.f64,
) -> HitRecord:
    """Test for ray-sphere intersection.

    A root is valid when ``t_min <= t < t_max``. The near root is preferred;
    its normal points away from the center. If only the far root is valid
    the ray is inside the sphere, so the normal points toward the center and
    front_face is 0. Either way the reported normal faces the incoming ray.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        sphere: The sphere to test intersection against.
        t_min: Minimum t value to consider a valid hit (avoids self-intersection).
        t_max: Upper bound on t (exclusive), the closest hit found so far.

    Returns:
        A HitRecord containing intersection information. Check hit field
        to determine if intersection occurred.
    """
    found, t_near, t_far = sphere_roots(ray_origin, ray_direction, sphere)

    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)
    is_front_face = 0

    if found == 1:
        if t_near >= t_min and t_near < t_max:
            did_hit = 1
            is_front_face = 1
            hit_t = t_near
        elif t_near < t_min and t_far >= t_min and t_far < t_max:
            did_hit = 1
            is_front_face = 0
            hit_t = t_far

    if did_hit == 1:
        hit_point = ray_origin + hit_t * ray_direction
        outward_normal = safe_normalize(hit_point - sphere.center)
        hit_normal = outward_normal
        if is_front_face == 0:
            hit_normal = -outward_normal

    return HitRecord(
        hit=did_hit,
        t=hit_t,
        point=hit_point,
        normal=hit_normal,
        front_face=is_front_face,
    )
