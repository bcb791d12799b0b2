"""Whitted-style light transport.

This module implements the shading kernel: local Phong illumination with
hard-edged (attenuated) shadows, plus recursive mirror reflection and
refraction up to a maximum depth.

Recursion is unrolled into an explicit per-ray stack. Each stack entry is a
ray together with the weight its color contributes to the final pixel. For a
hit with reflectivity ``a`` and transparency ``b`` (each treated as 0 when
not positive) the recursive blend

    color = (1 - b) * ((1 - a) * local + a * reflected) + b * transmitted

is accumulated as ``w * (1 - b) * (1 - a) * local`` for the hit itself, with
children pushed at weights ``w * (1 - b) * a`` and ``w * b``. A ray with no
remaining depth, or one that hits nothing, contributes ``w * miss_color``.

Key features:
    - Ambient, directional and point lights
    - Shadow rays with a fixed 0.3 attenuation when occluded
    - Snell's law refraction with a reflection fallback on total internal
      reflection
    - NaN/Inf scrubbing before byte conversion

Example:
    >>> from whitted.runtime import initialize_taichi
    >>> initialize_taichi("cpu")
    >>> from whitted.core.integrator import set_miss_color, trace_ray, upload_lights
    >>> from whitted.scene.intersection import upload_objects
    >>> from whitted.scene.world import World
    >>> world = World.default()
    >>> upload_objects(world.objects)
    >>> upload_lights(world.lights)
    >>> set_miss_color(world.camera.info.miss_color)
    >>> color, bounces = trace_ray((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), depth=5)
"""

import logging
from collections.abc import Iterable, Sequence

import taichi as ti
import taichi.math as tm

from whitted.core.ray import reflect, refract, safe_normalize
from whitted.core.vector import Vector3
from whitted.materials.phong import (
    PhongMaterial,
    diffuse_intensity,
    get_material,
    specular_directional,
    specular_point,
)
from whitted.scene import lights as scene_lights
from whitted.scene.intersection import (
    EPSILON,
    T_MAX,
    SceneHitRecord,
    find_closest,
    intersect_any,
)

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Light reaching an occluded point, relative to an unoccluded one
SHADOW_FACTOR = 0.3

# Deepest supported recursion; deeper requests are clamped
MAX_TRACE_DEPTH = 31

# Entries in the per-ray stack. A node pushes at most two children and each
# pop frees one slot, so depth D never needs more than D + 1 entries.
STACK_SIZE = MAX_TRACE_DEPTH + 1

# =============================================================================
# Light Storage
# =============================================================================

LIGHT_AMBIENT = 0
LIGHT_DIRECTIONAL = 1
LIGHT_POINT = 2

# Maximum number of lights in the scene
MAX_LIGHTS = 256

# light_vectors holds the direction of directional lights and the position of
# point lights; it is unused for ambient lights.
light_kinds = ti.field(dtype=ti.i32, shape=MAX_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
light_vectors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())

# Background color for rays that escape the scene
_miss_color = ti.Vector.field(3, dtype=ti.f64, shape=())


def clear_lights() -> None:
    """Remove all lights."""
    num_lights[None] = 0


def _add_light(kind: int, color: Sequence[float], vector: Vector3) -> int:
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_kinds[idx] = kind
    light_colors[idx] = [color[0], color[1], color[2]]
    light_vectors[idx] = [vector.x, vector.y, vector.z]
    num_lights[None] = idx + 1
    return idx


def upload_lights(lights: Iterable["scene_lights.Light"]) -> int:
    """Replace the kernel-side lights.

    Args:
        lights: Lights in world order.

    Returns:
        The number of uploaded lights.

    Raises:
        RuntimeError: If there are more than MAX_LIGHTS lights.
        TypeError: If an entry is not a known light type.
    """
    lights = list(lights)
    if len(lights) > MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

    clear_lights()
    for light in lights:
        if isinstance(light, scene_lights.AmbientLight):
            _add_light(LIGHT_AMBIENT, light.color, Vector3())
        elif isinstance(light, scene_lights.DirectionalLight):
            _add_light(LIGHT_DIRECTIONAL, light.color, light.direction)
        elif isinstance(light, scene_lights.PointLight):
            _add_light(LIGHT_POINT, light.color, light.position)
        else:
            raise TypeError(f"Expected a light, got {type(light).__name__}")
    return len(lights)


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


def set_miss_color(color: Sequence[float]) -> None:
    """Set the color returned for rays that hit nothing."""
    _miss_color[None] = [color[0], color[1], color[2]]


def clamp_depth(depth: int) -> int:
    """Limit a requested recursion depth to what the tracer supports.

    Raises:
        ValueError: If depth is negative.
    """
    if depth < 0:
        raise ValueError(f"Depth must be non-negative, got {depth}")
    if depth > MAX_TRACE_DEPTH:
        logger.warning(
            "Requested depth %d exceeds the supported maximum; using %d",
            depth,
            MAX_TRACE_DEPTH,
        )
        return MAX_TRACE_DEPTH
    return depth


# =============================================================================
# Local Illumination
# =============================================================================


@ti.func
def _shadow(origin: vec3, direction: vec3) -> ti.f64:
    """Shadow attenuation along a ray toward a light."""
    factor = 1.0
    if intersect_any(origin, direction, EPSILON, T_MAX) == 1:
        factor = SHADOW_FACTOR
    return factor


@ti.func
def shade_local(ray_direction: vec3, rec: SceneHitRecord, material: PhongMaterial) -> vec3:
    """Evaluate local Phong lighting at a hit.

    Args:
        ray_direction: Direction of the ray that produced the hit.
        rec: The hit.
        material: Material of the hit object.

    Returns:
        The lit surface color, clamped to [0, 1].
    """
    point = rec.point
    normal = rec.normal

    ambient = vec3(0.0, 0.0, 0.0)
    diffuse = vec3(0.0, 0.0, 0.0)
    specular = vec3(0.0, 0.0, 0.0)

    for li in range(num_lights[None]):
        kind = light_kinds[li]
        color = light_colors[li]

        if kind == LIGHT_AMBIENT:
            ambient += color
        elif kind == LIGHT_DIRECTIONAL:
            light_dir = safe_normalize(light_vectors[li])
            shadow = _shadow(point, -light_dir)
            intensity = diffuse_intensity(normal, -light_dir)
            diffuse += color * intensity * shadow
            if material.has_specular == 1:
                s = specular_directional(ray_direction, light_dir, normal, material.specular_exponent)
                specular += color * s * shadow * intensity
        else:
            to_light = safe_normalize(light_vectors[li] - point)
            shadow = _shadow(point, to_light)
            intensity = diffuse_intensity(normal, to_light)
            diffuse += color * intensity * shadow
            if material.has_specular == 1:
                # Point highlights are not attenuated by shadow or incidence
                s = specular_point(ray_direction, to_light, normal, material.specular_exponent)
                specular += color * s

    ambient *= material.ambient_reflection
    diffuse *= material.diffuse_reflection

    return tm.clamp(material.color * (ambient + diffuse) + specular, 0.0, 1.0)


# =============================================================================
# Recursive Tracing
# =============================================================================


@ti.func
def trace(origin: vec3, direction: vec3, depth: ti.i32):
    """Trace a ray with reflection and refraction.

    Args:
        origin: Ray origin.
        direction: Unit ray direction.
        depth: Remaining bounces. 0 returns the miss color immediately.

    Returns:
        Tuple of (color, bounces), where bounces counts the hits that were
        shaded.
    """
    miss = _miss_color[None]
    color = vec3(0.0, 0.0, 0.0)
    bounces = 0

    stack_ox = ti.Vector.zero(ti.f64, STACK_SIZE)
    stack_oy = ti.Vector.zero(ti.f64, STACK_SIZE)
    stack_oz = ti.Vector.zero(ti.f64, STACK_SIZE)
    stack_dx = ti.Vector.zero(ti.f64, STACK_SIZE)
    stack_dy = ti.Vector.zero(ti.f64, STACK_SIZE)
    stack_dz = ti.Vector.zero(ti.f64, STACK_SIZE)
    stack_w = ti.Vector.zero(ti.f64, STACK_SIZE)
    stack_depth = ti.Vector.zero(ti.i32, STACK_SIZE)

    stack_ox[0] = origin.x
    stack_oy[0] = origin.y
    stack_oz[0] = origin.z
    stack_dx[0] = direction.x
    stack_dy[0] = direction.y
    stack_dz[0] = direction.z
    stack_w[0] = 1.0
    stack_depth[0] = ti.min(depth, MAX_TRACE_DEPTH)
    sp = 1

    while sp > 0:
        sp -= 1
        o = vec3(stack_ox[sp], stack_oy[sp], stack_oz[sp])
        d = vec3(stack_dx[sp], stack_dy[sp], stack_dz[sp])
        w = stack_w[sp]
        remaining = stack_depth[sp]

        rec = SceneHitRecord(hit=0)
        if remaining > 0:
            rec = find_closest(o, d, EPSILON, T_MAX)

        if rec.hit == 0:
            color += w * miss
        else:
            bounces += 1
            material = get_material(rec.material_id)

            a = 0.0
            if material.reflectivity > 0.0:
                a = material.reflectivity
            b = 0.0
            if material.transparency > 0.0:
                b = material.transparency

            color += w * (1.0 - b) * (1.0 - a) * shade_local(d, rec, material)

            if a > 0.0:
                r = reflect(d, rec.normal)
                stack_ox[sp] = rec.point.x
                stack_oy[sp] = rec.point.y
                stack_oz[sp] = rec.point.z
                stack_dx[sp] = r.x
                stack_dy[sp] = r.y
                stack_dz[sp] = r.z
                stack_w[sp] = w * (1.0 - b) * a
                stack_depth[sp] = remaining - 1
                sp += 1

            if b > 0.0:
                t = refract(d, rec.normal, rec.n1, rec.n2)
                stack_ox[sp] = rec.point.x
                stack_oy[sp] = rec.point.y
                stack_oz[sp] = rec.point.z
                stack_dx[sp] = t.x
                stack_dy[sp] = t.y
                stack_dz[sp] = t.z
                stack_w[sp] = w * b
                stack_depth[sp] = remaining - 1
                sp += 1

    return color, bounces


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def render_pixels(
    origins: ti.types.ndarray(dtype=ti.f64, ndim=2),
    directions: ti.types.ndarray(dtype=ti.f64, ndim=2),
    pixels: ti.types.ndarray(dtype=ti.u8, ndim=2),
    count: ti.i32,
    depth: ti.i32,
):
    """Trace one ray per pixel and write 8-bit colors.

    Each pixel is independent and writes only its own row of ``pixels``.
    Channels are clamped to [0, 1] and truncated to bytes; NaN and Inf
    become 0.

    Args:
        origins: Ray origins, shape (count, 3).
        directions: Ray directions, shape (count, 3).
        pixels: Output buffer, shape (count, 3).
        count: Number of pixels to render.
        depth: Maximum recursion depth.
    """
    for i in range(count):
        o = vec3(origins[i, 0], origins[i, 1], origins[i, 2])
        d = vec3(directions[i, 0], directions[i, 1], directions[i, 2])
        color, _ = trace(o, d, depth)

        for c in ti.static(range(3)):
            value = color[c]
            if tm.isnan(value) or tm.isinf(value):
                value = 0.0
            value = tm.clamp(value, 0.0, 1.0)
            pixels[i, c] = ti.cast(value * 255.0, ti.u8)


_probe_color = ti.Vector.field(3, dtype=ti.f64, shape=())
_probe_bounces = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _trace_single(origin: vec3, direction: vec3, depth: ti.i32):
    color, bounces = trace(origin, direction, depth)
    _probe_color[None] = color
    _probe_bounces[None] = bounces


# =============================================================================
# Public Tracing API
# =============================================================================


def trace_ray(
    origin: Sequence[float],
    direction: Sequence[float],
    depth: int,
) -> tuple[tuple[float, float, float], int]:
    """Trace a single ray through the uploaded scene.

    This is a Python-callable function for testing and debugging. For
    production rendering, use FrameRenderer which traces all pixels in
    parallel.

    Args:
        origin: Ray origin (x, y, z).
        direction: Ray direction; normalized before tracing.
        depth: Maximum recursion depth.

    Returns:
        Tuple of ((R, G, B), bounces). The color is unclamped apart from the
        per-hit clamp of local lighting.
    """
    o = Vector3.from_iterable(origin)
    d = Vector3.from_iterable(direction).normalize()
    _trace_single(vec3(o.x, o.y, o.z), vec3(d.x, d.y, d.z), clamp_depth(depth))

    color = _probe_color[None]
    return (float(color[0]), float(color[1]), float(color[2])), int(_probe_bounces[None])
