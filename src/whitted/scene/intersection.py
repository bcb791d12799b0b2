"""Scene-level ray intersection.

Objects are mirrored from the World into Taichi fields in list order. The
closest-hit query walks every object (no acceleration structure) and keeps
the smallest valid ``t``. A hit must be strictly closer than the current
best to replace it, so on an exact tie the object added first wins.

Example:
    >>> from whitted.runtime import initialize_taichi
    >>> initialize_taichi("cpu")
    >>> from whitted.scene.intersection import upload_objects, find_closest
    >>> from whitted.scene.world import World
    >>> upload_objects(World.default().objects)
    >>> # Use find_closest within a Taichi kernel
"""

from collections.abc import Iterable

import taichi as ti
import taichi.math as tm

from whitted.core.vector import Vector3
from whitted.geometry.plane import Plane, hit_plane
from whitted.geometry.sphere import HitRecord, Sphere, hit_sphere
from whitted.materials.phong import add_material, clear_materials, get_material
from whitted.scene import objects as scene_objects

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Hits closer than this along a ray are ignored (self-intersection guard)
EPSILON = 0.01

# Upper bound for unbounded ray queries
T_MAX = 1e10

# Object kinds stored in object_kinds
KIND_SPHERE = 0
KIND_PLANE = 1


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection.

    Attributes:
        hit: 1 if the ray hit any object, 0 if it missed.
        t: Distance along the ray. Only valid if hit == 1.
        point: The hit position. Only valid if hit == 1.
        normal: Unit surface normal reported by the primitive. Only valid
            if hit == 1.
        front_face: 1 if the ray entered the surface, 0 if it is leaving
            a sphere. Only valid if hit == 1.
        material_id: Material of the hit object, -1 on a miss.
        n1: Refractive index on the incoming side.
        n2: Refractive index on the far side.
    """

    hit: ti.i32
    t: ti.f64
    point: vec3
    normal: vec3
    front_face: ti.i32
    material_id: ti.i32
    n1: ti.f64
    n2: ti.f64


# Maximum number of objects supported in the scene
MAX_OBJECTS = 1024

# Object storage: Structure of Arrays, one slot per object in world order.
# object_sizes holds (radius, 0) for spheres and (width, height) for planes.
object_kinds = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
object_positions = ti.Vector.field(3, dtype=ti.f64, shape=MAX_OBJECTS)
object_sizes = ti.Vector.field(2, dtype=ti.f64, shape=MAX_OBJECTS)
object_material_ids = ti.field(dtype=ti.i32, shape=MAX_OBJECTS)
num_objects = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all objects and their materials."""
    num_objects[None] = 0
    clear_materials()


def _add_object(kind: int, position: Vector3, size: tuple[float, float], material_id: int) -> int:
    idx = num_objects[None]
    if idx >= MAX_OBJECTS:
        raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")
    object_kinds[idx] = kind
    object_positions[idx] = [position.x, position.y, position.z]
    object_sizes[idx] = [size[0], size[1]]
    object_material_ids[idx] = material_id
    num_objects[None] = idx + 1
    return idx


def add_sphere(position: Vector3, radius: float, material_id: int) -> int:
    """Add a sphere to the scene.

    Returns:
        The index of the added object.

    Raises:
        RuntimeError: If the maximum number of objects is exceeded.
    """
    return _add_object(KIND_SPHERE, position, (radius, 0.0), material_id)


def add_plane(position: Vector3, width: float, height: float, material_id: int) -> int:
    """Add a plane to the scene.

    Returns:
        The index of the added object.

    Raises:
        RuntimeError: If the maximum number of objects is exceeded.
    """
    return _add_object(KIND_PLANE, position, (width, height), material_id)


def upload_objects(objects: Iterable["scene_objects.Object"]) -> int:
    """Replace the kernel-side scene with the given objects.

    Each object gets its own material slot. Object order is preserved.

    Args:
        objects: Objects in world order.

    Returns:
        The number of uploaded objects.

    Raises:
        RuntimeError: If the scene exceeds MAX_OBJECTS.
        TypeError: If an entry is neither a Sphere nor a Plane.
    """
    objects = list(objects)
    if len(objects) > MAX_OBJECTS:
        raise RuntimeError(f"Maximum number of objects ({MAX_OBJECTS}) exceeded")

    clear_scene()
    for obj in objects:
        if isinstance(obj, scene_objects.Sphere):
            add_sphere(obj.position, obj.radius, add_material(obj.material))
        elif isinstance(obj, scene_objects.Plane):
            add_plane(obj.position, obj.width, obj.height, add_material(obj.material))
        else:
            raise TypeError(f"Expected Sphere or Plane, got {type(obj).__name__}")
    return len(objects)


def get_object_count() -> int:
    """Get the number of objects in the scene."""
    return int(num_objects[None])


@ti.func
def _hit_object(i: ti.i32, ray_origin: vec3, ray_direction: vec3, t_min: ti.f64, t_max: ti.f64) -> HitRecord:
    """Intersect object i, dispatching on its kind."""
    rec = HitRecord(hit=0)
    size = object_sizes[i]
    if object_kinds[i] == KIND_SPHERE:
        sphere = Sphere(center=object_positions[i], radius=size[0])
        rec = hit_sphere(ray_origin, ray_direction, sphere, t_min, t_max)
    else:
        plane = Plane(position=object_positions[i], width=size[0], height=size[1])
        rec = hit_plane(ray_origin, ray_direction, plane, t_min, t_max)
    return rec


@ti.func
def find_closest(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f64,
    t_max: ti.f64,
) -> SceneHitRecord:
    """Find the nearest object hit by a ray.

    Spheres report ``(n1, n2) = (1, ior)`` when the ray enters and
    ``(ior, 1)`` when it leaves. Planes are treated as infinitely thin and
    report ``(1, 1)``.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        t_min: Minimum t value to consider a valid hit.
        t_max: Maximum t value to consider a valid hit (exclusive).

    Returns:
        The closest intersection, or a record with hit == 0.
    """
    closest_t = t_max
    result = SceneHitRecord(hit=0, material_id=-1, n1=1.0, n2=1.0)

    for i in range(num_objects[None]):
        rec = _hit_object(i, ray_origin, ray_direction, t_min, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            material_id = object_material_ids[i]
            n1 = 1.0
            n2 = 1.0
            if object_kinds[i] == KIND_SPHERE:
                ior = get_material(material_id).refractive_index
                if rec.front_face == 1:
                    n2 = ior
                else:
                    n1 = ior
            result = SceneHitRecord(
                hit=1,
                t=rec.t,
                point=rec.point,
                normal=rec.normal,
                front_face=rec.front_face,
                material_id=material_id,
                n1=n1,
                n2=n2,
            )

    return result


@ti.func
def intersect_any(
    ray_origin: vec3,
    ray_direction: vec3,
    t_min: ti.f64,
    t_max: ti.f64,
) -> ti.i32:
    """Test if a ray hits any object (shadow ray query).

    Returns:
        1 if any object was hit, 0 otherwise.
    """
    hit_any = 0
    for i in range(num_objects[None]):
        if hit_any == 0:
            rec = _hit_object(i, ray_origin, ray_direction, t_min, t_max)
            if rec.hit == 1:
                hit_any = 1
    return hit_any
