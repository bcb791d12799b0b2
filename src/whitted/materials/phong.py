"""Phong surface material and local lighting terms.

Every object owns one material. Materials are mirrored into Taichi fields
(one slot per uploaded object) so the shader can look them up by id inside
kernels.

The local lighting model per hit is

    color = clamp(albedo * (ka * ambient + kd * diffuse) + specular, 0, 1)

where ``ambient``, ``diffuse`` and ``specular`` are sums over the lights of
the scene. The Taichi functions below compute the per-light diffuse
intensity and the two specular variants used for directional and point
lights.

Example:
    >>> from whitted.runtime import initialize_taichi
    >>> initialize_taichi("cpu")
    >>> from whitted.materials.phong import add_material, clear_materials
    >>> from whitted.scene.objects import Material
    >>> clear_materials()
    >>> material_id = add_material(Material(color=(1.0, 1.0, 1.0)))
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import reflect
from whitted.scene.objects import Material

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class PhongMaterial:
    """Kernel-side copy of a Material.

    Attributes:
        color: Surface albedo (RGB).
        ambient_reflection: Weight of the ambient light sum.
        diffuse_reflection: Weight of the diffuse light sum.
        specular_exponent: Phong exponent of the highlight.
        has_specular: 1 if the highlight is evaluated, 0 otherwise.
        reflectivity: Blend weight of the mirror bounce.
        transparency: Blend weight of the transmitted ray.
        refractive_index: Index of refraction of the material.
    """

    color: vec3
    ambient_reflection: ti.f64
    diffuse_reflection: ti.f64
    specular_exponent: ti.f64
    has_specular: ti.i32
    reflectivity: ti.f64
    transparency: ti.f64
    refractive_index: ti.f64


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of materials (one per object)
MAX_MATERIALS = 1024

material_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_MATERIALS)
material_ambient = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_diffuse = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_specular = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_has_specular = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_reflectivity = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_transparency = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
material_refractive_index = ti.field(dtype=ti.f64, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def add_material(material: Material) -> int:
    """Add a material to the registry.

    Values are copied as-is; any finite float is accepted.

    Args:
        material: The material to upload.

    Returns:
        The id of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
    """
    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    r, g, b = material.color
    material_colors[idx] = [r, g, b]
    material_ambient[idx] = material.ambient_reflection
    material_diffuse[idx] = material.diffuse_reflection
    material_specular[idx] = material.specular_reflection
    material_has_specular[idx] = 1 if material.has_specular else 0
    material_reflectivity[idx] = material.reflectivity
    material_transparency[idx] = material.transparency
    material_refractive_index[idx] = material.refractive_index
    num_materials[None] = idx + 1
    return idx


def get_material_count() -> int:
    """Get the number of materials in the registry."""
    return int(num_materials[None])


@ti.func
def get_material(material_id: ti.i32) -> PhongMaterial:
    """Look up a material by id.

    Args:
        material_id: The id returned by add_material().

    Returns:
        The material properties as a PhongMaterial.
    """
    return PhongMaterial(
        color=material_colors[material_id],
        ambient_reflection=material_ambient[material_id],
        diffuse_reflection=material_diffuse[material_id],
        specular_exponent=material_specular[material_id],
        has_specular=material_has_specular[material_id],
        reflectivity=material_reflectivity[material_id],
        transparency=material_transparency[material_id],
        refractive_index=material_refractive_index[material_id],
    )


# =============================================================================
# Lighting Terms
# =============================================================================


@ti.func
def diffuse_intensity(normal: vec3, to_light: vec3) -> ti.f64:
    """Lambert cosine term clamped to [0, 1].

    Args:
        normal: Unit surface normal.
        to_light: Unit direction from the surface toward the light.
    """
    return tm.clamp(tm.dot(normal, to_light), 0.0, 1.0)


@ti.func
def specular_directional(
    ray_direction: vec3,
    light_direction: vec3,
    normal: vec3,
    exponent: ti.f64,
) -> ti.f64:
    """Highlight strength for a directional light.

    Mirrors the light's travel direction about the normal and compares it
    with the direction back toward the viewer.

    Args:
        ray_direction: Direction of the incoming view ray.
        light_direction: Unit direction the light travels in.
        normal: Unit surface normal.
        exponent: Phong exponent.

    Returns:
        ``max(0, -ray_direction . reflect(light_direction, normal)) ^ exponent``.
    """
    r = reflect(light_direction, normal)
    return ti.pow(ti.max(tm.dot(-ray_direction, r), 0.0), exponent)


@ti.func
def specular_point(
    ray_direction: vec3,
    to_light: vec3,
    normal: vec3,
    exponent: ti.f64,
) -> ti.f64:
    """Highlight strength for a point light.

    Mirrors the view ray about the normal and compares it with the direction
    toward the light.

    Returns:
        ``max(0, to_light . reflect(ray_direction, normal)) ^ exponent``.
    """
    r = reflect(ray_direction, normal)
    return ti.pow(ti.max(tm.dot(to_light, r), 0.0), exponent)
