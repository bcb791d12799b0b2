"""Core rendering module.

Components:
    vector: Host-side Vector3 value type
    quaternion: Quaternion rotation for camera look controls
    ray: Ray data structure and vector utilities for Taichi kernels
    integrator: Whitted light transport (shading, reflection, refraction)
    renderer: Parallel frame rendering into a reusable byte buffer

integrator and renderer declare Taichi fields and are NOT imported here.
Import them directly after calling whitted.runtime.initialize_taichi().
"""

from .quaternion import Quaternion
from .ray import Ray, make_ray, ray_at, reflect, refract, safe_normalize, vec3
from .vector import Vector3

__all__ = [
    "Quaternion",
    "Ray",
    "Vector3",
    "make_ray",
    "ray_at",
    "reflect",
    "refract",
    "safe_normalize",
    "vec3",
]
