"""Geometry module for ray/primitive intersection.

Components:
    sphere: Sphere primitive, HitRecord and quadratic root solving
    plane: Bounded horizontal plane primitive

All intersection functions are Taichi functions for use inside kernels.
"""

from .plane import Plane, hit_plane
from .sphere import HitRecord, Sphere, hit_sphere, sphere_roots

__all__ = [
    "HitRecord",
    "Plane",
    "Sphere",
    "hit_plane",
    "hit_sphere",
    "sphere_roots",
]
