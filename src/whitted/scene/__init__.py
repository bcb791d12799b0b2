"""Scene module: the data that gets rendered.

Components:
    objects: Material, Sphere and Plane
    lights: Ambient, directional and point lights
    world: The World aggregate (objects, lights, camera)
    serialization: JSON scene files
    intersection: Kernel-side object store and nearest-hit search

intersection declares Taichi fields and is NOT imported here.
"""

from .lights import AmbientLight, DirectionalLight, Light, PointLight
from .objects import Material, Object, Plane, Sphere
from .world import World

__all__ = [
    "AmbientLight",
    "DirectionalLight",
    "Light",
    "Material",
    "Object",
    "Plane",
    "PointLight",
    "Sphere",
    "World",
]
