"""Whitted: a recursive ray tracer for small scenes of spheres and planes.

Rendering runs in Taichi kernels in double precision. Modules that declare
Taichi fields (``whitted.scene.intersection``, ``whitted.materials.phong``,
``whitted.core.integrator`` and ``whitted.core.renderer``) must be imported
after ``whitted.runtime.initialize_taichi()`` has been called.

Example:
    >>> from whitted.runtime import initialize_taichi
    >>> initialize_taichi("cpu")
    >>> from whitted.core.renderer import FrameRenderer
    >>> from whitted.scene.world import World
    >>> frame = FrameRenderer().render(World.default())
"""

__version__ = "0.1.0"
