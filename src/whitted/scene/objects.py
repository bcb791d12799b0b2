"""Scene objects and their materials.

Objects form a closed set of two variants, ``Sphere`` and ``Plane``; code
that needs to tell them apart dispatches with ``isinstance``. All fields are
plain mutable attributes so an editing layer can change them between frames.

Example:
    >>> from whitted.core.vector import Vector3
    >>> from whitted.scene.objects import Material, Sphere
    >>> glass = Material(transparency=1.0, refractive_index=1.5, has_specular=False)
    >>> ball = Sphere(position=Vector3(0.0, 0.0, 6.0), radius=1.0, material=glass)
"""

from dataclasses import dataclass, field

from whitted.core.vector import Vector3

RGB = tuple[float, float, float]


@dataclass
class Material:
    """Surface appearance of an object.

    Attributes:
        ambient_reflection: Weight of the ambient light sum.
        has_specular: Whether the Phong highlight is evaluated.
        specular_reflection: Phong exponent of the highlight.
        diffuse_reflection: Weight of the diffuse light sum.
        reflectivity: Mirror blend weight, conceptually in [0, 1].
        transparency: Transmission blend weight, conceptually in [0, 1].
        refractive_index: Index of refraction (> 0).
        color: Surface albedo as RGB in [0, 1].
    """

    ambient_reflection: float = 1.0
    has_specular: bool = True
    specular_reflection: float = 10.0
    diffuse_reflection: float = 1.0
    reflectivity: float = 0.0
    transparency: float = 0.0
    refractive_index: float = 1.0
    color: RGB = (1.0, 0.8, 0.5)


@dataclass
class Sphere:
    """A sphere given by its center and radius."""

    position: Vector3 = field(default_factory=lambda: Vector3(0.0, 0.0, 10.0))
    radius: float = 2.0
    material: Material = field(default_factory=Material)

    label = "Sphere"


@dataclass
class Plane:
    """A horizontal rectangle centered on ``position``.

    Attributes:
        position: Center of the rectangle.
        width: Extent along world X.
        height: Extent along world Z.
        material: Surface material.
    """

    position: Vector3 = field(default_factory=lambda: Vector3(0.0, -2.0, 10.0))
    width: float = 100.0
    height: float = 100.0
    material: Material = field(default_factory=Material)

    label = "Plane"


Object = Sphere | Plane
