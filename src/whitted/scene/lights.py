"""Light sources.

Three variants: ambient (uniform fill), directional (parallel rays along a
fixed direction) and point (radiating from a position). Colors are RGB
triples; they are not limited to [0, 1].
"""

from dataclasses import dataclass, field

from whitted.core.vector import Vector3
from whitted.scene.objects import RGB


@dataclass
class AmbientLight:
    """Adds its color to every hit, unattenuated."""

    color: RGB = (0.1, 0.05, 0.05)

    label = "Ambient Light"


@dataclass
class DirectionalLight:
    """Light arriving from infinitely far away.

    Attributes:
        color: Light color.
        direction: Direction the light travels in. Need not be unit length.
    """

    color: RGB = (1.0, 1.0, 1.0)
    direction: Vector3 = field(default_factory=lambda: Vector3(0.5, 0.5, -10.0))

    label = "Directional Light"


@dataclass
class PointLight:
    """Light emitted from a single position."""

    color: RGB = (1.0, 1.0, 1.0)
    position: Vector3 = field(default_factory=lambda: Vector3(80.0, 60.0, -40.0))

    label = "Point Light"


Light = AmbientLight | DirectionalLight | PointLight
