"""The World: everything that gets rendered.

A World owns the object list, the light list and the camera. Objects and
lights are identified by their list index. Removing an entry shifts every
later index down by one, so an editor holding an index must re-resolve it
after any insertion or removal before it.

Example:
    >>> from whitted.scene.world import World
    >>> from whitted.scene.objects import Sphere
    >>> world = World.default()
    >>> idx = world.add_object(Sphere(radius=0.5))
    >>> world.remove_object(idx)
    Sphere(...)
"""

from __future__ import annotations

import logging
from pathlib import Path

from whitted.camera.camera import Camera
from whitted.scene.lights import AmbientLight, Light, PointLight
from whitted.scene.objects import Object, Plane, Sphere

logger = logging.getLogger(__name__)


class World:
    """Scene aggregate: objects, lights and camera.

    Attributes:
        objects: Renderable objects in iteration (and tie-break) order.
        lights: Light sources.
        camera: The viewing camera.
    """

    def __init__(
        self,
        objects: list[Object] | None = None,
        lights: list[Light] | None = None,
        camera: Camera | None = None,
    ) -> None:
        self.objects: list[Object] = list(objects) if objects is not None else []
        self.lights: list[Light] = list(lights) if lights is not None else []
        self.camera = camera if camera is not None else Camera()

    @classmethod
    def default(cls) -> World:
        """The startup scene: a sphere above a floor, lit by a point light."""
        return cls(
            objects=[Sphere(), Plane()],
            lights=[PointLight(), AmbientLight()],
            camera=Camera(),
        )

    def __repr__(self) -> str:
        return (
            f"World(objects={len(self.objects)}, lights={len(self.lights)}, "
            f"camera={self.camera.info!r})"
        )

    # =========================================================================
    # Editing
    # =========================================================================

    def add_object(self, obj: Object) -> int:
        """Append an object.

        Returns:
            The index of the new object.
        """
        if not isinstance(obj, (Sphere, Plane)):
            raise TypeError(f"Expected Sphere or Plane, got {type(obj).__name__}")
        self.objects.append(obj)
        return len(self.objects) - 1

    def remove_object(self, index: int) -> Object:
        """Remove and return the object at ``index``.

        Raises:
            IndexError: If there is no object at ``index``.
        """
        return self.objects.pop(index)

    def add_light(self, light: Light) -> int:
        """Append a light.

        Returns:
            The index of the new light.
        """
        self.lights.append(light)
        return len(self.lights) - 1

    def remove_light(self, index: int) -> Light:
        """Remove and return the light at ``index``.

        Raises:
            IndexError: If there is no light at ``index``.
        """
        return self.lights.pop(index)

    def replace_with(self, other: World) -> None:
        """Take over the objects, lights and camera of another world."""
        self.objects = other.objects
        self.lights = other.lights
        self.camera = other.camera

    # =========================================================================
    # Persistence
    # =========================================================================

    def save(self, path: str | Path) -> None:
        """Write this world to a JSON scene file."""
        from whitted.scene.serialization import save_world

        save_world(self, path)

    def load(self, path: str | Path) -> None:
        """Replace this world with the contents of a scene file.

        The file is fully parsed and validated before anything is replaced,
        so on failure the current scene is left as it was.

        Raises:
            SceneLoadError: If the file cannot be read or is not a valid scene.
        """
        from whitted.scene.serialization import SceneFormatError, SceneLoadError, load_world

        try:
            loaded = load_world(path)
        except (OSError, SceneFormatError) as e:
            logger.error("Failed to load scene from %s: %s", path, e)
            raise SceneLoadError(f"Could not load scene from {path}: {e}") from e

        self.replace_with(loaded)
        logger.info(
            "Loaded scene from %s (%d objects, %d lights)",
            path,
            len(self.objects),
            len(self.lights),
        )
