"""Frame renderer: turns a World into an 8-bit RGB buffer.

Each call to ``render()`` mirrors the world into the Taichi scene fields,
refreshes the camera's ray cache if the camera changed, and traces every
pixel in parallel. The output buffer is reused between frames and only
reallocated when the viewport size changes.

The World must not be modified while a frame is rendering; rendering and
editing are expected to alternate on a single control thread.

Example:
    >>> from whitted.runtime import initialize_taichi
    >>> initialize_taichi("cpu")
    >>> from whitted.core.renderer import FrameRenderer
    >>> from whitted.scene.world import World
    >>> renderer = FrameRenderer()
    >>> frame = renderer.render(World.default())
    >>> frame.width, frame.height
    (720, 480)
"""

import logging
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from whitted.core.integrator import clamp_depth, render_pixels, set_miss_color, upload_lights
from whitted.scene.intersection import upload_objects
from whitted.scene.world import World

logger = logging.getLogger(__name__)


@dataclass
class RenderedFrame:
    """The latest rendered image.

    Attributes:
        pixels: Pixel bytes of shape (width * height, 3). Pixel (x, y) is at
            index ``y * width + x`` and row 0 is the bottom of the image.
            This is the renderer's own buffer and is overwritten by the
            next frame.
        width: Image width in pixels.
        height: Image height in pixels.
    """

    pixels: npt.NDArray[np.uint8]
    width: int
    height: int

    def pixel(self, x: int, y: int) -> tuple[int, int, int]:
        """Get the color of pixel (x, y), with y = 0 at the bottom."""
        r, g, b = self.pixels[y * self.width + x]
        return int(r), int(g), int(b)

    def to_image(self) -> npt.NDArray[np.uint8]:
        """Get a copy as an (height, width, 3) array with row 0 at the top."""
        image = self.pixels.reshape(self.height, self.width, 3)
        return np.flipud(image).copy()


def upload_world(world: World) -> None:
    """Mirror objects, lights and the miss color into the Taichi fields."""
    upload_objects(world.objects)
    upload_lights(world.lights)
    set_miss_color(world.camera.info.miss_color)


class FrameRenderer:
    """Renders frames into a reusable pixel buffer.

    Attributes:
        width: Width of the last rendered frame.
        height: Height of the last rendered frame.
    """

    def __init__(self) -> None:
        self._pixels: npt.NDArray[np.uint8] = np.zeros((0, 3), dtype=np.uint8)
        self._width = 0
        self._height = 0
        self._frame: RenderedFrame | None = None

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def buffer(self) -> npt.NDArray[np.uint8]:
        """The raw pixel buffer, shape (width * height, 3)."""
        return self._pixels

    @property
    def latest_frame(self) -> RenderedFrame | None:
        """The most recent frame, or None before the first render."""
        return self._frame

    def _resize(self, width: int, height: int) -> None:
        count = width * height
        if self._pixels.shape[0] != count:
            logger.debug("Resizing output buffer to %dx%d", width, height)
            self._pixels = np.zeros((count, 3), dtype=np.uint8)
        self._width = width
        self._height = height

    def render(self, world: World) -> RenderedFrame:
        """Render one frame of the world.

        Args:
            world: The scene to render.

        Returns:
            The rendered frame, backed by this renderer's buffer.

        Raises:
            ValueError: If the camera viewport is empty or the depth is
                negative.
            RuntimeError: If the scene exceeds the object or light capacity.
        """
        camera = world.camera
        info = camera.info
        info.validate()

        upload_world(world)
        camera.refresh_rays()
        rays = camera.rays()

        self._resize(rays.width, rays.height)
        render_pixels(
            rays.origins,
            rays.directions,
            self._pixels,
            len(rays),
            clamp_depth(info.depth),
        )

        self._frame = RenderedFrame(self._pixels, self._width, self._height)
        return self._frame

    def __repr__(self) -> str:
        return f"FrameRenderer(width={self._width}, height={self._height})"
