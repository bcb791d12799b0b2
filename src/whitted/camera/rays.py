"""Primary ray generation kernels.

One ray is produced per pixel and stored at index ``y * width + x``. Row 0
is the bottom of the image. Rays are written into NumPy arrays passed to the
kernels as ndarrays, so the cache can be resized without reallocating Taichi
fields.
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from whitted.core.ray import safe_normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@dataclass
class RayBuffer:
    """Cached primary rays for one viewport.

    Attributes:
        origins: Ray origins, shape (width * height, 3), float64.
        directions: Unit ray directions, shape (width * height, 3), float64.
        width: Viewport width in pixels.
        height: Viewport height in pixels.
    """

    origins: npt.NDArray[np.float64]
    directions: npt.NDArray[np.float64]
    width: int
    height: int

    def __len__(self) -> int:
        return self.width * self.height

    @classmethod
    def allocate(cls, width: int, height: int) -> "RayBuffer":
        """Allocate zeroed storage for ``width * height`` rays."""
        count = width * height
        return cls(
            origins=np.zeros((count, 3), dtype=np.float64),
            directions=np.zeros((count, 3), dtype=np.float64),
            width=width,
            height=height,
        )


@ti.kernel
def fill_perspective_rays(
    origins: ti.types.ndarray(dtype=ti.f64, ndim=2),
    directions: ti.types.ndarray(dtype=ti.f64, ndim=2),
    width: ti.i32,
    height: ti.i32,
    position: vec3,
    forward: vec3,
    right: vec3,
    up: vec3,
    vertical_fov: ti.f64,
    horizontal_fov: ti.f64,
):
    """Write pinhole camera rays.

    All rays start at the camera position. The direction for pixel (x, y)
    is ``normalize(right * view_x + up * view_y + forward)`` with
    ``view_x = horizontal_fov * (2x/width - 1)`` and
    ``view_y = vertical_fov * (2y/height - 1)``.
    """
    for i in range(width * height):
        x = i % width
        y = i // width
        u = ti.cast(x, ti.f64) / ti.cast(width, ti.f64)
        v = ti.cast(y, ti.f64) / ti.cast(height, ti.f64)

        view_x = horizontal_fov * (2.0 * u - 1.0)
        view_y = vertical_fov * (2.0 * v - 1.0)
        direction = safe_normalize(right * view_x + up * view_y + forward)

        for k in ti.static(range(3)):
            origins[i, k] = position[k]
            directions[i, k] = direction[k]


@ti.kernel
def fill_orthographic_rays(
    origins: ti.types.ndarray(dtype=ti.f64, ndim=2),
    directions: ti.types.ndarray(dtype=ti.f64, ndim=2),
    width: ti.i32,
    height: ti.i32,
    position: vec3,
    forward: vec3,
    right: vec3,
    up: vec3,
    camera_width: ti.f64,
    camera_height: ti.f64,
):
    """Write parallel-projection rays.

    Every ray shares the direction ``normalize(forward)``; the origin of
    pixel (x, y) is offset from the camera position across the image plane.
    """
    direction = safe_normalize(forward)
    for i in range(width * height):
        x = i % width
        y = i // width
        view_x = 2.0 * ti.cast(x, ti.f64) / ti.cast(width, ti.f64) - 1.0
        view_y = 2.0 * ti.cast(y, ti.f64) / ti.cast(height, ti.f64) - 1.0

        origin = position + right * view_x * camera_width + up * view_y * camera_height

        for k in ti.static(range(3)):
            origins[i, k] = origin[k]
            directions[i, k] = direction[k]
