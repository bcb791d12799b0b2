"""Camera state, movement and the cached primary rays.

``CameraInfo`` holds every user-editable camera setting. ``Camera`` wraps it
with two snapshots:

- the settings seen at the previous ``update()``, which detects edits made
  between frames and sets the ``moved`` flag;
- the settings the ray cache was computed from, which decides whether
  ``refresh_rays()`` has work to do.

Ray regeneration is never a side effect of reading rays: ``rays()`` raises
while the cache is stale, and ``refresh_rays()`` (called by the frame
renderer) is the single place rays are rebuilt.

Example:
    >>> from whitted.camera.camera import Camera, CameraInfo
    >>> from whitted.camera.controls import InputSnapshot
    >>> camera = Camera(CameraInfo(viewport_width=320, viewport_height=200))
    >>> camera.update(InputSnapshot.from_key_names(["w"]))
    True
    >>> camera.refresh_rays()
    True
    >>> len(camera.rays())
    64000
"""

import copy
import logging
from dataclasses import dataclass, field
from enum import Enum

import taichi.math as tm

from whitted.camera.controls import InputState, Key
from whitted.camera.rays import RayBuffer, fill_orthographic_rays, fill_perspective_rays
from whitted.core.quaternion import Quaternion
from whitted.core.vector import Vector3

logger = logging.getLogger(__name__)

# World-space "down", crossed with forward to get the camera's right axis
WORLD_DOWN = Vector3(0.0, -1.0, 0.0)

# Radians of rotation per unit of pointer delta, before scaling by speed
LOOK_SENSITIVITY = 0.05


class CameraType(Enum):
    """Projection mode."""

    PERSPECTIVE = "Perspective"
    ORTHOGRAPHIC = "Orthographic"


@dataclass
class CameraInfo:
    """User-editable camera settings.

    Attributes:
        camera_type: Projection mode.
        vertical_fov: Vertical extent of the image plane at unit distance
            (perspective).
        camera_height: Half height of the view volume in world units
            (orthographic).
        viewport_width: Image width in pixels.
        viewport_height: Image height in pixels.
        position: Camera position.
        forward: View direction. Not re-normalized after rotation.
        miss_color: Background color for rays that hit nothing.
        depth: Maximum number of reflection/refraction bounces.
        speed: Movement step per input sample; also scales look rotation.
    """

    camera_type: CameraType = CameraType.PERSPECTIVE
    vertical_fov: float = 1.0
    camera_height: float = 1.0
    viewport_width: int = 720
    viewport_height: int = 480
    position: Vector3 = field(default_factory=Vector3)
    forward: Vector3 = field(default_factory=lambda: Vector3(0.0, 0.0, 1.0))
    miss_color: tuple[float, float, float] = (0.6, 0.8, 0.9)
    depth: int = 5
    speed: float = 0.1

    def validate(self) -> None:
        """Check the preconditions of ray generation.

        Raises:
            ValueError: If a viewport dimension is not a positive integer or
                the depth is negative.
        """
        if self.viewport_width <= 0 or self.viewport_height <= 0:
            raise ValueError(
                f"Viewport dimensions must be positive, got "
                f"{self.viewport_width}x{self.viewport_height}"
            )
        if self.depth < 0:
            raise ValueError(f"Depth must be non-negative, got {self.depth}")

    def right(self) -> Vector3:
        """Unit vector to the right of the view direction."""
        return self.forward.cross(WORLD_DOWN).normalize()

    def up(self) -> Vector3:
        """Unit vector above the view direction."""
        return self.forward.cross(self.right()).normalize()

    def horizontal_fov(self) -> float:
        return self.viewport_width * self.vertical_fov / self.viewport_height

    def camera_width(self) -> float:
        return self.viewport_width * self.camera_height / self.viewport_height


def _vec(v: Vector3) -> tm.vec3:
    return tm.vec3(v.x, v.y, v.z)


class Camera:
    """A camera with a dirty-tracked ray cache.

    Attributes:
        info: The live, editable settings.
        moved: Whether the last update() changed anything.
    """

    def __init__(self, info: CameraInfo | None = None) -> None:
        self.info = info if info is not None else CameraInfo()
        self.moved = False
        self._previous = copy.deepcopy(self.info)
        self._rays: RayBuffer | None = None
        self._rays_info: CameraInfo | None = None

    def __repr__(self) -> str:
        return f"Camera(info={self.info!r}, moved={self.moved})"

    # =========================================================================
    # Input
    # =========================================================================

    def update(self, inputs: InputState) -> bool:
        """Apply one input sample.

        First flags edits made to ``info`` since the previous update, then
        applies pointer look and one movement step per held key. Rays are
        not regenerated here.

        Args:
            inputs: The input sample for this frame.

        Returns:
            The new value of ``moved``.
        """
        info = self.info
        self.moved = info != self._previous

        if inputs.is_pointer_down():
            yaw, pitch = inputs.pointer_delta()
            if yaw != 0.0 or pitch != 0.0:
                pitch = pitch * LOOK_SENSITIVITY * info.speed
                yaw = yaw * LOOK_SENSITIVITY * info.speed

                q_pitch = Quaternion.from_angle_axis(pitch, info.right())
                q_yaw = Quaternion.from_angle_axis(yaw, info.up())
                info.forward = (q_pitch * q_yaw).rotate(info.forward)
                self.moved = True

        step = info.speed
        if inputs.is_key_down(Key.FORWARD):
            info.position = info.position + info.forward * step
            self.moved = True
        elif inputs.is_key_down(Key.BACKWARD):
            info.position = info.position - info.forward * step
            self.moved = True

        if inputs.is_key_down(Key.RIGHT):
            info.position = info.position + info.right() * step
            self.moved = True
        elif inputs.is_key_down(Key.LEFT):
            info.position = info.position - info.right() * step
            self.moved = True

        if inputs.is_key_down(Key.UP):
            info.position = info.position + info.up() * step
            self.moved = True
        elif inputs.is_key_down(Key.DOWN):
            info.position = info.position - info.up() * step
            self.moved = True

        self._previous = copy.deepcopy(info)
        return self.moved

    # =========================================================================
    # Ray Cache
    # =========================================================================

    def needs_rays(self) -> bool:
        """Whether the ray cache is missing or older than ``info``."""
        return self._rays is None or self._rays_info != self.info

    def calc_rays(self) -> RayBuffer:
        """Recompute the ray cache unconditionally.

        Returns:
            The refreshed ray buffer.

        Raises:
            ValueError: If the viewport is empty.
        """
        info = self.info
        info.validate()

        width, height = info.viewport_width, info.viewport_height
        rays = self._rays
        if rays is None or rays.width != width or rays.height != height:
            rays = RayBuffer.allocate(width, height)

        forward = info.forward
        right = info.right()
        up = info.up()

        if info.camera_type == CameraType.ORTHOGRAPHIC:
            fill_orthographic_rays(
                rays.origins,
                rays.directions,
                width,
                height,
                _vec(info.position),
                _vec(forward),
                _vec(right),
                _vec(up),
                info.camera_width(),
                info.camera_height,
            )
        else:
            fill_perspective_rays(
                rays.origins,
                rays.directions,
                width,
                height,
                _vec(info.position),
                _vec(forward),
                _vec(right),
                _vec(up),
                info.vertical_fov,
                info.horizontal_fov(),
            )

        self._rays = rays
        self._rays_info = copy.deepcopy(info)
        logger.debug(
            "Computed %d %s rays (%dx%d)",
            len(rays),
            info.camera_type.value.lower(),
            width,
            height,
        )
        return rays

    def refresh_rays(self) -> bool:
        """Recompute the ray cache if it is stale.

        Returns:
            True if rays were recomputed.
        """
        if not self.needs_rays():
            return False
        self.calc_rays()
        return True

    def rays(self) -> RayBuffer:
        """Return the cached rays.

        Raises:
            RuntimeError: If the camera changed since the rays were computed.
        """
        if self.needs_rays():
            raise RuntimeError("Camera rays are stale. Call refresh_rays() first.")
        return self._rays
