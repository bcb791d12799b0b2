"""Camera module for view state and primary ray generation.

Components:
    camera: CameraInfo settings and the Camera with its dirty-tracked ray cache
    controls: Keyboard/pointer input protocol consumed by Camera.update()
    rays: Perspective and orthographic ray generation kernels

Ray generation uses normalized image coordinates:
    u in [0, 1): left to right across image
    v in [0, 1): bottom to top across image
"""

from .camera import LOOK_SENSITIVITY, Camera, CameraInfo, CameraType
from .controls import DEFAULT_KEY_MAP, InputSnapshot, InputState, Key
from .rays import RayBuffer

__all__ = [
    "Camera",
    "CameraInfo",
    "CameraType",
    "DEFAULT_KEY_MAP",
    "InputSnapshot",
    "InputState",
    "Key",
    "LOOK_SENSITIVITY",
    "RayBuffer",
]
