"""Image export for rendered frames.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Frames are stored bottom row first; export flips them so the saved image
is upright.

Example:
    >>> from whitted.preview.export import save_png
    >>> from whitted.core.renderer import FrameRenderer
    >>>
    >>> frame = FrameRenderer().render(world)
    >>> save_png(frame, "output.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from whitted.core.renderer import RenderedFrame

logger = logging.getLogger(__name__)


def save_png(frame: RenderedFrame, filepath: str | Path) -> Path:
    """Save a rendered frame as a PNG file.

    Args:
        frame: The frame to save.
        filepath: Output file path (should end in .png).

    Returns:
        The path written to.
    """
    path = save_png_from_array(frame.to_image(), filepath)
    logger.info("Saved %dx%d frame to %s", frame.width, frame.height, path)
    return path


def save_png_from_array(image: npt.NDArray[np.uint8], filepath: str | Path) -> Path:
    """Save an 8-bit image array as a PNG file.

    Args:
        image: Image array of shape (H, W, 3) with row 0 at the top.
        filepath: Output file path (should end in .png).

    Returns:
        The path written to.

    Raises:
        ValueError: If the array is not an (H, W, 3) uint8 image.
    """
    if image.ndim != 3 or image.shape[2] != 3 or image.dtype != np.uint8:
        raise ValueError(f"Expected an (H, W, 3) uint8 image, got {image.shape} {image.dtype}")

    path = Path(filepath)
    PILImage.fromarray(np.ascontiguousarray(image)).save(path)
    return path


def load_png(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Read a PNG back as an (H, W, 3) uint8 array with row 0 at the top."""
    with PILImage.open(filepath) as img:
        return np.asarray(img.convert("RGB"), dtype=np.uint8).copy()
