#!/usr/bin/env python3
"""Render a scene to a PNG file.

Loads a scene file (or the built-in default scene), applies command-line
overrides, renders a single frame and saves it.

Usage:
    python examples/render_scene.py [options]

Options:
    --scene PATH        Scene JSON file (default: built-in scene)
    --output PATH       Output PNG path (default: render.png)
    --save-scene PATH   Also write the scene to this JSON file
    --width WIDTH       Viewport width override
    --height HEIGHT     Viewport height override
    --depth DEPTH       Recursion depth override
    --backend NAME      auto, cpu or cuda (default: auto)
    --log-level LEVEL   DEBUG, INFO, WARNING or ERROR (default: INFO)
    --log-file PATH     Also log to this file

Example:
    python examples/render_scene.py --width 320 --height 200 --output sphere.png
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path

from whitted.config import RenderConfig
from whitted.logging_config import setup_logging
from whitted.runtime import initialize_taichi

logger = logging.getLogger("whitted.examples.render_scene")


def render_scene(config: RenderConfig) -> Path:
    """Render the configured scene and save it.

    Args:
        config: What to render and where to write it.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports so Taichi is initialized before fields are declared
    from whitted.core.renderer import FrameRenderer
    from whitted.preview.export import save_png
    from whitted.scene.world import World

    world = World.default()
    if config.scene_path is not None:
        world.load(config.scene_path)

    config.apply_to(world)
    info = world.camera.info
    logger.info(
        "Rendering %d objects, %d lights at %dx%d (depth %d)",
        len(world.objects),
        len(world.lights),
        info.viewport_width,
        info.viewport_height,
        info.depth,
    )

    if config.save_scene_path is not None:
        world.save(config.save_scene_path)

    renderer = FrameRenderer()
    start_time = time.time()
    frame = renderer.render(world)
    logger.info("Frame rendered in %.2fs", time.time() - start_time)

    return save_png(frame, config.output_path)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    config = RenderConfig.from_args(argv)
    setup_logging(config.log_level, config.log_file)
    initialize_taichi(config.backend)

    try:
        output = render_scene(config)
    except (RuntimeError, ValueError) as e:
        logger.error("Render failed: %s", e)
        return 1

    logger.info("Saved to: %s", output.absolute())
    return 0


if __name__ == "__main__":
    sys.exit(main())
