"""Render configuration for command-line use.

``RenderConfig`` collects the settings a script needs to produce an image:
which Taichi backend to use, how to log, which scene to load and where to
write the result. Optional overrides are applied on top of the loaded
scene's camera.

Example:
    >>> from whitted.config import RenderConfig
    >>> config = RenderConfig.from_args(["--scene", "room.json", "--width", "320"])
    >>> config.width
    320
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from whitted.runtime import BACKENDS
from whitted.scene.world import World


@dataclass
class RenderConfig:
    """Settings for a single render.

    Attributes:
        backend: Taichi backend ("auto", "cpu" or "cuda").
        log_level: Logging level name.
        log_file: Optional file to copy log output to.
        scene_path: Scene JSON to load; None renders the default scene.
        output_path: PNG file to write.
        save_scene_path: Optional path to write the (overridden) scene to.
        width: Viewport width override.
        height: Viewport height override.
        depth: Recursion depth override.
    """

    backend: str = "auto"
    log_level: str = "INFO"
    log_file: Path | None = None
    scene_path: Path | None = None
    output_path: Path = Path("render.png")
    save_scene_path: Path | None = None
    width: int | None = None
    height: int | None = None
    depth: int | None = None

    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        """Create the argument parser for render scripts."""
        parser = argparse.ArgumentParser(
            description="Render a scene with the Whitted ray tracer.",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        parser.add_argument(
            "--scene",
            type=Path,
            default=None,
            help="Scene JSON file (default: built-in scene)",
        )
        parser.add_argument(
            "--output",
            type=Path,
            default=Path("render.png"),
            help="Output PNG path (default: render.png)",
        )
        parser.add_argument(
            "--save-scene",
            type=Path,
            default=None,
            help="Also write the scene (after overrides) to this JSON file",
        )
        parser.add_argument("--width", type=int, default=None, help="Viewport width override")
        parser.add_argument("--height", type=int, default=None, help="Viewport height override")
        parser.add_argument("--depth", type=int, default=None, help="Recursion depth override")
        parser.add_argument(
            "--backend",
            choices=BACKENDS,
            default="auto",
            help="Taichi backend (default: auto)",
        )
        parser.add_argument(
            "--log-level",
            default="INFO",
            choices=["DEBUG", "INFO", "WARNING", "ERROR"],
            help="Logging level (default: INFO)",
        )
        parser.add_argument("--log-file", type=Path, default=None, help="Also log to this file")
        return parser

    @classmethod
    def from_args(cls, argv: Sequence[str] | None = None) -> RenderConfig:
        """Parse command-line arguments into a config.

        Raises:
            SystemExit: On invalid arguments (argparse behavior).
        """
        args = cls.build_parser().parse_args(argv)
        return cls(
            backend=args.backend,
            log_level=args.log_level,
            log_file=args.log_file,
            scene_path=args.scene,
            output_path=args.output,
            save_scene_path=args.save_scene,
            width=args.width,
            height=args.height,
            depth=args.depth,
        )

    def apply_to(self, world: World) -> None:
        """Apply the viewport and depth overrides to a world's camera.

        Raises:
            ValueError: If an override is out of range.
        """
        info = world.camera.info
        if self.width is not None:
            info.viewport_width = self.width
        if self.height is not None:
            info.viewport_height = self.height
        if self.depth is not None:
            info.depth = self.depth
        info.validate()
