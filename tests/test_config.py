"""Tests for configuration, logging setup and the render script."""

import logging
from pathlib import Path

import pytest

from whitted.camera.camera import CameraInfo
from whitted.config import RenderConfig
from whitted.logging_config import setup_logging
from whitted.scene.world import World


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() so handlers do not leak between tests."""
    yield
    logger = logging.getLogger("whitted")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


class TestRenderConfig:
    """Tests for command-line parsing."""

    def test_defaults(self):
        config = RenderConfig.from_args([])
        assert config.backend == "auto"
        assert config.log_level == "INFO"
        assert config.scene_path is None
        assert config.output_path == Path("render.png")
        assert config.width is None

    def test_parse_arguments(self):
        config = RenderConfig.from_args(
            [
                "--scene", "room.json",
                "--output", "out.png",
                "--width", "320",
                "--height", "200",
                "--depth", "3",
                "--backend", "cpu",
                "--log-level", "DEBUG",
            ]
        )
        assert config.scene_path == Path("room.json")
        assert config.output_path == Path("out.png")
        assert (config.width, config.height, config.depth) == (320, 200, 3)
        assert config.backend == "cpu"
        assert config.log_level == "DEBUG"

    def test_rejects_unknown_backend(self):
        with pytest.raises(SystemExit):
            RenderConfig.from_args(["--backend", "metal"])

    def test_apply_overrides(self):
        world = World.default()
        RenderConfig(width=64, depth=2).apply_to(world)
        assert world.camera.info.viewport_width == 64
        assert world.camera.info.viewport_height == CameraInfo().viewport_height
        assert world.camera.info.depth == 2

    def test_apply_invalid_override(self):
        with pytest.raises(ValueError):
            RenderConfig(height=0).apply_to(World.default())


class TestLogging:
    """Tests for setup_logging()."""

    def test_configures_package_logger(self):
        logger = setup_logging("DEBUG")
        assert logger.name == "whitted"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_repeated_setup_does_not_duplicate_handlers(self, tmp_path: Path) -> None:
        setup_logging(logging.INFO)
        logger = setup_logging(logging.INFO, tmp_path / "render.log")
        assert len(logger.handlers) == 2
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in (tmp_path / "render.log").read_text(encoding="utf-8")

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            setup_logging("LOUD")


class TestRuntime:
    """Tests for Taichi initialization."""

    def test_repeated_initialization_is_noop(self):
        from whitted.runtime import initialize_taichi

        assert initialize_taichi("cpu") == "CPU"
        assert initialize_taichi("auto") == "CPU"

    def test_unknown_backend(self):
        from whitted.runtime import initialize_taichi

        with pytest.raises(ValueError):
            initialize_taichi("metal")


class TestRenderScript:
    """Tests for the render_scene example script."""

    def test_render_default_scene(self, tmp_path: Path) -> None:
        from examples.render_scene import main

        output = tmp_path / "out.png"
        saved_scene = tmp_path / "scene.json"
        code = main(
            [
                "--output", str(output),
                "--save-scene", str(saved_scene),
                "--width", "24",
                "--height", "16",
                "--backend", "cpu",
            ]
        )
        assert code == 0
        assert output.exists()
        assert saved_scene.exists()

        # The saved scene carries the overrides
        world = World.default()
        world.load(saved_scene)
        assert world.camera.info.viewport_width == 24

    def test_missing_scene_fails(self, tmp_path: Path) -> None:
        from examples.render_scene import main

        code = main(["--scene", str(tmp_path / "missing.json"), "--output", str(tmp_path / "x.png")])
        assert code == 1
        assert not (tmp_path / "x.png").exists()
