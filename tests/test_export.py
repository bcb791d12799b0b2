"""Tests for PNG export."""

from pathlib import Path

import numpy as np
import pytest

from whitted.preview.export import load_png, save_png, save_png_from_array


class TestPngExport:
    """Tests for saving frames and arrays."""

    def test_save_array(self, tmp_path: Path) -> None:
        image = np.zeros((4, 6, 3), dtype=np.uint8)
        image[0, 0] = (255, 0, 0)
        path = save_png_from_array(image, tmp_path / "out.png")

        assert path.exists()
        loaded = load_png(path)
        assert loaded.shape == (4, 6, 3)
        np.testing.assert_array_equal(loaded, image)

    @pytest.mark.parametrize(
        "image",
        [
            np.zeros((4, 6), dtype=np.uint8),
            np.zeros((4, 6, 4), dtype=np.uint8),
            np.zeros((4, 6, 3), dtype=np.float32),
        ],
    )
    def test_rejects_bad_arrays(self, tmp_path: Path, image) -> None:
        with pytest.raises(ValueError):
            save_png_from_array(image, tmp_path / "bad.png")

    def test_save_frame_is_upright(self, tmp_path: Path) -> None:
        from whitted.core.renderer import RenderedFrame

        pixels = np.zeros((3 * 2, 3), dtype=np.uint8)
        pixels[0] = (0, 255, 0)  # bottom-left in frame coordinates
        frame = RenderedFrame(pixels, width=3, height=2)

        path = save_png(frame, tmp_path / "frame.png")
        loaded = load_png(path)
        assert loaded.shape == (2, 3, 3)
        assert tuple(loaded[1, 0]) == (0, 255, 0)
        assert tuple(loaded[0, 0]) == (0, 0, 0)

    def test_render_and_save(self, tmp_path: Path) -> None:
        from whitted.core.renderer import FrameRenderer
        from whitted.scene.world import World

        world = World.default()
        world.camera.info.viewport_width = 24
        world.camera.info.viewport_height = 16
        frame = FrameRenderer().render(world)

        loaded = load_png(save_png(frame, tmp_path / "default.png"))
        np.testing.assert_array_equal(loaded, frame.to_image())
