"""Pytest configuration for renderer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate the module-level fields of already imported modules.
    """
    from whitted.runtime import initialize_taichi

    initialize_taichi("cpu", random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear objects, materials and lights before and after each test."""
    # Import here so Taichi is initialized before fields are declared
    from whitted.core.integrator import clear_lights, set_miss_color
    from whitted.scene.intersection import clear_scene

    def _clear_all():
        clear_scene()
        clear_lights()
        set_miss_color((0.0, 0.0, 0.0))

    _clear_all()
    yield
    _clear_all()
