"""Tests for Whitted light transport.

Tests cover:
- Local Phong lighting from ambient, directional and point lights
- Shadow attenuation
- Mirror and transparent blending through the explicit trace stack
- Depth limits
"""

import logging
import math

import pytest

from whitted.core.vector import Vector3
from whitted.scene.lights import AmbientLight, DirectionalLight, PointLight
from whitted.scene.objects import Material, Plane, Sphere

MISS = (0.2, 0.3, 0.4)


def _setup(objects, lights, miss=MISS):
    from whitted.core.integrator import set_miss_color, upload_lights
    from whitted.scene.intersection import upload_objects

    upload_objects(objects)
    upload_lights(lights)
    set_miss_color(miss)


def _trace(origin, direction, depth=5):
    from whitted.core.integrator import trace_ray

    return trace_ray(origin, direction, depth)


def _assert_color(actual, expected, tol=1e-9):
    for a, e in zip(actual, expected):
        assert abs(a - e) < tol, f"{actual} != {expected}"


def _matte(color=(1.0, 1.0, 1.0), ambient=0.0, diffuse=1.0, **kwargs):
    return Material(
        color=color,
        ambient_reflection=ambient,
        diffuse_reflection=diffuse,
        has_specular=False,
        **kwargs,
    )


class TestLightStorage:
    """Tests for uploading lights."""

    def test_upload_lights(self):
        from whitted.core.integrator import get_light_count, upload_lights

        count = upload_lights([AmbientLight(), DirectionalLight(), PointLight()])
        assert count == 3
        assert get_light_count() == 3

    def test_upload_rejects_unknown_lights(self):
        from whitted.core.integrator import upload_lights

        with pytest.raises(TypeError):
            upload_lights([Sphere()])

    def test_light_capacity(self):
        from whitted.core.integrator import MAX_LIGHTS, upload_lights

        with pytest.raises(RuntimeError):
            upload_lights([AmbientLight() for _ in range(MAX_LIGHTS + 1)])


class TestLocalLighting:
    """Tests for Phong shading at a single hit."""

    def test_no_lights_is_black(self):
        _setup([Sphere()], [])
        color, bounces = _trace((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), depth=1)
        _assert_color(color, (0.0, 0.0, 0.0))
        assert bounces == 1

    def test_ambient_only(self):
        material = _matte(color=(1.0, 0.5, 1.0), ambient=1.0)
        _setup([Sphere(material=material)], [AmbientLight(color=(0.2, 0.4, 0.6))])
        color, _ = _trace((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        _assert_color(color, (0.2, 0.2, 0.6))

    def test_local_color_is_clamped(self):
        material = _matte(ambient=1.0)
        _setup([Sphere(material=material)], [AmbientLight(color=(3.0, 0.5, -1.0))])
        color, _ = _trace((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        _assert_color(color, (1.0, 0.5, 0.0))

    def test_directional_light_lit(self):
        floor = Plane(position=Vector3(0.0, -2.0, 10.0), material=_matte())
        _setup([floor], [DirectionalLight(direction=Vector3(0.0, -1.0, 0.0))])
        color, _ = _trace((0.0, 0.0, 10.0), (0.0, -1.0, 0.0))
        _assert_color(color, (1.0, 1.0, 1.0))

    def test_directional_light_incidence(self):
        floor = Plane(position=Vector3(0.0, -2.0, 10.0), material=_matte())
        light = DirectionalLight(direction=Vector3(1.0, -1.0, 0.0))
        _setup([floor], [light])
        color, _ = _trace((0.0, 0.0, 10.0), (0.0, -1.0, 0.0))
        _assert_color(color, (math.sqrt(0.5),) * 3)

    def test_directional_light_from_below_is_dark(self):
        floor = Plane(position=Vector3(0.0, -2.0, 10.0), material=_matte())
        _setup([floor], [DirectionalLight(direction=Vector3(0.0, 1.0, 0.0))])
        color, _ = _trace((0.0, 0.0, 10.0), (0.0, -1.0, 0.0))
        _assert_color(color, (0.0, 0.0, 0.0))

    def test_directional_shadow(self):
        floor = Plane(position=Vector3(0.0, -2.0, 10.0), material=_matte())
        occluder = Sphere(position=Vector3(0.0, 5.0, 10.0), radius=1.0, material=_matte())
        _setup([floor, occluder], [DirectionalLight(direction=Vector3(0.0, -1.0, 0.0))])
        color, _ = _trace((0.0, 0.0, 10.0), (0.0, -1.0, 0.0))
        _assert_color(color, (0.3, 0.3, 0.3))

    def test_point_light_diffuse_and_shadow(self):
        floor = Plane(position=Vector3(0.0, -2.0, 10.0), material=_matte())
        light = PointLight(position=Vector3(0.0, 10.0, 10.0))
        _setup([floor], [light])
        lit, _ = _trace((0.0, 0.0, 10.0), (0.0, -1.0, 0.0))
        _assert_color(lit, (1.0, 1.0, 1.0))

        occluder = Sphere(position=Vector3(0.0, 5.0, 10.0), radius=1.0, material=_matte())
        _setup([floor, occluder], [light])
        shadowed, _ = _trace((0.0, 0.0, 10.0), (0.0, -1.0, 0.0))
        _assert_color(shadowed, (0.3, 0.3, 0.3))


class TestSpecular:
    """Tests for the two highlight formulas."""

    # View ray hitting the floor at (0, -2, 10) at 45 degrees
    ORIGIN = (0.0, 0.0, 8.0)
    DIRECTION = (0.0, -1.0, 1.0)

    def _black_floor(self):
        material = Material(
            color=(0.0, 0.0, 0.0),
            has_specular=True,
            specular_reflection=1.0,
        )
        return Plane(position=Vector3(0.0, -2.0, 10.0), material=material)

    def _occluder(self):
        return Sphere(position=Vector3(0.0, 5.0, 10.0), radius=1.0, material=_matte())

    def test_directional_specular_is_shadowed(self):
        light = DirectionalLight(color=(0.5, 0.5, 0.5), direction=Vector3(0.0, -1.0, 0.0))
        _setup([self._black_floor()], [light])
        lit, _ = _trace(self.ORIGIN, self.DIRECTION)
        _assert_color(lit, (0.5 * math.sqrt(0.5),) * 3)

        _setup([self._black_floor(), self._occluder()], [light])
        shadowed, _ = _trace(self.ORIGIN, self.DIRECTION)
        _assert_color(shadowed, (0.3 * 0.5 * math.sqrt(0.5),) * 3)

    def test_point_specular_ignores_shadow(self):
        light = PointLight(color=(0.5, 0.5, 0.5), position=Vector3(0.0, 10.0, 10.0))
        _setup([self._black_floor(), self._occluder()], [light])
        color, _ = _trace(self.ORIGIN, self.DIRECTION)
        _assert_color(color, (0.5 * math.sqrt(0.5),) * 3)

    def test_specular_disabled(self):
        floor = self._black_floor()
        floor.material.has_specular = False
        light = PointLight(color=(0.5, 0.5, 0.5), position=Vector3(0.0, 10.0, 10.0))
        _setup([floor], [light])
        color, _ = _trace(self.ORIGIN, self.DIRECTION)
        _assert_color(color, (0.0, 0.0, 0.0))


class TestRecursion:
    """Tests for reflection, refraction and depth handling."""

    def test_miss_returns_miss_color(self):
        _setup([Sphere()], [AmbientLight()])
        color, bounces = _trace((0.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        _assert_color(color, MISS)
        assert bounces == 0

    def test_depth_zero_returns_miss_color(self):
        _setup([Sphere()], [AmbientLight()])
        color, bounces = _trace((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), depth=0)
        _assert_color(color, MISS)
        assert bounces == 0

    @pytest.mark.parametrize("depth", [1, 3, 7])
    def test_parallel_mirrors_bounce_depth_times(self, depth):
        """Rays trapped between two mirrors stop after exactly depth hits."""
        mirror = _matte(ambient=1.0, reflectivity=1.0)
        floor = Plane(position=Vector3(0.0, -1.0, 0.0), material=mirror)
        ceiling = Plane(position=Vector3(0.0, 1.0, 0.0), material=mirror)
        _setup([floor, ceiling], [AmbientLight(color=(1.0, 1.0, 1.0))])

        color, bounces = _trace((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), depth=depth)
        assert bounces == depth
        _assert_color(color, MISS)

    def test_partial_mirror_blend(self):
        material = _matte(ambient=1.0, diffuse=0.0, reflectivity=0.5)
        _setup([Sphere(material=material)], [AmbientLight(color=(0.4, 0.4, 0.4))], miss=(0.2, 0.2, 0.2))
        color, bounces = _trace((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        # Half local, half the reflected ray that flies back out of the scene
        _assert_color(color, (0.3, 0.3, 0.3))
        assert bounces == 1

    def test_clear_glass_shows_backdrop(self):
        glass = _matte(ambient=1.0, transparency=1.0, refractive_index=1.0)
        backdrop = _matte(color=(0.2, 0.7, 0.1), ambient=1.0, diffuse=0.0)
        objects = [
            Sphere(position=Vector3(0.0, 0.0, 10.0), radius=2.0, material=glass),
            Sphere(position=Vector3(0.0, 0.0, 30.0), radius=5.0, material=backdrop),
        ]
        _setup(objects, [AmbientLight(color=(1.0, 1.0, 1.0))])

        # Enter the glass, leave it, then hit the backdrop
        color, bounces = _trace((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), depth=3)
        _assert_color(color, (0.2, 0.7, 0.1))
        assert bounces == 3

        # One bounce short: the transmitted ray runs out of depth
        color, bounces = _trace((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), depth=2)
        _assert_color(color, MISS)
        assert bounces == 2

    def test_half_transparent_blend(self):
        material = _matte(ambient=1.0, diffuse=0.0, transparency=0.5, refractive_index=1.0)
        _setup([Sphere(material=material)], [AmbientLight(color=(0.4, 0.4, 0.4))], miss=(0.2, 0.2, 0.2))
        color, bounces = _trace((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        # 0.5 * 0.4 (entry) + 0.25 * 0.4 (exit) + 0.25 * 0.2 (miss)
        _assert_color(color, (0.35, 0.35, 0.35))
        assert bounces == 2

    def test_negative_weights_are_ignored(self):
        material = _matte(ambient=1.0, reflectivity=-1.0, transparency=-0.5)
        _setup([Sphere(material=material)], [AmbientLight(color=(0.4, 0.4, 0.4))])
        color, bounces = _trace((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        _assert_color(color, (0.4, 0.4, 0.4))
        assert bounces == 1


class TestDepthClamp:
    """Tests for clamp_depth()."""

    def test_in_range_unchanged(self):
        from whitted.core.integrator import clamp_depth

        assert clamp_depth(0) == 0
        assert clamp_depth(5) == 5

    def test_negative_raises(self):
        from whitted.core.integrator import clamp_depth

        with pytest.raises(ValueError):
            clamp_depth(-1)

    def test_excessive_depth_warns(self, caplog):
        from whitted.core.integrator import MAX_TRACE_DEPTH, clamp_depth

        with caplog.at_level(logging.WARNING, logger="whitted.core.integrator"):
            assert clamp_depth(1000) == MAX_TRACE_DEPTH
        assert "exceeds" in caplog.text
