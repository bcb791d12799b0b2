"""Unit tests for scene-level intersection."""

from types import SimpleNamespace

import pytest
import taichi as ti

from whitted.core.vector import Vector3


def _closest(origin, direction):
    from whitted.scene.intersection import EPSILON, T_MAX, find_closest, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f64, shape=())
    material_id = ti.field(dtype=ti.i32, shape=())
    n1 = ti.field(dtype=ti.f64, shape=())
    n2 = ti.field(dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3):
        rec = find_closest(o, d, EPSILON, T_MAX)
        hit[None] = rec.hit
        t_val[None] = rec.t
        material_id[None] = rec.material_id
        n1[None] = rec.n1
        n2[None] = rec.n2

    test_kernel(vec3(*origin), vec3(*direction))
    return SimpleNamespace(
        hit=hit[None], t=t_val[None], material_id=material_id[None], n1=n1[None], n2=n2[None]
    )


class TestSceneStorage:
    """Tests for uploading objects."""

    def test_upload_preserves_order_and_materials(self):
        from whitted.materials.phong import get_material_count
        from whitted.scene.intersection import get_object_count, upload_objects
        from whitted.scene.objects import Plane, Sphere

        count = upload_objects([Sphere(), Plane(), Sphere(radius=0.5)])
        assert count == 3
        assert get_object_count() == 3
        assert get_material_count() == 3

    def test_upload_replaces_previous_scene(self):
        from whitted.scene.intersection import get_object_count, upload_objects
        from whitted.scene.objects import Sphere

        upload_objects([Sphere(), Sphere()])
        upload_objects([Sphere()])
        assert get_object_count() == 1

    def test_upload_rejects_unknown_objects(self):
        from whitted.scene.intersection import upload_objects

        with pytest.raises(TypeError):
            upload_objects(["not an object"])

    def test_capacity(self):
        from whitted.scene.intersection import MAX_OBJECTS, upload_objects
        from whitted.scene.objects import Sphere

        with pytest.raises(RuntimeError):
            upload_objects([Sphere() for _ in range(MAX_OBJECTS + 1)])


class TestFindClosest:
    """Tests for find_closest()."""

    def test_empty_scene_misses(self):
        rec = _closest((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert rec.hit == 0
        assert rec.material_id == -1

    def test_nearest_object_wins(self):
        from whitted.scene.intersection import upload_objects
        from whitted.scene.objects import Sphere

        upload_objects(
            [
                Sphere(position=Vector3(0.0, 0.0, 20.0), radius=1.0),
                Sphere(position=Vector3(0.0, 0.0, 10.0), radius=1.0),
            ]
        )
        rec = _closest((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert rec.hit == 1
        assert abs(rec.t - 9.0) < 1e-9
        assert rec.material_id == 1

    def test_exact_tie_keeps_first_object(self):
        from whitted.scene.intersection import upload_objects
        from whitted.scene.objects import Sphere

        upload_objects([Sphere(), Sphere()])
        rec = _closest((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert rec.hit == 1
        assert rec.material_id == 0

    def test_sphere_refractive_indices(self):
        from whitted.scene.intersection import upload_objects
        from whitted.scene.objects import Material, Sphere

        upload_objects([Sphere(material=Material(refractive_index=1.5))])

        entering = _closest((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert abs(entering.n1 - 1.0) < 1e-12
        assert abs(entering.n2 - 1.5) < 1e-12

        leaving = _closest((0.0, 0.0, 10.0), (0.0, 0.0, 1.0))
        assert abs(leaving.n1 - 1.5) < 1e-12
        assert abs(leaving.n2 - 1.0) < 1e-12

    def test_plane_has_unit_indices(self):
        from whitted.scene.intersection import upload_objects
        from whitted.scene.objects import Material, Plane

        upload_objects([Plane(material=Material(refractive_index=1.5))])
        rec = _closest((0.0, 0.0, 10.0), (0.0, -1.0, 0.0))
        assert rec.hit == 1
        assert rec.n1 == 1.0
        assert rec.n2 == 1.0


class TestIntersectAny:
    """Tests for the shadow query."""

    def test_intersect_any(self):
        from whitted.scene.intersection import EPSILON, T_MAX, intersect_any, upload_objects, vec3
        from whitted.scene.objects import Sphere

        upload_objects([Sphere()])
        result = ti.field(dtype=ti.i32, shape=2)

        @ti.kernel
        def test_kernel():
            result[0] = intersect_any(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, 1.0), EPSILON, T_MAX)
            result[1] = intersect_any(vec3(0.0, 0.0, 0.0), vec3(0.0, 1.0, 0.0), EPSILON, T_MAX)

        test_kernel()
        assert result[0] == 1
        assert result[1] == 0
