"""JSON scene files.

A scene file is a JSON object with three keys::

    {
      "objects": [{"Sphere": {...}}, {"Plane": {...}}],
      "lights": [{"Ambient": {...}}, {"Directional": {...}}, {"Point": {...}}],
      "camera": {"camera_info": {...}, "speed": 0.1, "depth": 5}
    }

Object and light variants are externally tagged: each list entry is a
one-key object whose key names the variant. Vectors are encoded as
``{"x": .., "y": .., "z": ..}`` and colors as 3-element arrays. Unknown keys
are ignored. The ray cache is never written.

Decoding builds a complete new World before returning, so a malformed file
raises SceneFormatError without touching any existing World.

Example:
    >>> from whitted.scene.serialization import load_world, save_world
    >>> from whitted.scene.world import World
    >>> save_world(World.default(), "scene.json")
    >>> world = load_world("scene.json")
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from whitted.camera.camera import Camera, CameraInfo, CameraType
from whitted.core.vector import Vector3
from whitted.scene.lights import AmbientLight, DirectionalLight, Light, PointLight
from whitted.scene.objects import RGB, Material, Object, Plane, Sphere
from whitted.scene.world import World

logger = logging.getLogger(__name__)


class SceneFormatError(ValueError):
    """A scene document does not match the expected schema."""


class SceneLoadError(RuntimeError):
    """A scene file could not be loaded; the current scene was kept."""


# =============================================================================
# Encoding
# =============================================================================


def _encode_vector(v: Vector3) -> dict[str, float]:
    return {"x": v.x, "y": v.y, "z": v.z}


def _encode_color(c: RGB) -> list[float]:
    return [c[0], c[1], c[2]]


def _encode_material(m: Material) -> dict[str, Any]:
    return {
        "ambient_reflection": m.ambient_reflection,
        "has_specular": m.has_specular,
        "specular_reflection": m.specular_reflection,
        "diffuse_reflection": m.diffuse_reflection,
        "reflectivity": m.reflectivity,
        "transparency": m.transparency,
        "refractive_index": m.refractive_index,
        "color": _encode_color(m.color),
    }


def _encode_object(obj: Object) -> dict[str, Any]:
    if isinstance(obj, Sphere):
        return {
            "Sphere": {
                "position": _encode_vector(obj.position),
                "radius": obj.radius,
                "material": _encode_material(obj.material),
            }
        }
    if isinstance(obj, Plane):
        return {
            "Plane": {
                "position": _encode_vector(obj.position),
                "width": obj.width,
                "height": obj.height,
                "material": _encode_material(obj.material),
            }
        }
    raise TypeError(f"Cannot encode object of type {type(obj).__name__}")


def _encode_light(light: Light) -> dict[str, Any]:
    if isinstance(light, AmbientLight):
        return {"Ambient": {"color": _encode_color(light.color)}}
    if isinstance(light, DirectionalLight):
        return {
            "Directional": {
                "color": _encode_color(light.color),
                "direction": _encode_vector(light.direction),
            }
        }
    if isinstance(light, PointLight):
        return {
            "Point": {
                "color": _encode_color(light.color),
                "position": _encode_vector(light.position),
            }
        }
    raise TypeError(f"Cannot encode light of type {type(light).__name__}")


def _encode_camera(camera: Camera) -> dict[str, Any]:
    info = camera.info
    return {
        "camera_info": {
            "camera_height": info.camera_height,
            "vertical_fov": info.vertical_fov,
            "camera_type": info.camera_type.value,
            "viewport_width": info.viewport_width,
            "viewport_height": info.viewport_height,
            "position": _encode_vector(info.position),
            "miss_color": _encode_color(info.miss_color),
            "forward": _encode_vector(info.forward),
        },
        "speed": info.speed,
        "depth": info.depth,
    }


def world_to_dict(world: World) -> dict[str, Any]:
    """Export a world to a JSON-compatible dictionary."""
    return {
        "objects": [_encode_object(obj) for obj in world.objects],
        "lights": [_encode_light(light) for light in world.lights],
        "camera": _encode_camera(world.camera),
    }


# =============================================================================
# Decoding
# =============================================================================


def _require(data: Any, key: str, where: str) -> Any:
    if not isinstance(data, dict):
        raise SceneFormatError(f"{where}: expected an object, got {type(data).__name__}")
    if key not in data:
        raise SceneFormatError(f"{where}: missing key '{key}'")
    return data[key]


def _float(data: Any, key: str, where: str) -> float:
    value = _require(data, key, where)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SceneFormatError(f"{where}.{key}: expected a number, got {value!r}")
    return float(value)


def _int(data: Any, key: str, where: str) -> int:
    value = _require(data, key, where)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise SceneFormatError(f"{where}.{key}: expected a non-negative integer, got {value!r}")
    return value


def _bool(data: Any, key: str, where: str) -> bool:
    value = _require(data, key, where)
    if not isinstance(value, bool):
        raise SceneFormatError(f"{where}.{key}: expected true or false, got {value!r}")
    return value


def _vector(data: Any, key: str, where: str) -> Vector3:
    value = _require(data, key, where)
    path = f"{where}.{key}"
    return Vector3(_float(value, "x", path), _float(value, "y", path), _float(value, "z", path))


def _color(data: Any, key: str, where: str) -> RGB:
    value = _require(data, key, where)
    if not isinstance(value, list) or len(value) != 3:
        raise SceneFormatError(f"{where}.{key}: expected a list of 3 numbers, got {value!r}")
    for component in value:
        if isinstance(component, bool) or not isinstance(component, (int, float)):
            raise SceneFormatError(f"{where}.{key}: expected numbers, got {component!r}")
    return (float(value[0]), float(value[1]), float(value[2]))


def _decode_material(data: Any, where: str) -> Material:
    return Material(
        ambient_reflection=_float(data, "ambient_reflection", where),
        has_specular=_bool(data, "has_specular", where),
        specular_reflection=_float(data, "specular_reflection", where),
        diffuse_reflection=_float(data, "diffuse_reflection", where),
        reflectivity=_float(data, "reflectivity", where),
        transparency=_float(data, "transparency", where),
        refractive_index=_float(data, "refractive_index", where),
        color=_color(data, "color", where),
    )


def _variant(entry: Any, where: str) -> tuple[str, Any]:
    if not isinstance(entry, dict) or len(entry) != 1:
        raise SceneFormatError(f"{where}: expected a single-key tagged object, got {entry!r}")
    ((tag, body),) = entry.items()
    return tag, body


def _decode_object(entry: Any, where: str) -> Object:
    tag, body = _variant(entry, where)
    where = f"{where}.{tag}"
    if tag == "Sphere":
        return Sphere(
            position=_vector(body, "position", where),
            radius=_float(body, "radius", where),
            material=_decode_material(_require(body, "material", where), f"{where}.material"),
        )
    if tag == "Plane":
        return Plane(
            position=_vector(body, "position", where),
            width=_float(body, "width", where),
            height=_float(body, "height", where),
            material=_decode_material(_require(body, "material", where), f"{where}.material"),
        )
    raise SceneFormatError(f"{where}: unknown object type '{tag}'")


def _decode_light(entry: Any, where: str) -> Light:
    tag, body = _variant(entry, where)
    where = f"{where}.{tag}"
    if tag == "Ambient":
        return AmbientLight(color=_color(body, "color", where))
    if tag == "Directional":
        return DirectionalLight(
            color=_color(body, "color", where),
            direction=_vector(body, "direction", where),
        )
    if tag == "Point":
        return PointLight(
            color=_color(body, "color", where),
            position=_vector(body, "position", where),
        )
    raise SceneFormatError(f"{where}: unknown light type '{tag}'")


def _decode_camera(data: Any) -> Camera:
    where = "camera"
    info_data = _require(data, "camera_info", where)
    info_where = f"{where}.camera_info"

    type_name = _require(info_data, "camera_type", info_where)
    try:
        camera_type = CameraType(type_name)
    except ValueError:
        raise SceneFormatError(f"{info_where}.camera_type: unknown camera type {type_name!r}") from None

    info = CameraInfo(
        camera_type=camera_type,
        vertical_fov=_float(info_data, "vertical_fov", info_where),
        camera_height=_float(info_data, "camera_height", info_where),
        viewport_width=_int(info_data, "viewport_width", info_where),
        viewport_height=_int(info_data, "viewport_height", info_where),
        position=_vector(info_data, "position", info_where),
        forward=_vector(info_data, "forward", info_where),
        miss_color=_color(info_data, "miss_color", info_where),
        depth=_int(data, "depth", where),
        speed=_float(data, "speed", where),
    )
    return Camera(info)


def world_from_dict(data: Any) -> World:
    """Build a new world from a dictionary produced by world_to_dict().

    Raises:
        SceneFormatError: If the data does not match the scene schema.
    """
    objects = _require(data, "objects", "scene")
    lights = _require(data, "lights", "scene")
    if not isinstance(objects, list):
        raise SceneFormatError("scene.objects: expected a list")
    if not isinstance(lights, list):
        raise SceneFormatError("scene.lights: expected a list")

    return World(
        objects=[_decode_object(entry, f"objects[{i}]") for i, entry in enumerate(objects)],
        lights=[_decode_light(entry, f"lights[{i}]") for i, entry in enumerate(lights)],
        camera=_decode_camera(_require(data, "camera", "scene")),
    )


# =============================================================================
# Files
# =============================================================================


def save_world(world: World, path: str | Path) -> None:
    """Write a world to a JSON file."""
    path = Path(path)
    with path.open("w", encoding="utf-8") as f:
        json.dump(world_to_dict(world), f, indent=2)
    logger.info("Saved scene to %s", path)


def load_world(path: str | Path) -> World:
    """Read a world from a JSON file.

    Raises:
        OSError: If the file cannot be read.
        SceneFormatError: If the file is not valid JSON or not a valid scene.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SceneFormatError(f"{path}: invalid JSON: {e}") from e
    return world_from_dict(data)
