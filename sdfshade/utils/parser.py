import logging
import os

import numpy as np
import yaml

from ..core.camera import DEFAULT_FOV, MAX_PITCH
from ..core.lights import LIGHT_DIRS, LIGHT_COLORS, AMBIENT_COLOR, BACKGROUND_COLOR, make_light_rig
from ..core.scene import (SHAPE_SPHERE, SHAPE_PLANE, SHAPE_ROUNDBOX, SHAPE_MANDELBULB, MATERIAL_SIZE,
                          MAT_COLOR, MAT_METALLIC, MAT_ROUGHNESS, MAT_EMISSIVE, MAT_ANISOTROPY,
                          MAT_SUBSURFACE, MAT_SUBSURFACE_COLOR, MAT_SHEEN, MAT_SHEEN_COLOR)
from ..core.shading import MIN_ROUGHNESS

logger = logging.getLogger(__name__)

DEFAULT_BLEND = 1.0

SHAPE_NAMES = {
    'sphere': SHAPE_SPHERE,
    'plane': SHAPE_PLANE,
    'roundbox': SHAPE_ROUNDBOX,
    'mandelbulb': SHAPE_MANDELBULB,
}

class SceneError(ValueError):
    """Raised for a structurally malformed scene description."""

def _number(value, name):
    try:
        return float(value)
    except (TypeError, ValueError):
        raise SceneError(f"{name} must be a number, got {value!r}")

def _vec3(value, name):
    try:
        v = [float(c) for c in value]
    except (TypeError, ValueError):
        raise SceneError(f"{name} must be a list of 3 numbers, got {value!r}")
    if len(v) != 3:
        raise SceneError(f"{name} must have 3 components, got {len(v)}")
    return v

def _color(value, name, upper=1.0):
    # Accept [r, g, b] floats or an 8-bit {r, g, b} mapping
    if isinstance(value, dict):
        missing = [c for c in ('r', 'g', 'b') if c not in value]
        if missing:
            raise SceneError(f"{name} mapping is missing channel {missing[0]!r}")
        v = [_number(value[c], f"{name}.{c}") / 255.0 for c in ('r', 'g', 'b')]
    else:
        v = _vec3(value, name)

    lo_hi = [min(max(c, 0.0), upper) if upper is not None else max(c, 0.0) for c in v]
    if lo_hi != v:
        logger.warning("%s %s clamped to %s", name, v, lo_hi)
    return lo_hi

def _scalar(prim, key, default, lo, hi, name):
    value = _number(prim.get(key, default), f"{name}.{key}")
    clamped = min(max(value, lo), hi)
    if clamped != value:
        logger.warning("%s.%s = %s clamped to %s", name, key, value, clamped)
    return clamped

def _shape_kind(typ, name):
    if isinstance(typ, str):
        key = typ.strip().lower()
        if key not in SHAPE_NAMES:
            raise SceneError(f"{name}: unknown primitive type {typ!r}")
        return SHAPE_NAMES[key]
    if isinstance(typ, int) and typ in SHAPE_NAMES.values():
        return typ
    raise SceneError(f"{name}: unknown primitive type {typ!r}")

def _shape_params(kind, prim, name):
    if kind == SHAPE_SPHERE:
        radius = _number(prim.get('Radius', 1.0), f"{name}.Radius")
        if radius <= 0.0:
            raise SceneError(f"{name}.Radius must be positive, got {radius}")
        return [radius, 0.0, 0.0, 0.0]

    if kind == SHAPE_PLANE:
        n = np.array(_vec3(prim.get('Normal', [0.0, 1.0, 0.0]), f"{name}.Normal"))
        norm = np.linalg.norm(n)
        if norm == 0.0:
            raise SceneError(f"{name}.Normal must be non-zero")
        n = n / norm
        return [n[0], n[1], n[2], _number(prim.get('Offset', 0.0), f"{name}.Offset")]

    if kind == SHAPE_ROUNDBOX:
        b = _vec3(prim.get('Size', [0.5, 0.5, 0.5]), f"{name}.Size")
        if min(b) < 0.0:
            raise SceneError(f"{name}.Size must be non-negative, got {b}")
        return b + [_number(prim.get('Rounding', 0.0), f"{name}.Rounding")]

    # Mandelbulb
    return [_number(prim.get('Power', 8.0), f"{name}.Power"), _number(prim.get('Bailout', 8.0), f"{name}.Bailout"), 0.0, 0.0]

def _material(prim, name):
    m = [0.0] * MATERIAL_SIZE
    m[MAT_COLOR:MAT_COLOR + 3] = _color(prim.get('Color', [0.8, 0.8, 0.8]), f"{name}.Color")
    m[MAT_METALLIC] = _scalar(prim, 'Metalness', 0.0, 0.0, 1.0, name)
    m[MAT_ROUGHNESS] = _scalar(prim, 'Roughness', 0.5, MIN_ROUGHNESS, 1.0, name)
    m[MAT_EMISSIVE:MAT_EMISSIVE + 3] = _color(prim.get('Emissive', [0.0, 0.0, 0.0]), f"{name}.Emissive", upper=None)
    m[MAT_ANISOTROPY] = _scalar(prim, 'Anisotropy', 0.0, -1.0, 1.0, name)
    m[MAT_SUBSURFACE] = _scalar(prim, 'Subsurface', 0.0, 0.0, 1.0, name)
    m[MAT_SUBSURFACE_COLOR:MAT_SUBSURFACE_COLOR + 3] = _color(prim.get('SubsurfaceColor', [0.0, 0.0, 0.0]), f"{name}.SubsurfaceColor")
    m[MAT_SHEEN] = _scalar(prim, 'Sheen', 0.0, 0.0, 100.0, name)
    m[MAT_SHEEN_COLOR:MAT_SHEEN_COLOR + 3] = _color(prim.get('SheenColor', [1.0, 1.0, 1.0]), f"{name}.SheenColor")
    return m

def _frozen(values, dtype, shape):
    arr = np.array(values, dtype=dtype).reshape(shape)
    arr.setflags(write=False)
    return arr

def build_camera(data):
    """Normalize a ``Camera`` mapping into ``{'Pos', 'Rot', 'FOV'}``.

    Pitch is clamped just inside (-pi/2, pi/2).
    """
    data = data or {}
    if not isinstance(data, dict):
        raise SceneError("Camera must be a mapping")
    pos = _vec3(data.get('Pos', [0.0, 0.0, -10.0]), 'Camera.Pos')
    rot = _vec3(data.get('Rot', [0.0, 0.0, 0.0]), 'Camera.Rot')
    pitch = min(max(rot[0], -MAX_PITCH), MAX_PITCH)
    if pitch != rot[0]:
        logger.warning("Camera pitch %s clamped to %s", rot[0], pitch)
        rot[0] = pitch

    fov = _number(data.get('FOV', DEFAULT_FOV), 'Camera.FOV')
    if not 0.0 < fov < 180.0:
        raise SceneError(f"Camera.FOV must be in (0, 180) degrees, got {fov}")
    return {'Pos': pos, 'Rot': rot, 'FOV': fov}

def build_lights(entries):
    if entries is None:
        return LIGHT_DIRS, LIGHT_COLORS
    if not isinstance(entries, list):
        raise SceneError("Lights must be a list")

    dirs = []
    colors = []
    for i, light in enumerate(entries):
        name = f"Lights[{i}]"
        if not isinstance(light, dict):
            raise SceneError(f"{name} must be a mapping")
        dirs.append(_vec3(light.get('Dir', [0.0, 1.0, 0.0]), f"{name}.Dir"))
        intensity = _number(light.get('Intensity', 1.0), f"{name}.Intensity")
        colors.append([c * intensity for c in _color(light.get('Color', [1.0, 1.0, 1.0]), f"{name}.Color")])

    try:
        return make_light_rig(dirs, colors)
    except ValueError as e:
        raise SceneError(str(e))

def build_scene(data):
    """Pack a scene mapping (already loaded from YAML) into kernel arrays."""
    if not isinstance(data, dict):
        raise SceneError("Scene must be a mapping")

    prims = data.get('Primitives')
    if not isinstance(prims, list):
        raise SceneError("Scene needs a 'Primitives' list")

    kinds = []
    positions = []
    params = []
    materials = []

    for i, prim in enumerate(prims):
        name = f"Primitives[{i}]"
        if not isinstance(prim, dict):
            raise SceneError(f"{name} must be a mapping")

        kind = _shape_kind(prim.get('Type', 'sphere'), name)
        kinds.append(kind)
        positions.append(_vec3(prim.get('Pos', [0.0, 0.0, 0.0]), f"{name}.Pos"))
        params.append(_shape_params(kind, prim, name))
        materials.append(_material(prim, name))

    blend_k = _number(data.get('Blend', DEFAULT_BLEND), 'Blend')
    if blend_k < 0.0:
        logger.warning("Blend %s clamped to 0 (hard union)", blend_k)
        blend_k = 0.0

    light_dirs, light_colors = build_lights(data.get('Lights'))

    n = len(kinds)
    return {
        'num_primitives': n,
        'kinds': _frozen(kinds, np.int64, (n,)),
        'positions': _frozen(positions, np.float64, (n, 3)),
        'params': _frozen(params, np.float64, (n, 4)),
        'materials': _frozen(materials, np.float64, (n, MATERIAL_SIZE)),
        'blend_k': blend_k,
        'light_dirs': light_dirs,
        'light_colors': light_colors,
        'ambient': _frozen(_color(data.get('Ambient', list(AMBIENT_COLOR)), 'Ambient', upper=None), np.float64, (3,)),
        'background': _frozen(_color(data.get('Background', list(BACKGROUND_COLOR)), 'Background', upper=None), np.float64, (3,)),
        'camera': build_camera(data.get('Camera')),
    }

def parse_scene(yaml_path):
    if not os.path.exists(yaml_path):
        raise FileNotFoundError(f"Scene file not found: {yaml_path}")

    with open(yaml_path, 'r') as f:
        data = yaml.safe_load(f)

    scene = build_scene(data)
    logger.info("Loaded %s: %d primitives, %d lights", yaml_path, scene['num_primitives'], scene['light_dirs'].shape[0])
    return scene
