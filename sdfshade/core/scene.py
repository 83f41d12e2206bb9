"""Scene field: per-primitive distance + material samples folded into a
single surface with the smooth blend operator.

A surface sample is a flat float64 array of ``SURFACE_SIZE`` slots. Slot 0 is
the signed distance, the remaining slots mirror a primitive's material row
shifted by one.
"""
import numpy as np
from numba import njit
from .math import vec3, normalize, mix, clamp
from ..shapes.sdf import sdSphere, sdPlane, sdRoundBox, sdMandelbulb

# SHAPE TYPES
SHAPE_SPHERE = 0
SHAPE_PLANE = 1
SHAPE_ROUNDBOX = 2
SHAPE_MANDELBULB = 3

# MATERIAL LAYOUT (per primitive row)
MAT_COLOR = 0             # 3 slots
MAT_METALLIC = 3
MAT_ROUGHNESS = 4
MAT_EMISSIVE = 5          # 3 slots
MAT_ANISOTROPY = 8
MAT_SUBSURFACE = 9
MAT_SUBSURFACE_COLOR = 10 # 3 slots
MAT_SHEEN = 13
MAT_SHEEN_COLOR = 14      # 3 slots
MATERIAL_SIZE = 17

# SURFACE LAYOUT
SURF_DISTANCE = 0
SURF_COLOR = 1 + MAT_COLOR
SURF_METALLIC = 1 + MAT_METALLIC
SURF_ROUGHNESS = 1 + MAT_ROUGHNESS
SURF_EMISSIVE = 1 + MAT_EMISSIVE
SURF_ANISOTROPY = 1 + MAT_ANISOTROPY
SURF_SUBSURFACE = 1 + MAT_SUBSURFACE
SURF_SUBSURFACE_COLOR = 1 + MAT_SUBSURFACE_COLOR
SURF_SHEEN = 1 + MAT_SHEEN
SURF_SHEEN_COLOR = 1 + MAT_SHEEN_COLOR
SURFACE_SIZE = 1 + MATERIAL_SIZE

NORMAL_EPS = 0.01
EMPTY_SCENE_DIST = 1e10

@njit
def primitive_distance(p, kind, position, prm):
    local_p = vec3(p[0] - position[0], p[1] - position[1], p[2] - position[2])

    if kind == SHAPE_SPHERE:
        return sdSphere(local_p, prm[0])
    elif kind == SHAPE_PLANE:
        return sdPlane(local_p, vec3(prm[0], prm[1], prm[2]), prm[3])
    elif kind == SHAPE_ROUNDBOX:
        return sdRoundBox(local_p, vec3(prm[0], prm[1], prm[2]), prm[3])
    elif kind == SHAPE_MANDELBULB:
        return sdMandelbulb(local_p, prm[0], prm[1])
    return EMPTY_SCENE_DIST

@njit
def primitive_surface(p, i, kinds, positions, params, materials):
    out = np.empty(SURFACE_SIZE, dtype=np.float64)
    out[SURF_DISTANCE] = primitive_distance(p, kinds[i], positions[i], params[i])
    for j in range(MATERIAL_SIZE):
        out[1 + j] = materials[i, j]
    return out

@njit
def smin_distance(a, b, k):
    if k <= 0.0:
        return min(a, b)
    h = clamp(0.5 + 0.5 * (b - a) / k, 0.0, 1.0)
    return mix(b, a, h) - k * h * (1.0 - h)

@njit
def smin_surface(a, b, k):
    """Smoothly union two surface samples.

    Distance and every material slot share the same weight ``h``, so the
    nearer sample dominates both shape and appearance. ``k <= 0`` is a hard
    minimum that keeps ``a`` on ties.
    """
    if k <= 0.0:
        if a[SURF_DISTANCE] <= b[SURF_DISTANCE]:
            return a.copy()
        return b.copy()

    h = clamp(0.5 + 0.5 * (b[SURF_DISTANCE] - a[SURF_DISTANCE]) / k, 0.0, 1.0)
    out = np.empty(SURFACE_SIZE, dtype=np.float64)
    out[SURF_DISTANCE] = mix(b[SURF_DISTANCE], a[SURF_DISTANCE], h) - k * h * (1.0 - h)
    for j in range(1, SURFACE_SIZE):
        out[j] = mix(b[j], a[j], h)
    return out

@njit
def map_scene(p, kinds, positions, params, materials, k):
    n = kinds.shape[0]
    if n == 0:
        out = np.zeros(SURFACE_SIZE, dtype=np.float64)
        out[SURF_DISTANCE] = EMPTY_SCENE_DIST
        return out

    surface = primitive_surface(p, 0, kinds, positions, params, materials)
    for i in range(1, n):
        surface = smin_surface(surface, primitive_surface(p, i, kinds, positions, params, materials), k)
    return surface

@njit
def map_distance(p, kinds, positions, params, k):
    # Same fold as map_scene without carrying materials
    n = kinds.shape[0]
    if n == 0:
        return EMPTY_SCENE_DIST

    d = primitive_distance(p, kinds[0], positions[0], params[0])
    for i in range(1, n):
        d = smin_distance(d, primitive_distance(p, kinds[i], positions[i], params[i]), k)
    return d

@njit
def calc_normal(p, kinds, positions, params, k):
    e = NORMAL_EPS
    dx = map_distance(vec3(p[0] + e, p[1], p[2]), kinds, positions, params, k) - \
         map_distance(vec3(p[0] - e, p[1], p[2]), kinds, positions, params, k)
    dy = map_distance(vec3(p[0], p[1] + e, p[2]), kinds, positions, params, k) - \
         map_distance(vec3(p[0], p[1] - e, p[2]), kinds, positions, params, k)
    dz = map_distance(vec3(p[0], p[1], p[2] + e), kinds, positions, params, k) - \
         map_distance(vec3(p[0], p[1], p[2] - e), kinds, positions, params, k)
    return normalize(vec3(dx, dy, dz))
