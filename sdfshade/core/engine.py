import logging
import time

import numpy as np
from numba import njit, prange
from .math import vec3
from .camera import primary_ray, DEFAULT_FOV
from .scene import map_scene, map_distance, calc_normal
from .shading import shade_surface

logger = logging.getLogger(__name__)

# CONSTANTS
MAX_STEPS = 300
MAX_DIST = 100.0
SURF_DIST = 0.01
MIN_STEP = 1e-3
AA_SAMPLES = 4
AA_OFFSET = 0.25
GAMMA = 2.2

@njit
def march(ro, rd, kinds, positions, params, k):
    """Sphere-trace one ray. Returns ``(hit, t, steps)``.

    Steps by ``|d|`` so a ray starting inside a primitive (negative distance)
    still moves forward, and the range check runs after the step so nothing
    past ``MAX_DIST`` is ever reported as a hit.
    """
    t = 0.0
    for i in range(MAX_STEPS):
        p = ro + rd * t
        d = map_distance(p, kinds, positions, params, k)

        if abs(d) < SURF_DIST:
            return True, t, i + 1

        t += max(abs(d), MIN_STEP)
        if t > MAX_DIST:
            return False, t, i + 1

    return False, t, MAX_STEPS

@njit
def raymarch_kernel(ro, rd, kinds, positions, params, materials, k,
                    light_dirs, light_colors, ambient, background):
    hit, t, steps = march(ro, rd, kinds, positions, params, k)

    if hit:
        p = ro + rd * t
        surface = map_scene(p, kinds, positions, params, materials, k)
        n = calc_normal(p, kinds, positions, params, k)
        return shade_surface(surface, rd, n, light_dirs, light_colors, ambient)

    return vec3(background[0], background[1], background[2])

@njit
def render_pixel_kernel(x, y, width, height, cam_pos, cam_rot, fov,
                        kinds, positions, params, materials, k,
                        light_dirs, light_colors, ambient, background):
    acc = vec3(0.0, 0.0, 0.0)

    # 2x2 grid of sub-pixel samples around the pixel centre
    for s in range(AA_SAMPLES):
        ox = -AA_OFFSET if s % 2 == 0 else AA_OFFSET
        oy = -AA_OFFSET if s < 2 else AA_OFFSET
        px = x + 0.5 + ox
        py = y + 0.5 + oy

        rd = primary_ray(px, py, width, height, fov, cam_rot[0], cam_rot[1], cam_rot[2])
        acc = acc + raymarch_kernel(cam_pos, rd, kinds, positions, params, materials, k,
                                    light_dirs, light_colors, ambient, background)

    col = acc / float(AA_SAMPLES)

    # Gamma Correction
    inv_gamma = 1.0 / GAMMA
    return vec3(max(col[0], 0.0) ** inv_gamma,
                max(col[1], 0.0) ** inv_gamma,
                max(col[2], 0.0) ** inv_gamma)

@njit(parallel=True)
def render_pixels(width, height, cam_pos, cam_rot, fov,
                  kinds, positions, params, materials, k,
                  light_dirs, light_colors, ambient, background, output_buffer):
    for y in prange(height):
        for x in range(width):
            col = render_pixel_kernel(x, y, width, height, cam_pos, cam_rot, fov,
                                      kinds, positions, params, materials, k,
                                      light_dirs, light_colors, ambient, background)
            output_buffer[y, x, 0] = col[0]
            output_buffer[y, x, 1] = col[1]
            output_buffer[y, x, 2] = col[2]

def _unpack_camera(camera):
    pos = np.asarray(camera.get('Pos', [0.0, 0.0, 0.0]), dtype=np.float64).reshape(3)
    rot = np.asarray(camera.get('Rot', [0.0, 0.0, 0.0]), dtype=np.float64).reshape(3)
    fov = float(camera.get('FOV', DEFAULT_FOV))
    return pos, rot, fov

def _scene_args(scene):
    return (scene['kinds'], scene['positions'], scene['params'], scene['materials'],
            float(scene['blend_k']), scene['light_dirs'], scene['light_colors'],
            scene['ambient'], scene['background'])

def _check_resolution(width, height):
    if int(width) <= 0 or int(height) <= 0:
        raise ValueError(f"Resolution must be positive, got {width}x{height}")
    return int(width), int(height)

def render_frame(scene, camera, width, height):
    """Render one frame.

    ``scene`` is the packed mapping produced by ``build_scene``/``parse_scene``
    and ``camera`` a ``{'Pos', 'Rot', 'FOV'}`` mapping. Returns a
    ``(height, width, 3)`` float32 array of gamma-corrected linear colors
    whose row 0 is the bottom row of the image.
    """
    width, height = _check_resolution(width, height)
    cam_pos, cam_rot, fov = _unpack_camera(camera)

    output_buffer = np.zeros((height, width, 3), dtype=np.float32)

    start_time = time.time()
    render_pixels(width, height, cam_pos, cam_rot, fov, *_scene_args(scene), output_buffer)
    logger.debug("Rendered %dx%d in %.2fs", width, height, time.time() - start_time)

    return output_buffer

def render_pixel(scene, camera, width, height, x, y):
    """Final color of a single pixel at ``(x, y)``, y counted up from the bottom row."""
    width, height = _check_resolution(width, height)
    if not (0 <= x < width and 0 <= y < height):
        raise ValueError(f"Pixel ({x}, {y}) outside {width}x{height}")
    cam_pos, cam_rot, fov = _unpack_camera(camera)

    return render_pixel_kernel(int(x), int(y), width, height, cam_pos, cam_rot, fov, *_scene_args(scene))

def trace_ray(scene, origin, direction):
    """March a single ray and shade it, without multi-sampling or gamma."""
    ro = np.asarray(origin, dtype=np.float64).reshape(3)
    rd = np.asarray(direction, dtype=np.float64).reshape(3)
    norm = np.linalg.norm(rd)
    if norm == 0.0:
        raise ValueError("Ray direction must be non-zero")
    rd = rd / norm
    return raymarch_kernel(ro, rd, *_scene_args(scene))
