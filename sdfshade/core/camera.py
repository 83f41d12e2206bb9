import numpy as np
from numba import njit
from .math import vec3, normalize

DEFAULT_FOV = 40.0
MAX_PITCH = np.pi / 2 - 0.001

# Orientation convention: with every angle at zero the camera looks down +Z.
# Positive pitch tilts the view toward +Y, positive yaw swings it toward -X,
# which is what CameraController's forward vector assumes.

@njit
def rotate_x(v, a):
    c = np.cos(a)
    s = np.sin(a)
    return vec3(v[0], c * v[1] + s * v[2], -s * v[1] + c * v[2])

@njit
def rotate_y(v, a):
    c = np.cos(a)
    s = np.sin(a)
    return vec3(c * v[0] - s * v[2], v[1], s * v[0] + c * v[2])

@njit
def rotate_z(v, a):
    c = np.cos(a)
    s = np.sin(a)
    return vec3(c * v[0] + s * v[1], -s * v[0] + c * v[1], v[2])

@njit
def orient(d, pitch, yaw, roll):
    # Ry(yaw) * Rx(pitch) * Rz(roll) * d: roll innermost, yaw outermost
    return rotate_y(rotate_x(rotate_z(d, roll), pitch), yaw)

@njit
def primary_ray(px, py, width, height, fov, pitch, yaw, roll):
    """Direction through fragment coordinate ``(px, py)``, y up from the bottom row."""
    aspect = width / height
    scale = np.tan(fov * np.pi / 180.0 * 0.5)

    u = (px / width) * 2.0 - 1.0
    v = (py / height) * 2.0 - 1.0
    u *= aspect
    u *= scale
    v *= scale

    d = normalize(vec3(u, v, 1.0))
    return orient(d, pitch, yaw, roll)
