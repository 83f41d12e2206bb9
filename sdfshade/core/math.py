import numpy as np
from numba import njit

@njit
def vec3(x, y, z):
    return np.array([x, y, z], dtype=np.float64)

@njit
def dot(a, b):
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2]

@njit
def cross(a, b):
    return vec3(a[1]*b[2] - a[2]*b[1],
                a[2]*b[0] - a[0]*b[2],
                a[0]*b[1] - a[1]*b[0])

@njit
def length(v):
    return np.sqrt(dot(v, v))

@njit
def normalize(v):
    l = length(v)
    if l == 0.0:
        return vec3(0.0, 0.0, 0.0)
    return vec3(v[0] / l, v[1] / l, v[2] / l)

@njit
def mix(a, b, t):
    # GLSL mix: a at t=0, b at t=1
    return a * (1.0 - t) + b * t

@njit
def clamp(x, lo, hi):
    return min(max(x, lo), hi)

