import numpy as np
from numba import njit
from ..core.math import vec3, length, dot

@njit(fastmath=True)
def sdSphere(p, r):
    return length(p) - r

@njit(fastmath=True)
def sdPlane(p, n, h):
    # n is expected to be unit length
    return dot(p, n) + h

@njit(fastmath=True)
def sdRoundBox(p, b, r):
    qx = abs(p[0]) - b[0]
    qy = abs(p[1]) - b[1]
    qz = abs(p[2]) - b[2]
    outside = length(vec3(max(qx, 0.0), max(qy, 0.0), max(qz, 0.0)))
    inside = min(max(qx, max(qy, qz)), 0.0)
    return outside + inside - r

@njit(fastmath=True)
def sdMandelbulb(p, power, bailout):
    # Escape-time distance estimator, 5 iterations
    z = vec3(p[0], p[1], p[2])
    dr = 1.0
    r = 0.0
    for i in range(5):
        r = length(z)
        if r > bailout or r == 0.0:
            break
        theta = np.arccos(min(max(z[2] / r, -1.0), 1.0))
        phi = np.arctan2(z[1], z[0])
        dr = r ** (power - 1.0) * power * dr + 1.0

        zr = r ** power
        theta = theta * power
        phi = phi * power
        z = vec3(zr * np.sin(theta) * np.cos(phi),
                 zr * np.sin(phi) * np.sin(theta),
                 zr * np.cos(theta))
        z = z + p

    if r == 0.0:
        return 0.0
    return 0.5 * np.log(r) * r / dr
