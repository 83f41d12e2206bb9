from numba import njit
from .math import vec3, normalize, dot, cross, length, mix, clamp
from .scene import (SURF_COLOR, SURF_METALLIC, SURF_ROUGHNESS, SURF_EMISSIVE, SURF_ANISOTROPY,
                    SURF_SUBSURFACE, SURF_SUBSURFACE_COLOR, SURF_SHEEN, SURF_SHEEN_COLOR)

PI = 3.14159265359
MIN_ROUGHNESS = 1e-3
MIN_ANISO_SCALE = 1e-3
SPEC_DENOM_BIAS = 1e-3
SSS_STRENGTH = 0.5

@njit
def read_vec3(arr, offset):
    return vec3(arr[offset], arr[offset + 1], arr[offset + 2])

@njit
def fresnel_schlick(cos_theta, f0):
    f = (1.0 - clamp(cos_theta, 0.0, 1.0)) ** 5.0
    return f0 + (1.0 - f0) * f

@njit
def geometry_schlick_ggx(ndotv, roughness):
    r = roughness + 1.0
    k = (r * r) / 8.0
    return ndotv / (ndotv * (1.0 - k) + k)

@njit
def geometry_smith(n, v, l, roughness):
    # Isotropic Schlick-GGX on both directions, even for anisotropic lobes
    ndotv = max(dot(n, v), 0.0)
    ndotl = max(dot(n, l), 0.0)
    return geometry_schlick_ggx(ndotv, roughness) * geometry_schlick_ggx(ndotl, roughness)

@njit
def distribution_aniso_ggx(n, h, roughness, anisotropy, t, b):
    alpha = roughness * roughness
    scale = max(1.0 + anisotropy, MIN_ANISO_SCALE)
    ax = alpha / scale
    ay = alpha * scale

    hx = dot(h, t)
    hy = dot(h, b)
    hz = dot(h, n)

    denom = hx * hx / (ax * ax) + hy * hy / (ay * ay) + hz * hz
    return 1.0 / (PI * ax * ay * denom * denom)

@njit
def tangent_space(n):
    if abs(n[1]) < 0.999:
        up = vec3(0.0, 1.0, 0.0)
    else:
        up = vec3(1.0, 0.0, 0.0)
    t = normalize(cross(up, n))
    b = cross(n, t)
    return t, b

@njit
def half_vector(v, l, n):
    h = v + l
    if length(h) < 1e-12:
        return vec3(n[0], n[1], n[2])
    return normalize(h)

@njit
def subsurface_scattering(n, l, sss_color, subsurface, light_col):
    """Back-lit transmission: light arriving behind the surface leaks through."""
    ndotl = dot(n, l)
    if ndotl >= 0.0 or subsurface <= 0.0:
        return vec3(0.0, 0.0, 0.0)
    return sss_color * light_col * (-ndotl * subsurface * SSS_STRENGTH)

@njit
def sheen_brdf(n, v, l, sheen_color, sheen):
    # Soft grazing-angle lobe, independent of Fresnel and metalness
    if sheen <= 0.0:
        return vec3(0.0, 0.0, 0.0)
    h = half_vector(v, l, n)
    ndotl = max(dot(n, l), 0.0)
    hdotl = max(dot(h, l), 0.0)
    return sheen_color * (sheen * (1.0 - hdotl) ** 5.0 * ndotl)

@njit
def brdf_lobes(n, v, l, albedo, metallic, roughness, anisotropy, sheen, sheen_color):
    """Return the ``(diffuse, specular, sheen)`` lobes for one light.

    Roughness is clamped to ``MIN_ROUGHNESS`` since it ends up squared in the
    denominator of the anisotropic distribution.
    """
    roughness = max(roughness, MIN_ROUGHNESS)
    t, b = tangent_space(n)

    h = half_vector(v, l, n)
    ndotv = max(dot(n, v), 0.0)
    ndotl = max(dot(n, l), 0.0)

    f0 = mix(vec3(0.04, 0.04, 0.04), albedo, metallic)

    d = distribution_aniso_ggx(n, h, roughness, anisotropy, t, b)
    g = geometry_smith(n, v, l, roughness)
    f = fresnel_schlick(max(dot(h, v), 0.0), f0)

    specular = f * (d * g / (4.0 * ndotv * ndotl + SPEC_DENOM_BIAS))

    kd = (1.0 - f) * (1.0 - metallic)
    diffuse = kd * albedo / PI

    return diffuse, specular, sheen_brdf(n, v, l, sheen_color, sheen)

@njit
def cook_torrance(n, v, l, albedo, metallic, roughness, anisotropy, sheen, sheen_color, light_col):
    ndotl = max(dot(n, l), 0.0)
    if ndotl <= 0.0:
        return vec3(0.0, 0.0, 0.0)

    diffuse, specular, sheen_term = brdf_lobes(n, v, l, albedo, metallic, roughness, anisotropy, sheen, sheen_color)
    return (diffuse + specular + sheen_term) * light_col * ndotl

@njit
def shade_surface(surface, rd, n, light_dirs, light_colors, ambient):
    v = normalize(-rd)

    albedo = read_vec3(surface, SURF_COLOR)
    metallic = surface[SURF_METALLIC]
    roughness = surface[SURF_ROUGHNESS]
    emissive = read_vec3(surface, SURF_EMISSIVE)
    anisotropy = surface[SURF_ANISOTROPY]
    subsurface = surface[SURF_SUBSURFACE]
    sss_color = read_vec3(surface, SURF_SUBSURFACE_COLOR)
    sheen = surface[SURF_SHEEN]
    sheen_color = read_vec3(surface, SURF_SHEEN_COLOR)

    col = ambient * albedo * (1.0 - metallic) + emissive

    for i in range(light_dirs.shape[0]):
        l = read_vec3(light_dirs[i], 0)
        light_col = read_vec3(light_colors[i], 0)

        col = col + cook_torrance(n, v, l, albedo, metallic, roughness, anisotropy, sheen, sheen_color, light_col)
        col = col + subsurface_scattering(n, l, sss_color, subsurface, light_col)

    return col
