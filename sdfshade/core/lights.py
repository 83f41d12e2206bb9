import numpy as np

AMBIENT_COLOR = (0.07, 0.07, 0.07)
BACKGROUND_COLOR = (0.0, 0.0, 0.0)

# Default three-light rig: key (white), warm fill, cool back light
_DEFAULT_DIRS = [
    [-2.18, 1.28, -1.58],
    [2.0, 1.0, 1.0],
    [0.0, 1.0, -1.0],
]
_DEFAULT_COLORS = [
    [2.0, 2.0, 2.0],
    [1.0, 0.5, 0.2],
    [0.2, 0.5, 1.0],
]

def make_light_rig(directions, colors):
    """Build a frozen ``(dirs, colors)`` pair of ``(N, 3)`` float64 arrays.

    Directions are normalized here, once, so the shading kernel can treat
    them as unit vectors.
    """
    dirs = np.array(directions, dtype=np.float64).reshape(-1, 3)
    cols = np.array(colors, dtype=np.float64).reshape(-1, 3)
    if dirs.shape[0] != cols.shape[0]:
        raise ValueError(f"Light rig needs one color per direction, got {dirs.shape[0]} directions and {cols.shape[0]} colors")

    norms = np.linalg.norm(dirs, axis=1)
    if np.any(norms == 0.0):
        raise ValueError("Light direction must be non-zero")
    dirs = dirs / norms[:, None]

    dirs.setflags(write=False)
    cols.setflags(write=False)
    return dirs, cols

LIGHT_DIRS, LIGHT_COLORS = make_light_rig(_DEFAULT_DIRS, _DEFAULT_COLORS)
