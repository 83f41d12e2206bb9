import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sdfshade.utils.parser import build_scene

SCENES_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'scenes'))

def sphere(pos, radius=1.0, color=(0.8, 0.8, 0.8), **fields):
    prim = {'Type': 'sphere', 'Pos': list(pos), 'Radius': radius, 'Color': color if isinstance(color, dict) else list(color)}
    prim.update(fields)
    return prim

@pytest.fixture
def two_sphere_data():
    return {
        'Blend': 1.0,
        'Camera': {'Pos': [0, 0, -10], 'Rot': [0, 0, 0], 'FOV': 40},
        'Primitives': [
            sphere([-1.0, 0.0, 4.0], 1.0, (0.0, 0.0, 1.0), Roughness=0.5),
            sphere([1.0, 0.0, 4.0], 1.0, (1.0, 0.0, 0.0), Roughness=0.1),
        ],
    }

@pytest.fixture
def two_spheres(two_sphere_data):
    return build_scene(two_sphere_data)
