import logging
import os

import numpy as np
import pytest

from conftest import sphere, SCENES_DIR
from sdfshade.utils.parser import build_scene, build_camera, parse_scene, SceneError
from sdfshade.core.lights import LIGHT_DIRS, LIGHT_COLORS
from sdfshade.core.scene import (SHAPE_SPHERE, SHAPE_PLANE, SHAPE_ROUNDBOX, SHAPE_MANDELBULB,
                                 MAT_COLOR, MAT_ROUGHNESS, MAT_SHEEN, MAT_ANISOTROPY)
from sdfshade.core.shading import MIN_ROUGHNESS
from sdfshade.core.camera import MAX_PITCH

def test_each_radius_maps_to_its_own_primitive():
    scene = build_scene({'Primitives': [sphere([-1, 0, 4], 0.5), sphere([1, 0, 4], 1.5)]})
    np.testing.assert_array_equal(scene['params'][:, 0], [0.5, 1.5])
    np.testing.assert_array_equal(scene['positions'], [[-1, 0, 4], [1, 0, 4]])
    np.testing.assert_array_equal(scene['kinds'], [SHAPE_SPHERE, SHAPE_SPHERE])

def test_eight_bit_color_mapping():
    scene = build_scene({'Primitives': [sphere([0, 0, 0], color={'r': 0, 'g': 0, 'b': 255})]})
    np.testing.assert_allclose(scene['materials'][0, MAT_COLOR:MAT_COLOR + 3], [0.0, 0.0, 1.0])

def test_out_of_range_values_are_clamped_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger='sdfshade.utils.parser'):
        scene = build_scene({'Primitives': [sphere([0, 0, 0], Roughness=0.0, Sheen=250.0, Anisotropy=-3.0)]})
    m = scene['materials'][0]
    assert m[MAT_ROUGHNESS] == MIN_ROUGHNESS
    assert m[MAT_SHEEN] == 100.0
    assert m[MAT_ANISOTROPY] == -1.0
    assert 'Roughness' in caplog.text

def test_scene_arrays_are_read_only(two_spheres):
    for key in ('kinds', 'positions', 'params', 'materials', 'light_dirs', 'light_colors', 'ambient', 'background'):
        assert not two_spheres[key].flags.writeable
    with pytest.raises(ValueError):
        two_spheres['positions'][0, 0] = 5.0

def test_default_light_rig_is_shared(two_spheres):
    assert two_spheres['light_dirs'] is LIGHT_DIRS
    assert two_spheres['light_colors'] is LIGHT_COLORS
    assert LIGHT_DIRS.shape == (3, 3)
    np.testing.assert_allclose(np.linalg.norm(LIGHT_DIRS, axis=1), 1.0)
    np.testing.assert_allclose(LIGHT_COLORS[0], [2.0, 2.0, 2.0])

def test_custom_lights_are_normalized_and_scaled():
    scene = build_scene({
        'Lights': [{'Dir': [0, 3, 0], 'Color': [1.0, 0.5, 0.25], 'Intensity': 2.0}],
        'Primitives': [sphere([0, 0, 0])],
    })
    np.testing.assert_allclose(scene['light_dirs'], [[0.0, 1.0, 0.0]])
    np.testing.assert_allclose(scene['light_colors'], [[2.0, 1.0, 0.5]])

def test_zero_light_direction_rejected():
    with pytest.raises(SceneError):
        build_scene({'Lights': [{'Dir': [0, 0, 0]}], 'Primitives': []})

def test_other_primitive_types():
    scene = build_scene({'Primitives': [
        {'Type': 'plane', 'Normal': [0, 2, 0], 'Offset': 1.0},
        {'Type': 'roundbox', 'Size': [1, 2, 3], 'Rounding': 0.1},
        {'Type': 'mandelbulb', 'Power': 6},
        {'Type': 0, 'Radius': 2.0},
    ]})
    np.testing.assert_array_equal(scene['kinds'], [SHAPE_PLANE, SHAPE_ROUNDBOX, SHAPE_MANDELBULB, SHAPE_SPHERE])
    np.testing.assert_allclose(scene['params'][0], [0, 1, 0, 1.0])
    np.testing.assert_allclose(scene['params'][1], [1, 2, 3, 0.1])
    np.testing.assert_allclose(scene['params'][2], [6, 8, 0, 0])

@pytest.mark.parametrize("data", [
    {},
    {'Primitives': 'sphere'},
    {'Primitives': [{'Type': 'torus'}]},
    {'Primitives': [{'Type': 'sphere', 'Pos': [1, 2]}]},
    {'Primitives': [{'Type': 'sphere', 'Radius': 0}]},
    {'Primitives': [{'Type': 'sphere', 'Color': {'r': 1, 'g': 2}}]},
    {'Primitives': [{'Type': 'sphere', 'Metalness': 'shiny'}]},
    {'Primitives': [{'Type': 'plane', 'Normal': [0, 0, 0]}]},
    {'Primitives': [{'Type': 'sphere', 'Radius': None}]},
    {'Primitives': [{'Type': 'sphere', 'Radius': 'big'}]},
    {'Primitives': [{'Type': 'plane', 'Offset': [1]}]},
    {'Primitives': [{'Type': 'roundbox', 'Rounding': 'x'}]},
    {'Primitives': [{'Type': 'mandelbulb', 'Power': None}]},
    {'Primitives': [{'Type': 'mandelbulb', 'Bailout': 'far'}]},
    {'Primitives': [{'Type': 'sphere', 'Color': {'r': 'red', 'g': 0, 'b': 0}}]},
    {'Blend': 'soft', 'Primitives': []},
    {'Camera': {'FOV': None}, 'Primitives': []},
    {'Camera': 'front', 'Primitives': []},
    {'Lights': [{'Dir': [0, 1, 0], 'Intensity': 'bright'}], 'Primitives': []},
    {'Lights': 3, 'Primitives': []},
])
def test_malformed_scenes_raise(data):
    with pytest.raises(SceneError):
        build_scene(data)

def test_negative_blend_falls_back_to_hard_union():
    assert build_scene({'Blend': -1.0, 'Primitives': []})['blend_k'] == 0.0

def test_camera_defaults_and_pitch_clamp():
    cam = build_camera(None)
    assert cam == {'Pos': [0.0, 0.0, -10.0], 'Rot': [0.0, 0.0, 0.0], 'FOV': 40.0}
    cam = build_camera({'Rot': [3.0, 0.5, 0.0]})
    assert cam['Rot'][0] == pytest.approx(MAX_PITCH)
    assert cam['Rot'][1] == 0.5
    with pytest.raises(SceneError):
        build_camera({'FOV': 0})

def test_parse_scene_reads_yaml(tmp_path):
    path = tmp_path / "s.yaml"
    path.write_text("Blend: 0.5\nPrimitives:\n  - Type: sphere\n    Pos: [1, 2, 3]\n    Radius: 0.25\n")
    scene = parse_scene(str(path))
    assert scene['blend_k'] == 0.5
    assert scene['num_primitives'] == 1
    np.testing.assert_allclose(scene['params'][0, 0], 0.25)

def test_parse_scene_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_scene(str(tmp_path / "nope.yaml"))

def test_shipped_scenes_parse():
    paths = [os.path.join(SCENES_DIR, 'two_spheres.yaml')]
    materials = os.path.join(SCENES_DIR, 'Materials')
    paths += [os.path.join(materials, f) for f in sorted(os.listdir(materials)) if f.endswith('.yaml')]
    for path in paths:
        scene = parse_scene(path)
        assert scene['num_primitives'] >= 1
