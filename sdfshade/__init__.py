import logging

from .core.engine import render_frame, render_pixel, trace_ray
from .utils.parser import parse_scene, build_scene, build_camera, SceneError
from .utils.image import save_image

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

def render_yaml(yaml_path, output_path, width=800, height=600):
    scene = parse_scene(yaml_path)
    frame = render_frame(scene, scene['camera'], width, height)
    save_image(frame, output_path)
    return frame
