"""Frame driver: owns the live scene description and camera, freezes both
into a snapshot before every render pass, and renders the snapshot."""
import copy
import logging

from .controls import CameraController
from .core.engine import render_frame
from .utils.parser import build_scene

logger = logging.getLogger(__name__)

class FrameDriver:
    def __init__(self, scene_data, controller=None, width=800, height=600):
        self.scene_data = copy.deepcopy(scene_data)
        if controller is None:
            cam = build_scene(self.scene_data)['camera']
            controller = CameraController(cam['Pos'], cam['Rot'], cam['FOV'])
        self.controller = controller
        self.width = width
        self.height = height
        self.frame_index = 0

    @property
    def primitives(self):
        return self.scene_data['Primitives']

    def update_primitive(self, index, **fields):
        """Set fields (``Pos``, ``Radius``, ``Color`` ...) on one primitive."""
        self.primitives[index].update(copy.deepcopy(fields))

    def snapshot(self):
        # Arrays built here are read-only; later edits only reach the next frame
        data = copy.deepcopy(self.scene_data)
        data['Camera'] = self.controller.snapshot()
        scene = build_scene(data)
        return scene, scene['camera']

    def render(self):
        scene, camera = self.snapshot()
        frame = render_frame(scene, camera, self.width, self.height)
        logger.debug("Frame %d rendered", self.frame_index)
        self.frame_index += 1
        return frame
