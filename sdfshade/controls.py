import numpy as np

from .core.camera import DEFAULT_FOV, MAX_PITCH

class CameraController:
    """Headless fly camera.

    Holds position and (pitch, yaw, roll) and turns look deltas and movement
    axes into new camera state. Forward at zero rotation is +Z.
    """

    def __init__(self, pos=(0.0, 0.0, -10.0), rot=(0.0, 0.0, 0.0), fov=DEFAULT_FOV,
                 sensitivity=0.002, move_speed=2.5):
        self.pos = np.array(pos, dtype=np.float64)
        self.rot = np.array(rot, dtype=np.float64)
        self.fov = float(fov)
        self.sensitivity = sensitivity
        self.move_speed = move_speed
        self.rot[0] = np.clip(self.rot[0], -MAX_PITCH, MAX_PITCH)

    def basis(self):
        pitch, yaw = self.rot[0], self.rot[1]
        forward = np.array([-np.sin(yaw) * np.cos(pitch),
                            np.sin(pitch),
                            np.cos(yaw) * np.cos(pitch)])
        right = np.array([forward[2], 0.0, -forward[0]])
        right /= np.linalg.norm(right)
        up = np.cross(forward, right)
        up /= np.linalg.norm(up)
        return forward, right, up

    def look(self, dx, dy):
        # Mouse right turns right, mouse up looks up
        self.rot[1] -= dx * self.sensitivity
        self.rot[0] -= dy * self.sensitivity
        self.rot[0] = np.clip(self.rot[0], -MAX_PITCH, MAX_PITCH)

    def move(self, forward=0.0, right=0.0, up=0.0, dt=1.0 / 60.0):
        axes = np.array([forward, right, up], dtype=np.float64)
        n = np.linalg.norm(axes)
        if n == 0.0:
            return
        axes /= n

        f, r, u = self.basis()
        self.pos += (axes[0] * f + axes[1] * r + axes[2] * u) * self.move_speed * dt

    def snapshot(self):
        return {'Pos': self.pos.tolist(), 'Rot': self.rot.tolist(), 'FOV': self.fov}
