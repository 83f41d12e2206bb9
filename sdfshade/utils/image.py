import os

import numpy as np
from PIL import Image

def to_uint8(frame):
    """Convert a rendered frame (row 0 = bottom) into a top-down 8-bit RGB array."""
    frame = np.asarray(frame, dtype=np.float32)
    if frame.ndim != 3 or frame.shape[2] != 3:
        raise ValueError(f"Expected a (height, width, 3) frame, got shape {frame.shape}")
    img_data = np.flipud(frame)
    return np.clip(img_data * 255.0 + 0.5, 0, 255).astype(np.uint8)

def to_image(frame):
    return Image.fromarray(to_uint8(frame))

def save_image(frame, output_path):
    out_dir = os.path.dirname(output_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    img = to_image(frame)
    img.save(output_path)
    return img
