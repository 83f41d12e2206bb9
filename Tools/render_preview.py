import os
import sys
import time
import argparse

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sdfshade.utils.parser import parse_scene, SceneError
from sdfshade.core.engine import render_frame
from sdfshade.utils.image import save_image

def main():
    parser = argparse.ArgumentParser(description="Render a YAML SDF scene to an image")
    parser.add_argument("yaml_file", help="Path to the YAML scene file")
    parser.add_argument("-o", "--output", default=None, help="Output image (default: <scene>.png next to the scene)")
    parser.add_argument("--width", type=int, default=800, help="Output width")
    parser.add_argument("--height", type=int, default=600, help="Output height")

    args = parser.parse_args()

    if not os.path.exists(args.yaml_file):
        print(f"Error: File {args.yaml_file} not found")
        return 1

    output_path = args.output or os.path.splitext(args.yaml_file)[0] + '.png'

    print(f"Loading Scene: {args.yaml_file}")
    try:
        scene = parse_scene(args.yaml_file)
    except SceneError as e:
        print(f"Error: {e}")
        return 1

    print(f"Rendering {args.width}x{args.height}...")
    start_time = time.time()
    frame = render_frame(scene, scene['camera'], args.width, args.height)
    print(f"Rendered in {time.time() - start_time:.2f}s")

    save_image(frame, output_path)
    print(f"Saved {output_path}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
