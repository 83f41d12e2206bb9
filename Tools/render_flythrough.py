import os
import sys
import argparse

import yaml

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sdfshade.driver import FrameDriver
from sdfshade.utils.image import save_image

def main():
    parser = argparse.ArgumentParser(description="Render a fly-through frame sequence of a YAML scene")
    parser.add_argument("yaml_file", help="Path to the YAML scene file")
    parser.add_argument("output_dir", help="Directory for numbered frames")
    parser.add_argument("--frames", type=int, default=60, help="Number of frames")
    parser.add_argument("--width", type=int, default=320, help="Output width")
    parser.add_argument("--height", type=int, default=240, help="Output height")
    parser.add_argument("--forward", type=float, default=1.0, help="Forward axis input per frame (-1..1)")
    parser.add_argument("--strafe", type=float, default=0.0, help="Right axis input per frame (-1..1)")
    parser.add_argument("--turn", type=float, default=0.0, help="Horizontal look delta per frame (mouse pixels)")
    parser.add_argument("--fps", type=float, default=24.0, help="Frames per second used to scale movement")

    args = parser.parse_args()

    if not os.path.exists(args.yaml_file):
        print(f"Error: File {args.yaml_file} not found")
        return 1

    with open(args.yaml_file, 'r') as f:
        data = yaml.safe_load(f)

    os.makedirs(args.output_dir, exist_ok=True)
    driver = FrameDriver(data, width=args.width, height=args.height)
    dt = 1.0 / args.fps

    for i in range(args.frames):
        frame = driver.render()
        out_file = os.path.join(args.output_dir, f"frame_{i:04d}.png")
        save_image(frame, out_file)
        print(f"  Frame {i + 1}/{args.frames} -> {out_file}")

        driver.controller.look(args.turn, 0.0)
        driver.controller.move(forward=args.forward, right=args.strafe, dt=dt)

    return 0

if __name__ == "__main__":
    sys.exit(main())
