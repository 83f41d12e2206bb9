import os
import sys
import argparse
import traceback

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sdfshade import render_yaml

def main():
    parser = argparse.ArgumentParser(description="Render every scene in scenes/Materials")
    parser.add_argument("--width", type=int, default=320, help="Output width")
    parser.add_argument("--height", type=int, default=240, help="Output height")
    args = parser.parse_args()

    materials_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), '../scenes/Materials'))
    tests = sorted(f for f in os.listdir(materials_dir) if f.endswith('.yaml'))

    print(f"Found {len(tests)} Material Scenes")

    failed = 0
    for test in tests:
        input_path = os.path.join(materials_dir, test)
        output_path = os.path.join(materials_dir, test.replace('.yaml', '_render.png'))

        print(f"Rendering: {test}")
        try:
            render_yaml(input_path, output_path, width=args.width, height=args.height)
        except Exception as e:
            print(f"FAILED: {test} - {e}")
            traceback.print_exc()
            failed += 1

    print(f"Done: {len(tests) - failed}/{len(tests)} rendered")
    return 1 if failed else 0

if __name__ == "__main__":
    sys.exit(main())
