#!/usr/bin/env python3
"""
Image library generator CLI.
Tags images with the Ollama vision model and writes the catalog CSV, the
same job as POST /admin/generate-library.
"""

import argparse
import sys
from pathlib import Path

# Add the parent directory to sys.path to import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from snap_api.core.config import IMAGES_DIR, LIBRARY_CSV_OUTPUT
from snap_api.core.errors import SnapError
from snap_api.core.library_generator import generate_library


def main():
    parser = argparse.ArgumentParser(description="Generate the image library CSV")
    parser.add_argument("--images-dir", default=IMAGES_DIR, help=f"Image folder (default: {IMAGES_DIR})")
    parser.add_argument("--output", default=LIBRARY_CSV_OUTPUT, help=f"CSV path (default: {LIBRARY_CSV_OUTPUT})")
    parser.add_argument("--start", type=int, default=None, help="First image index, 0-based")
    parser.add_argument("--end", type=int, default=None, help="Last image index, inclusive")
    args = parser.parse_args()

    try:
        result = generate_library(args.images_dir, args.output, start_index=args.start, end_index=args.end)
    except SnapError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print(f"✓ Generated library with {result.processed_images} images (skipped: {result.skipped_images})")
    print(f"  range: {result.range}")
    print(f"  csv:   {result.csv_path}")


if __name__ == "__main__":
    main()
