#!/usr/bin/env python3
"""
Image Position Finder Entry Point

Usage: python main.py <full_image_dir_or_file> <square_image_dir_or_file> [tolerance]
"""

import sys

from position_finder.cli import main

if __name__ == "__main__":
    sys.exit(main())
