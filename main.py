#!/usr/bin/env python3
"""
main.py — Quick-start entry point.

    python main.py render palette.csv photo.jpg out/mosaic --ldraw --parts

Or list what a catalog offers:

    python -m brick_mosaic.cli catalog palette.csv
"""

from brick_mosaic.cli import app

if __name__ == "__main__":
    app()
