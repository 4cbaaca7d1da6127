#!/usr/bin/env .venv/bin/python3
"""
Command-line script to analyze workout CSV exports.

Usage:
    ./analyze.py data/export.csv
    ./analyze.py data/export.csv --exercise "Barbell Deadlift" --output-dir data

Or with explicit python:
    .venv/bin/python3 analyze.py data/export.csv
"""

import sys
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from workoutcsv.parser import main

if __name__ == "__main__":
    sys.exit(main())
