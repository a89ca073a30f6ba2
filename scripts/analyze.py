#!/usr/bin/env python3
"""
TRAQA Flight Log Analysis Script

Trajectory quality analysis of one or more UAV flight logs.

Usage:
    python scripts/analyze.py FLIGHT.json [FLIGHT.json ...] [--config CONFIG_FILE]
                              [--output OUTPUT_DIR] [--format json|txt] [--compare]
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from traqa.cli import main


if __name__ == "__main__":
    sys.exit(main())
