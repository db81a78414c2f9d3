#!/usr/bin/env python3
"""
Analyze a residence-hall roster and print a structure report.

Usage:
    scripts/analyze_community.py roster.json [--subgroups A B] [--min-strength X] [--config FILE]
"""

from __future__ import annotations

import sys
from pathlib import Path

# Allow running from a checkout without installing
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from reslife.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
