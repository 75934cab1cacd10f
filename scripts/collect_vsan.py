#!/usr/bin/env python3
"""Run one vSAN collection cycle from a source checkout."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from vsan_collector.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
