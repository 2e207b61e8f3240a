#!/usr/bin/env python3
"""Check the tax-year YAML files from a source checkout."""

from __future__ import annotations

import sys
from pathlib import Path

# Allow running straight from a checkout without installing the package.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from fincalc.backend.config.validator import main


if __name__ == "__main__":
    raise SystemExit(main())
