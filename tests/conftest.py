"""Make ``import pathwalk`` resolve to this checkout when pytest runs uninstalled."""

from __future__ import annotations

import sys
from pathlib import Path


CHECKOUT_ROOT = str(Path(__file__).resolve().parents[1])

if CHECKOUT_ROOT not in sys.path:
    sys.path.insert(0, CHECKOUT_ROOT)
