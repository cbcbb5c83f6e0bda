"""Pytest configuration.

Tests import ``abx_core`` / ``abx_client`` and the shared fakes in
``tests._channels`` without the project being installed, so the repository
root has to be importable.
"""

from __future__ import annotations

import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
