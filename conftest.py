"""Pytest configuration.

Puts the repository root on ``sys.path`` so ``idlecat`` resolves when the
tests run from a plain checkout.
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
