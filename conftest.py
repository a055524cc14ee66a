"""
Root conftest: make the src/ layout importable without an installed package.
Pool fakes and fixtures live in tests/conftest.py.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))
