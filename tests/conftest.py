# tests/conftest.py
import os
import sys

import pytest

# Ensure repo root is on sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from emblem_palette import PALETTES


@pytest.fixture
def red():
    return PALETTES["red"]
