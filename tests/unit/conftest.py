"""
Pytest configuration for test suite
"""

import sys
from pathlib import Path

import pytest

# Add project root to path so tests can import project modules
project_root = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(project_root))


@pytest.fixture(autouse=True)
def no_memory_wait(monkeypatch):
    """Workers never wait for free memory in tests."""
    monkeypatch.setenv("IMPORTER_MIN_FREE_MEMORY_MB", "0")
