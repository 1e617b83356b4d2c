"""
Pytest configuration and shared fixtures for segment store tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import os
import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_segment = _common.make_segment
make_segments = _common.make_segments
make_tree = _common.make_tree
make_storage_config = _common.make_storage_config
make_runtime_config = _common.make_runtime_config


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    """Keep SEGPROOF_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("SEGPROOF_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def storage_config(tmp_path):
    """StorageConfig rooted in a per-test temporary directory."""
    return make_storage_config(tmp_path)


@pytest.fixture
def runtime_config(tmp_path):
    """RuntimeConfig rooted in a per-test temporary directory."""
    return make_runtime_config(tmp_path)


@pytest.fixture
def store(storage_config):
    """Empty SegmentStore over a temporary uploads directory."""
    from core.storage.segment_store import SegmentStore

    return SegmentStore(storage_config)


@pytest.fixture
def client(runtime_config):
    """TestClient for an app instance bound to a temporary store."""
    from fastapi.testclient import TestClient

    from api.app import create_app

    return TestClient(create_app(runtime_config))


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
