"""
Pytest configuration and shared fixtures for Merkle tree tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

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

_records = importlib.import_module("fixtures.records")

make_records = _records.make_records
write_record_file = _records.write_record_file

from merkle_core.merkle.merkle_tree import build_merkle_tree


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def records():
    """Provide seven distinct records (odd count, promotion at two levels)."""
    return make_records(7)


@pytest.fixture
def tree(records):
    """Provide a tree built from the default records."""
    return build_merkle_tree(records)


@pytest.fixture
def record_file(tmp_path, records):
    """Provide a record list file holding the default records."""
    return write_record_file(tmp_path / "records.txt", records)


@pytest.fixture
def isolated_cli(tmp_path, monkeypatch):
    """
    Isolate CLI runs from the developer's environment.

    Runs from tmp_path with HOME pointed there and MERKLE_* unset, so no
    config file, .env file or environment variable leaks into a test.
    """
    for name in ("LOG_LEVEL", "LOG_FILE", "OUTPUT_FORMAT", "JSON_INDENT"):
        monkeypatch.delenv(f"MERKLE_{name}", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def assert_check_passed():
    """Helper to assert a specific check passed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert checks[0].ok, f"Check '{check_id}' failed: {checks[0].message}"
    return _assert
