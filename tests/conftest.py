"""
Pytest configuration and shared fixtures for envkit tests.
"""

import pytest
from pathlib import Path

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.store import (
    mock_store,
    mock_project,
    rust_toolchain_file,
)

from envkit.core.platform import clear_platform_cache


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line(
        "markers",
        "integration: marks tests exercising the full pipeline on a mock store",
    )


@pytest.fixture(autouse=True)
def _fresh_platform_cache():
    """Host detection is cached per process; isolate tests that patch it."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def isolated_home(tmp_path, monkeypatch) -> Path:
    """Create isolated home directory for tests."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.delenv("CARGO_HOME", raising=False)
    monkeypatch.delenv("RUSTUP_HOME", raising=False)

    return fake_home
