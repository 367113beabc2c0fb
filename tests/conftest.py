"""
Pytest configuration and shared fixtures for Binarius tests.
"""

import pytest
from pathlib import Path

# Import test fixtures to make them available to all tests
# These imports register the fixtures with pytest's fixture discovery system
# ruff: noqa: F401
from tests.fixtures.archives import (
    binary_payload,
    terraform_zip,
    traversal_zip,
    sample_tar_gz,
)


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as fast unit tests")
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """
    Point every Binarius directory into tmp_path.

    Returns:
        The Binarius home directory (tmp_path / "binarius"); the bin
        directory is tmp_path / "bin" and the cache is <home>/cache.
    """
    fake_user_home = tmp_path / "user"
    fake_user_home.mkdir()
    home = tmp_path / "binarius"
    bin_dir = tmp_path / "bin"

    monkeypatch.setenv("HOME", str(fake_user_home))
    monkeypatch.setenv("USERPROFILE", str(fake_user_home))
    monkeypatch.setenv("BINARIUS_HOME", str(home))
    monkeypatch.setenv("BINARIUS_BIN_DIR", str(bin_dir))
    monkeypatch.delenv("BINARIUS_CACHE_DIR", raising=False)

    return home


@pytest.fixture
def linux_amd64():
    """Fixed platform for installer tests."""
    from binarius.core.platform import PlatformInfo

    return PlatformInfo(os="linux", arch="amd64")


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    from binarius.core import platform

    platform.detect_platform.cache_clear()
    yield
