"""Configure pytest for the image position finder test suite."""

import pytest

from position_finder.config import FinderConfig


@pytest.fixture
def default_config() -> FinderConfig:
    """Default matching configuration."""
    return FinderConfig()


def pytest_configure(config):
    """Register custom pytest markers."""
    custom_markers = [
        "matching",  # Matcher and comparator tests
        "integration",  # End-to-end tests touching the file system
        "slow",  # Slow running tests
    ]

    for marker in custom_markers:
        config.addinivalue_line(
            "markers",
            f"{marker}: mark test as {marker} test"
        )
