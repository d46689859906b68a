"""
Global test configuration for ClassBeyond.
"""

import os

# settings and the engine are created on import, point them at a throwaway database
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["DATABASE_TYPE"] = "sqlite"
os.environ["EMAIL_PROVIDER"] = "console"
os.environ["TIMEZONE"] = "UTC"
os.environ["LOG_LEVEL"] = "info"

import pytest  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")


def pytest_collection_modifyitems(config, items):
    """Auto-mark tests based on location."""
    _ = config

    for item in items:
        test_path = str(item.fspath)

        # Mark by directory
        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
