"""
Pytest plugin for PR reviewer testing fixtures.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["prreviewer.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from prreviewer.testing.fixtures import (
    mock_platform,
    pull_request_event,
    sample_config,
    sample_context,
    sample_result,
)

__all__ = [
    "mock_platform",
    "pull_request_event",
    "sample_config",
    "sample_context",
    "sample_result",
]
