"""PR reviewer testing utilities.

Provides a mock platform and factories for testing the orchestrator and
review tools built against it.
"""

from prreviewer.testing.fixtures import (
    create_issue_comment_event,
    create_mock_changed_file,
    create_mock_context,
    create_mock_pull_files,
    create_mock_result,
    create_pull_request_event,
)
from prreviewer.testing.mock import MockCall, MockPlatform, MockResponse

__all__ = [
    # Mock platform
    "MockPlatform",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_mock_changed_file",
    "create_mock_context",
    "create_mock_result",
    "create_mock_pull_files",
    "create_pull_request_event",
    "create_issue_comment_event",
]
