"""
Pytest fixtures and factories for PR reviewer testing.

Provides sample contexts, results, event payloads and a mock platform.
"""

from collections.abc import Generator
from typing import Any

import pytest

from prreviewer.config import Config
from prreviewer.testing.mock import MockPlatform
from prreviewer.types.context import ChangedFile, FileStatus, PRContext
from prreviewer.types.platform import PullFile
from prreviewer.types.result import (
    Comment,
    FileAnchor,
    LineAnchor,
    ReviewDecision,
    ReviewResult,
    Side,
)


# ============================================================================
# Factory Functions
# ============================================================================


def create_mock_changed_file(**overrides: Any) -> ChangedFile:
    """Create a ChangedFile with sensible defaults."""
    defaults: dict[str, Any] = {
        "path": "src/app.py",
        "status": FileStatus.MODIFIED,
        "additions": 3,
        "deletions": 1,
        "patch": "@@ -1,2 +1,4 @@\n import os\n+import sys\n",
        "blob_url": "https://github.com/octo/widgets/blob/abc123/src/app.py",
        "raw_url": "https://github.com/octo/widgets/raw/abc123/src/app.py",
    }
    defaults.update(overrides)
    return ChangedFile(**defaults)


def create_mock_context(**overrides: Any) -> PRContext:
    """Create a PRContext with sensible defaults."""
    defaults: dict[str, Any] = {
        "owner": "octo",
        "repo": "widgets",
        "number": 123,
        "title": "Tidy up the widget loader",
        "body": "Removes dead code paths.",
        "base_ref": "main",
        "head_ref": "cleanup/loader",
        "head_sha": "abc123def4567890abc123def4567890abc12345",
        "user_login": "mona",
        "labels": ("backend", "cleanup"),
        "assignees": (),
        "changed_files": (
            create_mock_changed_file(path="src/loader.py"),
            create_mock_changed_file(path="src/legacy.py", status=FileStatus.REMOVED, additions=0, deletions=40),
            create_mock_changed_file(path="tests/test_loader.py", status=FileStatus.ADDED, additions=25, deletions=0),
        ),
        "triggered_by": "mona",
        "event_name": "pull_request",
        "trigger_text": "",
        "run_id": "1001",
    }
    defaults.update(overrides)
    return PRContext(**defaults)


def create_mock_result(**overrides: Any) -> ReviewResult:
    """Create a ReviewResult with sensible defaults."""
    defaults: dict[str, Any] = {
        "summary_markdown": "## Review\n\nLooks reasonable.\n",
        "review_decision": ReviewDecision.COMMENT,
        "review_body": "A few notes inline.",
        "comments": (
            Comment(path="src/loader.py", body="Consider a guard here.", anchor=LineAnchor(line=10)),
            Comment(path="src/loader.py", body="This block can go.", anchor=LineAnchor(line=20, side=Side.RIGHT, start_line=15, start_side=Side.RIGHT)),
            Comment(path="tests/test_loader.py", body="Nice coverage.", anchor=FileAnchor()),
        ),
        "issue_comment": "Review finished.",
    }
    defaults.update(overrides)
    return ReviewResult(**defaults)


def create_mock_pull_files(count: int) -> list[PullFile]:
    """Create a platform file listing of `count` entries named file_000.py, file_001.py, ..."""
    return [
        PullFile(
            filename=f"file_{i:03d}.py",
            status="modified",
            additions=i,
            deletions=1,
            patch=f"@@ -1 +1 @@\n-old {i}\n+new {i}\n",
            blob_url=None,
            raw_url=None,
        )
        for i in range(count)
    ]


def create_pull_request_event(**pr_overrides: Any) -> dict[str, Any]:
    """Create a pull_request event payload."""
    pull_request: dict[str, Any] = {
        "number": 123,
        "title": "Tidy up the widget loader",
        "body": "Removes dead code paths.",
        "state": "open",
        "user": {"login": "mona"},
        "labels": [{"name": "backend"}, {"name": "cleanup"}],
        "assignees": [],
        "head": {"ref": "cleanup/loader", "sha": "abc123def4567890abc123def4567890abc12345"},
        "base": {"ref": "main", "sha": "fedcba9876543210fedcba9876543210fedcba98"},
    }
    pull_request.update(pr_overrides)
    return {
        "action": "opened",
        "number": pull_request["number"],
        "pull_request": pull_request,
        "repository": {"name": "widgets", "owner": {"login": "octo"}},
        "sender": {"login": "mona"},
    }


def create_issue_comment_event(body: str, number: int = 123, on_pull_request: bool = True) -> dict[str, Any]:
    """Create an issue_comment event payload."""
    issue: dict[str, Any] = {"number": number, "title": "Tidy up the widget loader"}
    if on_pull_request:
        issue["pull_request"] = {"url": f"https://api.github.com/repos/octo/widgets/pulls/{number}"}
    return {
        "action": "created",
        "issue": issue,
        "comment": {"body": body, "user": {"login": "hubot"}},
        "repository": {"name": "widgets", "owner": {"login": "octo"}},
        "sender": {"login": "hubot"},
    }


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_platform() -> Generator[MockPlatform, None, None]:
    """
    Provide a MockPlatform for testing.

    Example:
        ```python
        def test_publish(mock_platform, sample_context, sample_result):
            ResultPublisher(Config(), mock_platform).publish(sample_context, sample_result)
            assert mock_platform.was_called("reviews.create")
        ```
    """
    platform = MockPlatform()
    yield platform
    platform.reset()


@pytest.fixture
def sample_config(tmp_path) -> Config:
    """Provide a validated Config rooted at a temporary workspace."""
    return Config(
        github_token="ghs_" + "x" * 36,
        workspace=str(tmp_path),
        summary_path=str(tmp_path / "summary.md"),
    ).validate()


@pytest.fixture
def sample_context() -> PRContext:
    """Provide a sample PRContext (PR #123, three files, two labels)."""
    return create_mock_context()


@pytest.fixture
def sample_result() -> ReviewResult:
    """Provide a sample ReviewResult with line, range and file comments."""
    return create_mock_result()


@pytest.fixture
def pull_request_event() -> dict[str, Any]:
    """Provide a sample pull_request event payload."""
    return create_pull_request_event()
