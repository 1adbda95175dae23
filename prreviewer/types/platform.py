"""Hosting platform data models."""

from dataclasses import dataclass


@dataclass
class PullRequest:
    """Pull request metadata as reported by the platform."""

    number: int
    title: str
    body: str | None
    user_login: str
    base_ref: str
    head_ref: str
    head_sha: str
    labels: list[str]
    assignees: list[str]


@dataclass
class PullFile:
    """One entry of a pull request's changed-file listing."""

    filename: str
    status: str  # "added", "modified", "removed", "renamed", "copied", "changed"
    additions: int
    deletions: int
    patch: str | None
    blob_url: str | None
    raw_url: str | None
    previous_filename: str | None = None


@dataclass
class PostedReview:
    """A review created on the platform."""

    review_id: int
    state: str  # "APPROVED", "CHANGES_REQUESTED", "COMMENTED"
    html_url: str | None
    comment_count: int = 0


@dataclass
class PostedComment:
    """A timeline comment created on the platform."""

    comment_id: int
    html_url: str | None
