"""Pull request context snapshot models."""

from dataclasses import dataclass
from enum import Enum


class FileStatus(str, Enum):
    """Change status of a file in a pull request."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"
    RENAMED = "renamed"


@dataclass(frozen=True)
class ChangedFile:
    """A file touched by the pull request, in platform-reported order."""

    path: str
    status: FileStatus
    additions: int = 0
    deletions: int = 0
    patch: str | None = None
    blob_url: str | None = None
    raw_url: str | None = None
    contents_b64: str | None = None
    # True when contents were requested but the file exceeded the byte cap
    # or was missing from the checkout.
    contents_omitted: bool = False


@dataclass(frozen=True)
class ExtraFile:
    """An auxiliary file pulled in through a configured glob."""

    path: str
    contents_b64: str


@dataclass(frozen=True)
class PRContext:
    """Immutable snapshot of a pull request handed to a review tool."""

    owner: str
    repo: str
    number: int
    title: str
    body: str
    base_ref: str
    head_ref: str
    head_sha: str
    user_login: str
    labels: tuple[str, ...] = ()
    assignees: tuple[str, ...] = ()
    changed_files: tuple[ChangedFile, ...] = ()
    guidelines_b64: str | None = None
    extra_files: tuple[ExtraFile, ...] = ()
    triggered_by: str = ""
    event_name: str = ""
    trigger_text: str = ""
    run_id: str = ""

    @property
    def full_name(self) -> str:
        """Repository in "owner/repo" form."""
        return f"{self.owner}/{self.repo}"

    @property
    def additions(self) -> int:
        return sum(f.additions for f in self.changed_files)

    @property
    def deletions(self) -> int:
        return sum(f.deletions for f in self.changed_files)

