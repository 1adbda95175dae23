"""Review verdict models returned by review tools."""

from dataclasses import dataclass
from enum import Enum


class ReviewDecision(str, Enum):
    """Verdict a tool reaches about a pull request."""

    APPROVE = "approve"
    REQUEST_CHANGES = "request_changes"
    COMMENT = "comment"

    @property
    def platform_event(self) -> str:
        """The GitHub review event for this decision."""
        return self.value.upper()


class Side(str, Enum):
    """Diff side a line comment points at."""

    LEFT = "LEFT"
    RIGHT = "RIGHT"


@dataclass(frozen=True)
class FileAnchor:
    """Comment attached to a whole file, with no line."""


@dataclass(frozen=True)
class LineAnchor:
    """Comment attached to a line, or a line range when start_line is set."""

    line: int
    side: Side = Side.RIGHT
    start_line: int | None = None
    start_side: Side | None = None


Anchor = FileAnchor | LineAnchor


@dataclass(frozen=True)
class Comment:
    """An inline review comment."""

    path: str
    body: str
    anchor: Anchor

    @property
    def is_file_level(self) -> bool:
        return isinstance(self.anchor, FileAnchor)


@dataclass(frozen=True)
class ReviewResult:
    """Structured verdict produced by a review tool."""

    summary_markdown: str
    review_decision: ReviewDecision
    review_body: str
    comments: tuple[Comment, ...] = ()
    issue_comment: str | None = None
