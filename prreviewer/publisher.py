"""
Result publisher.

Maps one ReviewResult onto the enabled output channels. Channels are
independent: each one is attempted, failures are collected into the report,
and none stops the others.
"""

import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TextIO

from prreviewer.exceptions import ReviewerError
from prreviewer.logging import get_logger
from prreviewer.types.context import PRContext
from prreviewer.types.result import Comment, FileAnchor, ReviewResult
from prreviewer.wire import encode_result

if TYPE_CHECKING:
    from prreviewer.config import Config
    from prreviewer.platform.client import GitHubClient

logger = get_logger("publisher")

CHANNEL_ORDER = ("summary", "stdout", "comment", "review")


@dataclass
class ChannelOutcome:
    """Result of attempting one output channel."""

    channel: str
    ok: bool
    detail: str = ""
    error: Exception | None = None


@dataclass
class PublishReport:
    """Everything the publisher did, channel by channel."""

    outcomes: list[ChannelOutcome] = field(default_factory=list)
    submitted_comments: int = 0
    dropped_comments: int = 0
    """Comments cut by the max_comments cap."""
    unanchored_comments: int = 0
    """Line comments dropped because the review had no diff to anchor to."""

    @property
    def failures(self) -> list[ChannelOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def ok(self) -> bool:
        return not self.failures


class ResultPublisher:
    """
    Publishes a ReviewResult to the channels enabled in the configuration.

    Example:
        ```python
        publisher = ResultPublisher(config, GitHubClient.from_config(config))
        report = publisher.publish(context, result)
        for failure in report.failures:
            print(failure.channel, failure.error)
        ```
    """

    def __init__(
        self,
        config: "Config",
        platform: "GitHubClient",
        stdout: TextIO | None = None,
    ) -> None:
        self.config = config
        self.platform = platform
        self.stdout = stdout if stdout is not None else sys.stdout

    def publish(self, context: PRContext, result: ReviewResult) -> PublishReport:
        """
        Attempt every enabled channel and report per-channel outcomes.

        Never raises for channel failures; inspect `PublishReport.failures`.
        """
        report = PublishReport()
        handlers = {
            "summary": self._publish_summary,
            "stdout": self._publish_stdout,
            "comment": self._publish_comment,
            "review": self._publish_review,
        }

        for channel in CHANNEL_ORDER:
            if channel not in self.config.channels:
                continue
            try:
                detail = handlers[channel](context, result, report)
            except (ReviewerError, OSError) as e:
                logger.error(f"Channel {channel} failed: {e}")
                report.outcomes.append(ChannelOutcome(channel, ok=False, detail=str(e), error=e))
            except Exception as e:
                # Channels are independent: record it and move on to the next one
                logger.exception(f"Channel {channel} failed unexpectedly: {e!r}")
                report.outcomes.append(ChannelOutcome(channel, ok=False, detail=repr(e), error=e))
            else:
                logger.info(f"Channel {channel}: {detail}")
                report.outcomes.append(ChannelOutcome(channel, ok=True, detail=detail))

        return report

    def _publish_summary(self, context: PRContext, result: ReviewResult, report: PublishReport) -> str:
        self.platform.summary.write(result.summary_markdown)
        return "job summary written"

    def _publish_stdout(self, context: PRContext, result: ReviewResult, report: PublishReport) -> str:
        if self.config.stdout_full_result:
            self.stdout.write(encode_result(result, indent=2) + "\n")
        else:
            text = result.summary_markdown
            self.stdout.write(text if text.endswith("\n") else text + "\n")
        self.stdout.flush()
        return "written to stdout"

    def _publish_comment(self, context: PRContext, result: ReviewResult, report: PublishReport) -> str:
        body = result.issue_comment
        if body is None or not body.strip():
            return "skipped (no issue comment)"
        posted = self.platform.issues.create_comment(context.owner, context.repo, context.number, body)
        return f"comment {posted.comment_id} posted"

    def _publish_review(self, context: PRContext, result: ReviewResult, report: PublishReport) -> str:
        anchored = bool(context.head_sha)
        comments: list[Comment] = []
        for comment in result.comments:
            if anchored or isinstance(comment.anchor, FileAnchor):
                comments.append(comment)
            else:
                report.unanchored_comments += 1
        if report.unanchored_comments:
            logger.warning(
                f"Dropped {report.unanchored_comments} line comment(s): review is not anchored to a diff"
            )

        cap = self.config.max_comments
        if len(comments) > cap:
            report.dropped_comments = len(comments) - cap
            logger.warning(
                f"Dropped {report.dropped_comments} comment(s) beyond max_comments={cap}"
            )
            comments = comments[:cap]

        posted = self.platform.reviews.create(
            context.owner,
            context.repo,
            context.number,
            event=result.review_decision.platform_event,
            body=result.review_body,
            comments=[comment_payload(c) for c in comments],
            commit_id=context.head_sha or None,
        )
        report.submitted_comments = len(comments)
        return (
            f"review {posted.review_id} ({result.review_decision.platform_event}) "
            f"with {len(comments)} comment(s)"
        )


def comment_payload(comment: Comment) -> dict[str, Any]:
    """Build the platform payload for one inline comment."""
    payload: dict[str, Any] = {"path": comment.path, "body": comment.body}
    anchor = comment.anchor
    if isinstance(anchor, FileAnchor):
        payload["subject_type"] = "file"
        return payload
    payload["line"] = anchor.line
    payload["side"] = anchor.side.value
    if anchor.start_line is not None and anchor.start_line != anchor.line:
        payload["start_line"] = anchor.start_line
        payload["start_side"] = (anchor.start_side or anchor.side).value
    return payload
