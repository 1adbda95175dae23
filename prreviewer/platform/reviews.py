"""Pull request reviews resource client."""

from typing import TYPE_CHECKING, Any

from prreviewer.types.platform import PostedReview

if TYPE_CHECKING:
    from prreviewer.platform.transport import HTTPTransport


class ReviewsClient:
    """Client for submitting pull request reviews."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def create(
        self,
        owner: str,
        repo: str,
        number: int,
        event: str,
        body: str,
        comments: list[dict[str, Any]] | None = None,
        commit_id: str | None = None,
    ) -> PostedReview:
        """
        Submit a review for a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            number: Pull request number
            event: "APPROVE", "REQUEST_CHANGES", or "COMMENT"
            body: Review body markdown
            comments: Inline comment payloads, submitted in the given order
            commit_id: Commit the review (and its line comments) is anchored to

        Returns:
            PostedReview with the platform review id

        Raises:
            AuthenticationError: If the token is missing or rejected
            ValidationError: If the platform rejects the review (e.g. a line
                outside the diff, or self-approval)
        """
        request_body: dict[str, Any] = {
            "event": event,
            "body": body,
            "comments": list(comments or []),
        }
        if commit_id:
            request_body["commit_id"] = commit_id

        data = self.transport.request(
            "POST",
            f"/repos/{owner}/{repo}/pulls/{number}/reviews",
            body=request_body,
        ) or {}

        return PostedReview(
            review_id=data.get("id", 0),
            state=data.get("state", ""),
            html_url=data.get("html_url"),
            comment_count=len(request_body["comments"]),
        )
