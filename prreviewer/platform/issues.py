"""Issue timeline comments resource client."""

from typing import TYPE_CHECKING

from prreviewer.types.platform import PostedComment

if TYPE_CHECKING:
    from prreviewer.platform.transport import HTTPTransport


class IssuesClient:
    """Client for pull request timeline comments."""

    def __init__(self, transport: "HTTPTransport") -> None:
        self.transport = transport

    def create_comment(self, owner: str, repo: str, number: int, body: str) -> PostedComment:
        """
        Post a timeline comment on a pull request.

        Raises:
            AuthenticationError: If the token is missing or rejected
            NotFoundError: If the pull request does not exist
        """
        data = self.transport.request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{number}/comments",
            body={"body": body},
        ) or {}
        return PostedComment(comment_id=data.get("id", 0), html_url=data.get("html_url"))
