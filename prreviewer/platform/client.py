"""
GitHub platform client.

Aggregates the resource clients the collector reads from and the publisher
writes through.
"""

from typing import TYPE_CHECKING, Any

import httpx

from prreviewer.platform.issues import IssuesClient
from prreviewer.platform.pulls import PullsClient
from prreviewer.platform.reviews import ReviewsClient
from prreviewer.platform.summary import SummaryWriter
from prreviewer.platform.transport import HTTPTransport, RetryConfig

if TYPE_CHECKING:
    from prreviewer.config import Config


class GitHubClient:
    """
    Client for the parts of the GitHub API a review run touches.

    Example:
        ```python
        from prreviewer.platform import GitHubClient

        with GitHubClient(token="ghs_...") as client:
            pr = client.pulls.get("octo", "widgets", 123)
            client.issues.create_comment("octo", "widgets", 123, "Thanks!")
        ```
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        token: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        retry_config: RetryConfig | None = None,
        summary_path: str | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize the GitHub client.

        Args:
            token: API token; write calls fail with AuthenticationError without one
            base_url: Base URL for API requests (default: https://api.github.com)
            timeout: Request timeout in seconds (default: 30.0)
            retry_config: Retry behavior for read requests (optional)
            summary_path: Job summary file (GITHUB_STEP_SUMMARY)
            http_client: Preconfigured httpx client (optional)
        """
        self._transport = HTTPTransport(
            base_url=base_url,
            token=token,
            timeout=timeout,
            retry_config=retry_config,
            client=http_client,
        )

        self.pulls = PullsClient(self._transport)
        self.reviews = ReviewsClient(self._transport)
        self.issues = IssuesClient(self._transport)
        self.summary = SummaryWriter(summary_path)

    @classmethod
    def from_config(cls, config: "Config", retry_config: RetryConfig | None = None) -> "GitHubClient":
        """Create a client from the run configuration."""
        return cls(
            token=config.github_token,
            base_url=config.api_url,
            timeout=config.platform_timeout,
            retry_config=retry_config,
            summary_path=config.summary_path,
        )

    @property
    def transport(self) -> HTTPTransport:
        """Get the underlying HTTP transport."""
        return self._transport

    def close(self) -> None:
        """Close the client and release resources."""
        self._transport.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
