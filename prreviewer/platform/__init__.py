"""GitHub platform boundary: reads for the collector, writes for the publisher."""

from prreviewer.platform.client import GitHubClient
from prreviewer.platform.issues import IssuesClient
from prreviewer.platform.pulls import PullsClient
from prreviewer.platform.reviews import ReviewsClient
from prreviewer.platform.summary import SummaryWriter
from prreviewer.platform.transport import HTTPTransport, RetryConfig

__all__ = [
    "GitHubClient",
    "HTTPTransport",
    "RetryConfig",
    "PullsClient",
    "ReviewsClient",
    "IssuesClient",
    "SummaryWriter",
]
