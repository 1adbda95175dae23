"""PR reviewer exception classes.

Every error carries the run stage it originated in so the runner can report
stage-tagged failures.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prreviewer.publisher import ChannelOutcome


class ReviewerError(Exception):
    """Base exception for all PR reviewer errors."""

    stage = "run"

    def __init__(self, code: str, message: str, stage: str | None = None) -> None:
        self.code = code
        self.message = message
        if stage is not None:
            self.stage = stage
        super().__init__(f"[{self.stage}] {code}: {message}")


class ConfigurationError(ReviewerError):
    """Raised when configuration is invalid, contradictory or missing."""

    stage = "config"

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message)


class CollectionError(ReviewerError):
    """Raised when required pull request data cannot be obtained."""

    stage = "collect"

    def __init__(self, message: str, code: str = "COLLECTION_ERROR") -> None:
        super().__init__(code, message)


class ToolError(ReviewerError):
    """Base class for review tool failures."""

    stage = "tool"


class ToolTransportError(ToolError):
    """Raised when the tool could not be reached, failed, or timed out."""

    def __init__(
        self,
        message: str,
        code: str = "TOOL_TRANSPORT_ERROR",
        exit_code: int | None = None,
        stderr: str | None = None,
    ) -> None:
        super().__init__(code, message)
        self.exit_code = exit_code
        self.stderr = stderr


class ToolContractError(ToolError):
    """Raised when tool output violates the ReviewResult contract."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__("TOOL_CONTRACT_VIOLATION", f"{field}: {message}")
        self.field = field


class PlatformError(ReviewerError):
    """Raised on hosting platform API errors."""

    stage = "platform"

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message)
        self.status_code = status_code
        self.request_id = request_id


class AuthenticationError(PlatformError):
    """Raised when the credential is missing or rejected."""

    pass


class NotFoundError(PlatformError):
    """Raised when a platform resource is not found."""

    pass


class RateLimitedError(PlatformError):
    """Raised when rate limited."""

    def __init__(
        self,
        code: str,
        message: str,
        retry_after: int,
        status_code: int | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(code, message, status_code, request_id)
        self.retry_after = retry_after


class ValidationError(PlatformError):
    """Raised when the platform rejects a request payload (4xx)."""

    pass


class ServerError(PlatformError):
    """Raised on server errors (5xx) and connection failures."""

    pass


class PublishingError(ReviewerError):
    """Raised after publishing when one or more output channels failed."""

    stage = "publish"

    def __init__(self, failures: "list[ChannelOutcome]") -> None:
        self.failures = list(failures)
        parts = [f"{outcome.channel} ({outcome.error})" for outcome in self.failures]
        super().__init__(
            "PUBLISHING_FAILED",
            f"{len(self.failures)} channel(s) failed: " + "; ".join(parts),
        )
