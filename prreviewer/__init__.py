"""PR reviewer - pull request review orchestrator."""

from prreviewer.collector import ContextCollector
from prreviewer.config import Config, ToolConfig, TriggerConfig
from prreviewer.exceptions import (
    AuthenticationError,
    CollectionError,
    ConfigurationError,
    PlatformError,
    PublishingError,
    ReviewerError,
    ToolContractError,
    ToolError,
    ToolTransportError,
)
from prreviewer.logging import configure_logging, get_logger
from prreviewer.platform import GitHubClient
from prreviewer.publisher import ChannelOutcome, PublishReport, ResultPublisher
from prreviewer.runner import Runner, RunOutcome
from prreviewer.tools import (
    CommandTool,
    DeterministicTool,
    RemoteTool,
    ReviewTool,
    build_tool,
)
from prreviewer.trigger import TriggerDecision, evaluate
from prreviewer.types import (
    ChangedFile,
    Comment,
    ExtraFile,
    FileAnchor,
    FileStatus,
    LineAnchor,
    PRContext,
    ReviewDecision,
    ReviewResult,
    Side,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Orchestration
    "Runner",
    "RunOutcome",
    "ContextCollector",
    "ResultPublisher",
    "PublishReport",
    "ChannelOutcome",
    "evaluate",
    "TriggerDecision",
    # Configuration
    "Config",
    "ToolConfig",
    "TriggerConfig",
    # Tools
    "ReviewTool",
    "DeterministicTool",
    "RemoteTool",
    "CommandTool",
    "build_tool",
    # Platform
    "GitHubClient",
    # Types
    "PRContext",
    "ChangedFile",
    "ExtraFile",
    "FileStatus",
    "ReviewResult",
    "ReviewDecision",
    "Comment",
    "FileAnchor",
    "LineAnchor",
    "Side",
    # Exceptions
    "ReviewerError",
    "ConfigurationError",
    "CollectionError",
    "ToolError",
    "ToolTransportError",
    "ToolContractError",
    "PlatformError",
    "AuthenticationError",
    "PublishingError",
    # Logging
    "configure_logging",
    "get_logger",
]
