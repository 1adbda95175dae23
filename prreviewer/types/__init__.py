"""PR reviewer type definitions.

This module exports the data model shared by the collector, tools and
publisher.
"""

from prreviewer.types.context import (
    ChangedFile,
    ExtraFile,
    FileStatus,
    PRContext,
)
from prreviewer.types.result import (
    Anchor,
    Comment,
    FileAnchor,
    LineAnchor,
    ReviewDecision,
    ReviewResult,
    Side,
)

__all__ = [
    # Context snapshot
    "PRContext",
    "ChangedFile",
    "ExtraFile",
    "FileStatus",
    # Tool verdict
    "ReviewResult",
    "ReviewDecision",
    "Comment",
    "Anchor",
    "FileAnchor",
    "LineAnchor",
    "Side",
]
