"""Review tool interface."""

from abc import ABC, abstractmethod
from typing import Any

from prreviewer.types.context import PRContext
from prreviewer.types.result import ReviewResult


class ReviewTool(ABC):
    """
    A backend that judges a pull request.

    Every variant takes the same PRContext and returns a ReviewResult, and
    fails only with ToolTransportError (could not get an answer) or
    ToolContractError (got an answer that violates the contract).
    """

    kind: str = ""

    @abstractmethod
    def invoke(self, context: PRContext) -> ReviewResult:
        """Review the pull request described by `context`."""

    def close(self) -> None:
        """Release any resources held by the tool."""

    def __enter__(self) -> "ReviewTool":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
