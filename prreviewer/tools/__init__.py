"""Review tool adapters and the single point where one is selected."""

from typing import TYPE_CHECKING

from prreviewer.exceptions import ConfigurationError
from prreviewer.tools.base import ReviewTool
from prreviewer.tools.command import CommandTool
from prreviewer.tools.mock import DeterministicTool
from prreviewer.tools.remote import RemoteTool

if TYPE_CHECKING:
    from prreviewer.config import Config


def build_tool(config: "Config") -> ReviewTool:
    """
    Instantiate the review tool the configuration selects.

    Raises:
        ConfigurationError: If the tool kind is unknown or its parameters are missing
    """
    tool = config.tool
    if tool.kind == "mock":
        return DeterministicTool()
    if tool.kind == "remote":
        if not tool.url:
            raise ConfigurationError("Remote tool requires a URL")
        return RemoteTool(
            url=tool.url,
            method=tool.method,
            headers=dict(tool.headers),
            token=tool.token,
            timeout=tool.timeout,
        )
    if tool.kind == "cmd":
        if not tool.command:
            raise ConfigurationError("Command tool requires a command")
        return CommandTool(command=tool.command, workdir=tool.workdir, timeout=tool.timeout)
    raise ConfigurationError(f"Invalid tool: {tool.kind!r}")


__all__ = [
    "ReviewTool",
    "DeterministicTool",
    "RemoteTool",
    "CommandTool",
    "build_tool",
]
