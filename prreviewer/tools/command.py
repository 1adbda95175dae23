"""
Subprocess review tool.

Writes the PRContext wire JSON to the command's stdin, waits for it to exit,
and decodes stdout as a ReviewResult. stderr is kept for diagnostics.
"""

import subprocess
from pathlib import Path

from prreviewer.exceptions import ToolTransportError
from prreviewer.logging import get_logger, log_tool_invocation, mask_sensitive_data
from prreviewer.tools.base import ReviewTool
from prreviewer.types.context import PRContext
from prreviewer.types.result import ReviewResult
from prreviewer.wire import decode_result, encode_context

logger = get_logger("tool")


class CommandTool(ReviewTool):
    """Review tool run as a local process."""

    kind = "cmd"

    def __init__(
        self,
        command: list[str] | tuple[str, ...],
        workdir: str | Path | None = None,
        timeout: float = 300.0,
    ) -> None:
        """
        Initialize the command tool.

        Args:
            command: Program and arguments, executed without a shell
            workdir: Working directory for the process
            timeout: Seconds before the process is killed
        """
        if not command:
            raise ValueError("command must not be empty")
        self.command = list(command)
        self.workdir = str(workdir) if workdir else None
        self.timeout = timeout

    def invoke(self, context: PRContext) -> ReviewResult:
        """
        Run the command on the context and decode its verdict.

        Raises:
            ToolTransportError: Process could not start, timed out (and was
                killed), or exited non-zero
            ToolContractError: stdout is not a valid ReviewResult
        """
        payload = encode_context(context).encode("utf-8")
        log_tool_invocation(self.kind, self.command[0], len(payload))

        try:
            completed = subprocess.run(
                self.command,
                input=payload,
                capture_output=True,
                cwd=self.workdir,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ToolTransportError(
                f"{self.command[0]} did not exit within {self.timeout:g}s and was killed",
                code="TOOL_TIMEOUT",
                stderr=_decode(e.stderr),
            ) from e
        except OSError as e:
            raise ToolTransportError(
                f"Could not start {self.command[0]}: {e}", code="TOOL_START_FAILED"
            ) from e

        stderr = _decode(completed.stderr)
        if stderr:
            logger.debug(f"{self.command[0]} stderr:\n{mask_sensitive_data(stderr)}")

        if completed.returncode != 0:
            detail = mask_sensitive_data(stderr.strip()) if stderr.strip() else "no stderr output"
            raise ToolTransportError(
                f"{self.command[0]} exited with status {completed.returncode}: {detail}",
                code="TOOL_EXIT_STATUS",
                exit_code=completed.returncode,
                stderr=stderr,
            )

        result = decode_result(completed.stdout)
        logger.info(f"{self.command[0]} answered {result.review_decision.value} with {len(result.comments)} comment(s)")
        return result


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")
