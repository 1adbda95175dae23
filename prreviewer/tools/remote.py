"""
Remote review tool.

Sends the PRContext wire JSON in a single HTTP request and decodes the
response body as a ReviewResult. No retries: a failed call fails the run.
"""

import time

import httpx

from prreviewer.exceptions import ToolTransportError
from prreviewer.logging import (
    get_logger,
    log_http_request,
    log_http_response,
    log_tool_invocation,
    mask_sensitive_data,
)
from prreviewer.tools.base import ReviewTool
from prreviewer.types.context import PRContext
from prreviewer.types.result import ReviewResult
from prreviewer.wire import decode_result, encode_context

logger = get_logger("tool")

_ERROR_BODY_PREVIEW = 500


class RemoteTool(ReviewTool):
    """Review tool reached over HTTP."""

    kind = "remote"

    def __init__(
        self,
        url: str,
        method: str = "POST",
        headers: dict[str, str] | None = None,
        token: str | None = None,
        timeout: float = 300.0,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize the remote tool.

        Args:
            url: Endpoint receiving the context
            method: HTTP method (default: POST)
            headers: Extra request headers
            token: Bearer token sent in the Authorization header
            timeout: Deadline for the whole call in seconds, body included
            client: Preconfigured httpx client (tests inject a MockTransport here)
        """
        self.url = url
        self.method = method.upper()
        self.timeout = timeout

        self.headers = {"Content-Type": "application/json", "Accept": "application/json"}
        self.headers.update(headers or {})
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

        self._client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def invoke(self, context: PRContext) -> ReviewResult:
        """
        Post the context and decode the verdict.

        Raises:
            ToolTransportError: Endpoint unreachable, past the deadline, or
                returned a non-2xx status
            ToolContractError: Response body is not a valid ReviewResult
        """
        payload = encode_context(context).encode("utf-8")
        log_tool_invocation(self.kind, self.url, len(payload))
        log_http_request(self.method, self.url, self.headers)

        deadline = time.monotonic() + self.timeout
        try:
            with self._client.stream(
                self.method,
                self.url,
                content=payload,
                headers=self.headers,
                timeout=self.timeout,
            ) as response:
                body = self._read_body(response, deadline)
        except httpx.TimeoutException as e:
            raise self._timeout_error() from e
        except httpx.RequestError as e:
            raise ToolTransportError(
                f"Review endpoint unreachable: {e}", code="TOOL_UNREACHABLE"
            ) from e

        log_http_response(response.status_code, self.url, _elapsed_ms(response))

        if not 200 <= response.status_code < 300:
            text = body.decode("utf-8", errors="replace")
            preview = mask_sensitive_data(text[:_ERROR_BODY_PREVIEW])
            raise ToolTransportError(
                f"Review endpoint returned HTTP {response.status_code}: {preview}",
                code="TOOL_HTTP_STATUS",
            )

        result = decode_result(body)
        logger.info(f"Remote tool answered {result.review_decision.value} with {len(result.comments)} comment(s)")
        return result

    def _read_body(self, response: httpx.Response, deadline: float) -> bytes:
        """Read the response body, giving up once the deadline has passed."""
        chunks: list[bytes] = []
        if time.monotonic() > deadline:
            raise self._timeout_error()
        for chunk in response.iter_bytes():
            chunks.append(chunk)
            if time.monotonic() > deadline:
                raise self._timeout_error()
        return b"".join(chunks)

    def _timeout_error(self) -> ToolTransportError:
        return ToolTransportError(
            f"Review endpoint did not answer within {self.timeout:g}s", code="TOOL_TIMEOUT"
        )


def _elapsed_ms(response: httpx.Response) -> float | None:
    try:
        return response.elapsed.total_seconds() * 1000
    except RuntimeError:
        # elapsed is only set once the response has been read/closed
        return None
