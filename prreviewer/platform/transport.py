"""
HTTP transport for the GitHub REST API.

Handles authentication headers, retry of idempotent reads, and mapping of
error responses to typed exceptions. Writes are sent exactly once.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from prreviewer.exceptions import (
    AuthenticationError,
    NotFoundError,
    PlatformError,
    RateLimitedError,
    ServerError,
    ValidationError,
)
from prreviewer.logging import log_http_request, log_http_response

_READ_METHODS = frozenset({"GET", "HEAD"})


@dataclass
class RetryConfig:
    """Configuration for automatic retry of read requests."""

    max_retries: int = 2
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 30.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class HTTPTransport:
    """
    HTTP transport layer for platform API calls.

    Handles:
    - Bearer token authentication, with an explicit error when a write is
      attempted without a token
    - Exponential backoff with jitter for retried reads
    - Retry-After header respect for rate limiting
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: API token; reads proceed anonymously without one
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            client: Preconfigured httpx client (tests inject a MockTransport here)
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "pr-reviewer",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        if client is None:
            client = httpx.Client(base_url=self.base_url, timeout=timeout)
        else:
            client.base_url = self.base_url
        client.headers.update(headers)
        self._client = client

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make an API request.

        Reads are retried on retryable errors; writes require a token and are
        never retried.

        Args:
            method: HTTP method
            path: API path (e.g., "/repos/o/r/pulls/1")
            params: Query parameters
            body: JSON request body

        Returns:
            Parsed JSON response (None for empty bodies)

        Raises:
            AuthenticationError: If a write is attempted without a token, or
                the token is rejected
            PlatformError: On other API errors
        """
        method = method.upper()
        is_read = method in _READ_METHODS
        if not is_read and not self.token:
            raise AuthenticationError(
                "MISSING_CREDENTIAL",
                f"GITHUB_TOKEN is not configured; cannot {method} {path}",
            )

        def make_request() -> httpx.Response:
            log_http_request(method, f"{self.base_url}{path}", dict(self._client.headers), body)
            started = time.monotonic()
            response = self._client.request(method, path, params=params, json=body)
            log_http_response(
                response.status_code,
                f"{self.base_url}{path}",
                (time.monotonic() - started) * 1000,
            )
            return response

        if is_read:
            return self._execute_with_retry(make_request)
        return self._execute_once(make_request)

    def _execute_once(self, request_fn: Callable[[], httpx.Response]) -> Any:
        try:
            response = request_fn()
        except httpx.RequestError as e:
            raise ServerError("CONNECTION_ERROR", str(e)) from e
        if response.status_code < 400:
            return _json_or_none(response)
        raise self._parse_error_response(response)

    def _execute_with_retry(self, request_fn: Callable[[], httpx.Response]) -> Any:
        """
        Execute a request with automatic retry on retryable errors.

        Raises:
            PlatformError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None

        for attempt in range(self.retry_config.max_retries + 1):
            try:
                response = request_fn()

                if response.status_code < 400:
                    return _json_or_none(response)

                error = self._parse_error_response(response)

                if not self._should_retry(response.status_code, attempt):
                    raise error

                last_error = error

                retry_after = response.headers.get("Retry-After")
                time.sleep(self._get_backoff_time(attempt, retry_after))

            except httpx.RequestError as e:
                # Network errors are retryable
                if attempt >= self.retry_config.max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                time.sleep(self._get_backoff_time(attempt, None))

        if isinstance(last_error, PlatformError):
            raise last_error
        raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

    def _should_retry(self, status_code: int, attempt: int) -> bool:
        if attempt >= self.retry_config.max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(self, attempt: int, retry_after: str | None) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return min(float(retry_after), self.retry_config.max_backoff)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        wait_time = base_wait + random.uniform(-jitter_range, jitter_range)

        return min(wait_time, self.retry_config.max_backoff)

    def _parse_error_response(self, response: httpx.Response) -> PlatformError:
        """Parse a GitHub error response into a typed exception."""
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        status_code = response.status_code
        message = data.get("message") or f"HTTP {status_code}"
        errors = data.get("errors")
        if errors:
            message = f"{message} ({errors})"
        request_id = response.headers.get("X-GitHub-Request-Id")

        if status_code == 401:
            return AuthenticationError(
                "CREDENTIAL_REJECTED",
                f"GITHUB_TOKEN was rejected by the platform: {message}",
                status_code,
                request_id,
            )
        elif status_code == 404:
            return NotFoundError("NOT_FOUND", message, status_code, request_id)
        elif status_code == 429 or (
            status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0"
        ):
            retry_after_str = response.headers.get("Retry-After", "60")
            try:
                retry_after = int(retry_after_str)
            except ValueError:
                retry_after = 60
            return RateLimitedError("RATE_LIMITED", message, retry_after, status_code, request_id)
        elif status_code == 403:
            return AuthenticationError(
                "FORBIDDEN",
                f"GITHUB_TOKEN lacks permission: {message}",
                status_code,
                request_id,
            )
        elif status_code >= 500:
            return ServerError("SERVER_ERROR", message, status_code, request_id)
        else:
            return ValidationError("VALIDATION_ERROR", message, status_code, request_id)


def _json_or_none(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as e:
        raise PlatformError(
            "INVALID_RESPONSE",
            f"HTTP {response.status_code} response body is not JSON",
            response.status_code,
            response.headers.get("X-GitHub-Request-Id"),
        ) from e
