"""
PR reviewer logging utilities.

Provides configurable logging for the run stages, platform HTTP traffic and
tool invocations. Ensures no credentials (tokens, Authorization headers) are
logged.
"""

import logging
import re
from typing import Any

_root_logger = logging.getLogger("prreviewer")
_http_logger = logging.getLogger("prreviewer.http")
_tool_logger = logging.getLogger("prreviewer.tool")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Bearer / token authorization values
    (re.compile(r"(Bearer|token)\s+[A-Za-z0-9_\-.=]{8,}", re.IGNORECASE), r"\1 [REDACTED]"),
    # GitHub token formats (classic, fine-grained, app installation)
    (re.compile(r"\b(ghp|gho|ghu|ghs|ghr)_[A-Za-z0-9]{20,}\b"), "[TOKEN_REDACTED]"),
    (re.compile(r"\bgithub_pat_[A-Za-z0-9_]{20,}\b"), "[TOKEN_REDACTED]"),
    # key=value / "key": "value" secrets
    (re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_DEFAULT_SENSITIVE_KEYS = {"authorization", "token", "secret", "password", "api_key"}


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    tool_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure PR reviewer logging.

    Args:
        level: Default log level for all reviewer loggers (default: INFO)
        http_level: Log level for platform HTTP logging (default: same as level)
        tool_level: Log level for tool invocation logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from prreviewer.logging import configure_logging

        # Trace every platform request
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _root_logger.setLevel(level)
    _root_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _tool_logger.setLevel(tool_level if tool_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a PR reviewer logger.

    Args:
        name: Logger name suffix (e.g., "http", "publisher"). If None, returns
            the package root logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _root_logger
    return logging.getLogger(f"prreviewer.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask credentials in free text such as tool stderr or error bodies.

    Args:
        text: Text that may contain sensitive data

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Key fragments to mask (default: authorization, token,
            secret, password, api_key)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _DEFAULT_SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """Log an HTTP request at DEBUG level with sensitive data masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(dict(headers))}")

    if body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
) -> None:
    """Log an HTTP response at DEBUG level."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _http_logger.debug(" | ".join(log_parts))


def log_tool_invocation(
    kind: str,
    target: str,
    payload_bytes: int,
) -> None:
    """
    Log a review tool invocation at DEBUG level.

    Args:
        kind: Tool variant ("mock", "remote", "cmd")
        target: Endpoint URL or program name
        payload_bytes: Size of the serialized context sent to the tool
    """
    if not _tool_logger.isEnabledFor(logging.DEBUG):
        return

    _tool_logger.debug(f"invoke {kind}: target={mask_sensitive_data(target)} | payload={payload_bytes}B")


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_tool_invocation",
]
