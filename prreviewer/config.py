"""
Run configuration.

A Config is built once per run, validated, and threaded explicitly into the
collector, trigger evaluator, tool selection and publisher. Nothing downstream
reads the process environment.
"""

import os
import shlex
from collections.abc import Mapping
from dataclasses import dataclass, field
from urllib.parse import urlparse

from prreviewer.exceptions import ConfigurationError

TOOL_KINDS = ("mock", "remote", "cmd")
CHANNELS = ("review", "comment", "summary", "stdout")
DEFAULT_CHANNELS = ("review", "comment", "summary")


@dataclass(frozen=True)
class TriggerConfig:
    """Gates deciding whether a run proceeds. Unset gates are ignored."""

    phrase: str | None = None
    label: str | None = None
    assignee: str | None = None

    @property
    def is_open(self) -> bool:
        """True when no gate is configured."""
        return not (self.phrase or self.label or self.assignee)


@dataclass(frozen=True)
class ToolConfig:
    """Review tool selection and its transport parameters."""

    kind: str = "mock"
    url: str | None = None
    method: str = "POST"
    headers: tuple[tuple[str, str], ...] = ()
    token: str | None = None
    command: tuple[str, ...] = ()
    workdir: str | None = None
    timeout: float = 300.0


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration for one review run.

    Example:
        ```python
        from prreviewer.config import Config, ToolConfig, TriggerConfig

        config = Config(
            trigger=TriggerConfig(phrase="/review"),
            tool=ToolConfig(kind="remote", url="https://review.example.com/v1/review"),
            channels=frozenset({"review", "summary"}),
        )
        config.validate()
        ```
    """

    DEFAULT_API_URL = "https://api.github.com"

    github_token: str | None = None
    api_url: str = DEFAULT_API_URL
    trigger: TriggerConfig = field(default_factory=TriggerConfig)
    include_contents: bool = False
    max_files: int = 300
    max_file_bytes: int = 100_000
    guidelines_path: str | None = None
    extra_globs: tuple[str, ...] = ()
    tool: ToolConfig = field(default_factory=ToolConfig)
    channels: frozenset[str] = frozenset(DEFAULT_CHANNELS)
    max_comments: int = 50
    stdout_full_result: bool = False
    summary_path: str | None = None
    workspace: str = "."
    platform_timeout: float = 30.0

    def validate(self) -> "Config":
        """
        Check the configuration for malformed or contradictory settings.

        Returns:
            self, for chaining

        Raises:
            ConfigurationError: On the first problem found
        """
        if self.tool.kind not in TOOL_KINDS:
            raise ConfigurationError(
                f"Invalid tool: {self.tool.kind!r}. Must be one of: {', '.join(TOOL_KINDS)}"
            )
        if self.tool.kind == "remote":
            if not self.tool.url:
                raise ConfigurationError("Remote tool requires a URL (INPUT_TOOL_URL)")
            if urlparse(self.tool.url).scheme not in ("http", "https"):
                raise ConfigurationError(f"Remote tool URL must be http(s): {self.tool.url!r}")
            if not self.tool.method.isalpha():
                raise ConfigurationError(f"Invalid HTTP method: {self.tool.method!r}")
        if self.tool.kind == "cmd" and not self.tool.command:
            raise ConfigurationError("Command tool requires a command (INPUT_TOOL_COMMAND)")
        if self.tool.timeout <= 0:
            raise ConfigurationError("Tool timeout must be positive")
        if self.platform_timeout <= 0:
            raise ConfigurationError("Platform timeout must be positive")

        if self.max_files <= 0:
            raise ConfigurationError("max_files must be positive")
        if self.max_file_bytes <= 0:
            raise ConfigurationError("max_file_bytes must be positive")
        if self.max_comments < 0:
            raise ConfigurationError("max_comments must not be negative")
        for pattern in self.extra_globs:
            if pattern.startswith("/") or ".." in pattern.split("/"):
                raise ConfigurationError(
                    f"Extra file pattern must be relative to the workspace: {pattern!r}"
                )

        unknown = sorted(set(self.channels) - set(CHANNELS))
        if unknown:
            raise ConfigurationError(
                f"Unknown output channel(s): {', '.join(unknown)}. "
                f"Must be among: {', '.join(CHANNELS)}"
            )
        return self

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Config":
        """
        Create a configuration from GitHub Actions environment variables.

        Action inputs arrive as INPUT_<NAME>; runner context as GITHUB_<NAME>.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            Validated Config

        Raises:
            ConfigurationError: If any value is malformed or contradictory
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            value = env.get(f"INPUT_{name}")
            if value is None or not value.strip():
                return None
            return value.strip()

        command: tuple[str, ...] = ()
        raw_command = get("TOOL_COMMAND")
        if raw_command:
            try:
                command = tuple(shlex.split(raw_command))
            except ValueError as e:
                raise ConfigurationError(f"Invalid INPUT_TOOL_COMMAND: {e}") from e

        tool = ToolConfig(
            kind=(get("TOOL") or "mock").lower(),
            url=get("TOOL_URL"),
            method=(get("TOOL_METHOD") or "POST").upper(),
            headers=_parse_headers(get("TOOL_HEADERS")),
            token=get("TOOL_TOKEN"),
            command=command,
            workdir=get("TOOL_WORKDIR"),
            timeout=_parse_float("TOOL_TIMEOUT", get("TOOL_TIMEOUT"), 300.0),
        )

        trigger = TriggerConfig(
            phrase=get("TRIGGER_PHRASE"),
            label=get("TRIGGER_LABEL"),
            assignee=get("TRIGGER_ASSIGNEE"),
        )

        outputs = get("OUTPUTS")
        channels = frozenset(_split_list(outputs)) if outputs else frozenset(DEFAULT_CHANNELS)

        token = get("GITHUB_TOKEN") or env.get("GITHUB_TOKEN") or None

        config = cls(
            github_token=token,
            api_url=env.get("GITHUB_API_URL") or cls.DEFAULT_API_URL,
            trigger=trigger,
            include_contents=_parse_bool("INCLUDE_CONTENTS", get("INCLUDE_CONTENTS")),
            max_files=_parse_int("MAX_FILES", get("MAX_FILES"), 300),
            max_file_bytes=_parse_int("MAX_FILE_BYTES", get("MAX_FILE_BYTES"), 100_000),
            guidelines_path=get("GUIDELINES_FILE"),
            extra_globs=tuple(_split_list(get("EXTRA_FILES"))),
            tool=tool,
            channels=channels,
            max_comments=_parse_int("MAX_COMMENTS", get("MAX_COMMENTS"), 50),
            stdout_full_result=_parse_bool("STDOUT_FULL_RESULT", get("STDOUT_FULL_RESULT")),
            summary_path=env.get("GITHUB_STEP_SUMMARY") or None,
            workspace=env.get("GITHUB_WORKSPACE") or ".",
        )
        return config.validate()


def _split_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    items = raw.replace(",", "\n").splitlines()
    return [item.strip() for item in items if item.strip()]


def _parse_headers(raw: str | None) -> tuple[tuple[str, str], ...]:
    if not raw:
        return ()
    headers = []
    for line in raw.splitlines():
        if not line.strip():
            continue
        name, sep, value = line.partition(":")
        if not sep or not name.strip():
            raise ConfigurationError(f"Invalid header line in INPUT_TOOL_HEADERS: {line!r}")
        headers.append((name.strip(), value.strip()))
    return tuple(headers)


def _parse_bool(name: str, raw: str | None) -> bool:
    if raw is None:
        return False
    value = raw.lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"Invalid boolean for INPUT_{name}: {raw!r}")


def _parse_int(name: str, raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid integer for INPUT_{name}: {raw!r}") from None


def _parse_float(name: str, raw: str | None, default: float) -> float:
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid number for INPUT_{name}: {raw!r}") from None
