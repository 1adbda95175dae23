"""
Tests for run orchestration.

Feature: pr-reviewer
"""

import io
import json
import sys
from pathlib import Path

import httpx
import pytest

from prreviewer.config import Config, ToolConfig, TriggerConfig
from prreviewer.exceptions import (
    CollectionError,
    PlatformError,
    PublishingError,
    ServerError,
    ToolContractError,
    ToolTransportError,
)
from prreviewer.platform import GitHubClient
from prreviewer.runner import EXIT_FAILURE, EXIT_OK, Runner, load_event, main
from prreviewer.testing import (
    MockPlatform,
    create_issue_comment_event,
    create_mock_pull_files,
    create_mock_result,
    create_pull_request_event,
)
from prreviewer.tools import ReviewTool, RemoteTool
from prreviewer.types.context import PRContext
from prreviewer.types.result import ReviewResult


class SpyTool(ReviewTool):
    """Review tool that records the contexts it is handed."""

    kind = "spy"

    def __init__(self, result: ReviewResult | None = None) -> None:
        self.result = result or create_mock_result()
        self.contexts: list[PRContext] = []

    def invoke(self, context: PRContext) -> ReviewResult:
        self.contexts.append(context)
        return self.result


def test_full_pipeline_with_deterministic_tool(mock_platform: MockPlatform) -> None:
    mock_platform.pulls.configure_list_files(response=create_mock_pull_files(3))
    out = io.StringIO()
    config = Config(channels=frozenset({"review", "summary", "stdout"}))

    outcome = Runner(config, mock_platform, stdout=out).run("pull_request", create_pull_request_event(), run_id="5")

    assert outcome.status == "published"
    assert outcome.exit_code == EXIT_OK
    assert outcome.error is None
    assert outcome.context.run_id == "5"
    assert "3 changed file(s)" in out.getvalue()
    assert mock_platform.summary.written == [outcome.result.summary_markdown]
    review = mock_platform.get_calls("reviews.create")[0]
    assert review.kwargs["event"] == "COMMENT"
    assert review.kwargs["comments"][0]["path"] == "file_000.py"


def test_label_gate_skips_without_side_effects(mock_platform: MockPlatform) -> None:
    tool = SpyTool()
    config = Config(trigger=TriggerConfig(label="needs-review"))
    event = create_pull_request_event(labels=[{"name": "bug"}])

    outcome = Runner(config, mock_platform, tool=tool).run("pull_request", event)

    assert outcome.status == "skipped"
    assert outcome.exit_code == EXIT_OK
    assert "needs-review" in outcome.decision.reason
    assert tool.contexts == []
    assert mock_platform.write_calls == []


def test_comment_phrase_triggers_run(mock_platform: MockPlatform) -> None:
    tool = SpyTool()
    config = Config(trigger=TriggerConfig(phrase="/review"))

    outcome = Runner(config, mock_platform, tool=tool).run(
        "issue_comment", create_issue_comment_event("@bot /review please")
    )

    assert outcome.status == "published"
    assert tool.contexts[0].trigger_text == "@bot /review please"
    assert mock_platform.was_called("issues.create_comment")


def test_command_tool_failure_publishes_nothing(mock_platform: MockPlatform) -> None:
    config = Config(
        tool=ToolConfig(kind="cmd", command=(sys.executable, "-c", "import sys; sys.exit(1)"), timeout=30),
    )

    outcome = Runner(config, mock_platform).run("pull_request", create_pull_request_event())

    assert outcome.status == "failed"
    assert outcome.exit_code == EXIT_FAILURE
    assert isinstance(outcome.error, ToolTransportError)
    assert outcome.error.stage == "tool"
    assert mock_platform.write_calls == []


def test_remote_contract_violation_publishes_nothing(mock_platform: MockPlatform) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={
            "summary_markdown": "x",
            "review_decision": "reject",
            "review_body": "",
            "comments": [],
        })

    tool = RemoteTool("https://review.example.com", client=httpx.Client(transport=httpx.MockTransport(handler)))

    outcome = Runner(Config(), mock_platform, tool=tool).run("pull_request", create_pull_request_event())

    assert outcome.status == "failed"
    assert isinstance(outcome.error, ToolContractError)
    assert outcome.error.field == "review_decision"
    assert mock_platform.write_calls == []


def test_collection_failure_stops_the_run(mock_platform: MockPlatform) -> None:
    tool = SpyTool()
    mock_platform.pulls.configure_list_files(error=ServerError("SERVER_ERROR", "bad gateway", 502))

    outcome = Runner(Config(), mock_platform, tool=tool).run("pull_request", create_pull_request_event())

    assert outcome.status == "failed"
    assert isinstance(outcome.error, CollectionError)
    assert str(outcome.error).startswith("[collect] PLATFORM_READ_FAILED")
    assert outcome.context is None
    assert tool.contexts == []


def test_malformed_platform_data_fails_the_run() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"status": "modified"}])

    platform = GitHubClient(
        token="ghs_" + "r" * 36,
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )
    tool = SpyTool()

    outcome = Runner(Config(), platform, tool=tool).run("pull_request", create_pull_request_event())

    assert outcome.status == "failed"
    assert outcome.exit_code == EXIT_FAILURE
    assert isinstance(outcome.error, CollectionError)
    assert outcome.error.code == "PLATFORM_READ_FAILED"
    assert isinstance(outcome.error.__cause__, PlatformError)
    assert outcome.error.__cause__.code == "INVALID_RESPONSE"
    assert tool.contexts == []


def test_unreadable_checkout_fails_the_run(tmp_path, monkeypatch, mock_platform: MockPlatform) -> None:
    (tmp_path / "file_000.py").write_text("x = 1\n")
    mock_platform.pulls.configure_list_files(response=create_mock_pull_files(1))
    config = Config(workspace=str(tmp_path), include_contents=True)

    def denied(self) -> bytes:
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "read_bytes", denied)

    outcome = Runner(config, mock_platform, tool=SpyTool()).run("pull_request", create_pull_request_event())

    assert outcome.status == "failed"
    assert isinstance(outcome.error, CollectionError)
    assert outcome.error.code == "CHECKOUT_READ_FAILED"
    assert mock_platform.write_calls == []


def test_channel_failure_fails_the_run(mock_platform: MockPlatform) -> None:
    mock_platform.issues.configure_create_comment(error=ServerError("SERVER_ERROR", "boom", 500))
    config = Config(channels=frozenset({"review", "comment"}))

    outcome = Runner(config, mock_platform, tool=SpyTool()).run("pull_request", create_pull_request_event())

    assert outcome.status == "failed"
    assert outcome.exit_code == EXIT_FAILURE
    assert isinstance(outcome.error, PublishingError)
    assert [f.channel for f in outcome.error.failures] == ["comment"]
    # The review channel still went out
    assert mock_platform.was_called("reviews.create")
    assert outcome.report is not None


class TestLoadEvent:
    def test_reads_event_file(self, tmp_path) -> None:
        path = tmp_path / "event.json"
        path.write_text(json.dumps(create_pull_request_event()))

        name, payload = load_event({"GITHUB_EVENT_NAME": "pull_request", "GITHUB_EVENT_PATH": str(path)})

        assert name == "pull_request"
        assert payload["pull_request"]["number"] == 123

    def test_missing_variables(self) -> None:
        with pytest.raises(CollectionError) as exc_info:
            load_event({})

        assert exc_info.value.code == "MISSING_EVENT"

    @pytest.mark.parametrize("content", ["not json", "[1, 2]"])
    def test_unusable_payload(self, tmp_path, content: str) -> None:
        path = tmp_path / "event.json"
        path.write_text(content)

        with pytest.raises(CollectionError):
            load_event({"GITHUB_EVENT_NAME": "pull_request", "GITHUB_EVENT_PATH": str(path)})

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(CollectionError):
            load_event({"GITHUB_EVENT_NAME": "pull_request", "GITHUB_EVENT_PATH": str(tmp_path / "nope.json")})


class TestMain:
    def test_configuration_error_exits_non_zero(self) -> None:
        assert main({"INPUT_TOOL": "carrier-pigeon"}) == EXIT_FAILURE

    def test_missing_event_exits_non_zero(self) -> None:
        assert main({}) == EXIT_FAILURE

    def test_end_to_end_from_environment(self, tmp_path, monkeypatch) -> None:
        platform = MockPlatform()
        platform.pulls.configure_list_files(response=create_mock_pull_files(2))
        monkeypatch.setattr("prreviewer.runner.GitHubClient.from_config", lambda config: platform)
        path = tmp_path / "event.json"
        path.write_text(json.dumps(create_pull_request_event()))
        environ = {
            "GITHUB_EVENT_NAME": "pull_request",
            "GITHUB_EVENT_PATH": str(path),
            "GITHUB_WORKSPACE": str(tmp_path),
            "INPUT_OUTPUTS": "review",
        }

        assert main(environ) == EXIT_OK
        assert platform.call_count("reviews.create") == 1
        assert platform.write_calls[0].args == ("octo", "widgets", 123)
