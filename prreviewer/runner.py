"""
Review run orchestration.

Collect → evaluate trigger → invoke tool → publish. Any error between stages
ends the run; only the publisher tolerates partial failure, and even then the
run concludes with a failure status.
"""

import json
import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TextIO

from prreviewer.collector import ContextCollector
from prreviewer.config import Config
from prreviewer.exceptions import CollectionError, PublishingError, ReviewerError
from prreviewer.logging import configure_logging, get_logger
from prreviewer.platform.client import GitHubClient
from prreviewer.publisher import PublishReport, ResultPublisher
from prreviewer.tools import ReviewTool, build_tool
from prreviewer.trigger import evaluate
from prreviewer.types.context import PRContext
from prreviewer.types.result import ReviewResult

if TYPE_CHECKING:
    from prreviewer.trigger import TriggerDecision

logger = get_logger("runner")

EXIT_OK = 0
EXIT_FAILURE = 1


@dataclass
class RunOutcome:
    """What a run did and how it ended."""

    status: str  # "published", "skipped", "failed"
    exit_code: int
    context: PRContext | None = None
    decision: "TriggerDecision | None" = None
    result: ReviewResult | None = None
    report: PublishReport | None = None
    error: ReviewerError | None = None


class Runner:
    """
    Runs one review for one pull request event.

    Example:
        ```python
        config = Config.from_env()
        with GitHubClient.from_config(config) as platform:
            outcome = Runner(config, platform).run("pull_request", payload, run_id="7")
        sys.exit(outcome.exit_code)
        ```
    """

    def __init__(
        self,
        config: Config,
        platform: GitHubClient,
        tool: ReviewTool | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        """
        Initialize the runner.

        Args:
            config: Validated run configuration
            platform: Platform client for reads and writes
            tool: Review tool to use instead of the configured one
            stdout: Stream for the stdout channel (default: sys.stdout)
        """
        self.config = config
        self.platform = platform
        self.tool = tool
        self.stdout = stdout

    def run(self, event_name: str, payload: dict[str, Any], run_id: str = "") -> RunOutcome:
        """Execute the run and return its outcome; errors are logged, not raised."""
        logger.info(f"Collecting context for {event_name} event")
        try:
            context = ContextCollector(self.config, self.platform).collect(event_name, payload, run_id)
        except ReviewerError as e:
            return self._fail(e)

        decision = evaluate(context, self.config.trigger)
        if not decision.should_run:
            logger.info(f"Skipping review of #{context.number}: {decision.reason}")
            return RunOutcome("skipped", EXIT_OK, context=context, decision=decision)
        logger.info(f"Reviewing #{context.number}: {decision.reason}")

        try:
            result = self._invoke(context)
        except ReviewerError as e:
            return self._fail(e, context=context, decision=decision)

        publisher = ResultPublisher(self.config, self.platform, stdout=self.stdout)
        report = publisher.publish(context, result)
        if report.failures:
            return self._fail(
                PublishingError(report.failures),
                context=context,
                decision=decision,
                result=result,
                report=report,
            )

        logger.info(f"Published review of #{context.number} to {len(report.outcomes)} channel(s)")
        return RunOutcome(
            "published",
            EXIT_OK,
            context=context,
            decision=decision,
            result=result,
            report=report,
        )

    def _invoke(self, context: PRContext) -> ReviewResult:
        if self.tool is not None:
            return self.tool.invoke(context)
        with build_tool(self.config) as tool:
            logger.info(f"Invoking {tool.kind} review tool")
            return tool.invoke(context)

    def _fail(self, error: ReviewerError, **fields: Any) -> RunOutcome:
        logger.error(f"Run failed at stage {error.stage}: {error}")
        return RunOutcome("failed", EXIT_FAILURE, error=error, **fields)


def load_event(environ: Mapping[str, str]) -> tuple[str, dict[str, Any]]:
    """
    Read the triggering event name and payload from the runner environment.

    Raises:
        CollectionError: If the event name or payload file is missing or unreadable
    """
    event_name = environ.get("GITHUB_EVENT_NAME")
    event_path = environ.get("GITHUB_EVENT_PATH")
    if not event_name or not event_path:
        raise CollectionError("GITHUB_EVENT_NAME and GITHUB_EVENT_PATH must be set", code="MISSING_EVENT")
    try:
        with open(event_path, encoding="utf-8") as fh:
            payload = json.load(fh)
    except (OSError, ValueError) as e:
        raise CollectionError(f"Could not read event payload {event_path}: {e}", code="MISSING_EVENT") from e
    if not isinstance(payload, dict):
        raise CollectionError(f"Event payload {event_path} is not a JSON object", code="MISSING_EVENT")
    return event_name, payload


def main(environ: Mapping[str, str] | None = None) -> int:
    """Console entry point: run one review from the GitHub Actions environment."""
    env = os.environ if environ is None else environ
    configure_logging(level=logging.DEBUG if env.get("RUNNER_DEBUG") == "1" else logging.INFO)

    try:
        config = Config.from_env(env)
        event_name, payload = load_event(env)
    except ReviewerError as e:
        logger.error(f"Run failed at stage {e.stage}: {e}")
        return EXIT_FAILURE

    with GitHubClient.from_config(config) as platform:
        outcome = Runner(config, platform).run(event_name, payload, run_id=env.get("GITHUB_RUN_ID", ""))
    return outcome.exit_code


if __name__ == "__main__":
    sys.exit(main())
