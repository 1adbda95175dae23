"""
Context collector.

Builds the one PRContext a run works from, out of the triggering event
payload, the platform API and the local checkout. File-count and byte caps
are enforced on the candidate set: a file's contents are embedded whole or
not at all.
"""

import base64
from pathlib import Path
from typing import TYPE_CHECKING, Any

from prreviewer.exceptions import CollectionError, PlatformError
from prreviewer.logging import get_logger
from prreviewer.platform.pulls import parse_pull_request
from prreviewer.types.context import ChangedFile, ExtraFile, FileStatus, PRContext
from prreviewer.types.platform import PullFile, PullRequest

if TYPE_CHECKING:
    from prreviewer.config import Config
    from prreviewer.platform.client import GitHubClient

logger = get_logger("collector")

PULL_REQUEST_EVENTS = ("pull_request", "pull_request_target")
COMMENT_EVENTS = ("issue_comment", "pull_request_review_comment", "pull_request_review")

_STATUS_MAP = {
    "added": FileStatus.ADDED,
    "copied": FileStatus.ADDED,
    "modified": FileStatus.MODIFIED,
    "changed": FileStatus.MODIFIED,
    "unchanged": FileStatus.MODIFIED,
    "removed": FileStatus.REMOVED,
    "renamed": FileStatus.RENAMED,
}


class ContextCollector:
    """
    Produces a bounded, deterministic PRContext for one event.

    Example:
        ```python
        collector = ContextCollector(config, GitHubClient.from_config(config))
        context = collector.collect("pull_request", event_payload, run_id="42")
        ```
    """

    def __init__(self, config: "Config", platform: "GitHubClient") -> None:
        self.config = config
        self.platform = platform
        self.workspace = Path(config.workspace).resolve()

    def collect(self, event_name: str, payload: dict[str, Any], run_id: str = "") -> PRContext:
        """
        Build the context snapshot for a triggering event.

        Args:
            event_name: Platform event name (e.g., "pull_request", "issue_comment")
            payload: The event's JSON payload
            run_id: Identifier of this run, copied into the context

        Returns:
            The PRContext for the pull request the event refers to

        Raises:
            CollectionError: If the event is unsupported or the pull request
                number, refs or repository cannot be obtained, the platform
                returns malformed data, or a checkout file cannot be read
        """
        owner, repo = _repository(payload)
        pr, trigger_text = self._pull_request(event_name, payload, owner, repo)

        if not pr.base_ref or not pr.head_ref:
            raise CollectionError(
                f"Pull request #{pr.number} is missing its base/head refs", code="MISSING_REFS"
            )

        changed_files = self._changed_files(owner, repo, pr.number)

        context = PRContext(
            owner=owner,
            repo=repo,
            number=pr.number,
            title=pr.title,
            body=pr.body or "",
            base_ref=pr.base_ref,
            head_ref=pr.head_ref,
            head_sha=pr.head_sha,
            user_login=pr.user_login,
            labels=_unique(pr.labels),
            assignees=_unique(pr.assignees),
            changed_files=changed_files,
            guidelines_b64=self._guidelines(),
            extra_files=self._extra_files(),
            triggered_by=(payload.get("sender") or {}).get("login") or "",
            event_name=event_name,
            trigger_text=trigger_text,
            run_id=run_id,
        )
        logger.info(
            f"Collected {context.full_name}#{context.number}: "
            f"{len(context.changed_files)} file(s), {len(context.extra_files)} extra file(s)"
        )
        return context

    def _pull_request(
        self, event_name: str, payload: dict[str, Any], owner: str, repo: str
    ) -> tuple[PullRequest, str]:
        if event_name in PULL_REQUEST_EVENTS:
            return _parse_event_pull(payload), ""

        if event_name == "issue_comment":
            issue = payload.get("issue") or {}
            if not issue.get("pull_request"):
                raise CollectionError(
                    "issue_comment event is not on a pull request", code="NOT_A_PULL_REQUEST"
                )
            number = issue.get("number")
            if not isinstance(number, int):
                raise CollectionError("Event payload has no pull request number", code="MISSING_NUMBER")
            try:
                pr = self.platform.pulls.get(owner, repo, number)
            except PlatformError as e:
                raise CollectionError(
                    f"Could not fetch pull request #{number}: {e.message}", code="PLATFORM_READ_FAILED"
                ) from e
            return pr, (payload.get("comment") or {}).get("body") or ""

        if event_name == "pull_request_review_comment":
            return _parse_event_pull(payload), (payload.get("comment") or {}).get("body") or ""

        if event_name == "pull_request_review":
            return _parse_event_pull(payload), (payload.get("review") or {}).get("body") or ""

        raise CollectionError(f"Unsupported event: {event_name!r}", code="UNSUPPORTED_EVENT")

    def _changed_files(self, owner: str, repo: str, number: int) -> tuple[ChangedFile, ...]:
        cap = self.config.max_files
        try:
            # One extra entry tells us whether the listing was truncated
            listing = self.platform.pulls.list_files(owner, repo, number, limit=cap + 1)
        except PlatformError as e:
            raise CollectionError(
                f"Could not list files of pull request #{number}: {e.message}",
                code="PLATFORM_READ_FAILED",
            ) from e

        if len(listing) > cap:
            logger.warning(f"Pull request has more than {cap} changed files; keeping the first {cap}")
            listing = listing[:cap]

        return tuple(self._changed_file(item) for item in listing)

    def _changed_file(self, item: PullFile) -> ChangedFile:
        status = _STATUS_MAP.get(item.status, FileStatus.MODIFIED)
        contents_b64 = None
        omitted = False
        if self.config.include_contents and status is not FileStatus.REMOVED:
            contents_b64 = self._read_b64(item.filename)
            omitted = contents_b64 is None
            if omitted:
                logger.info(f"Omitting contents of {item.filename} (missing or over {self.config.max_file_bytes} bytes)")

        return ChangedFile(
            path=item.filename,
            status=status,
            additions=item.additions,
            deletions=item.deletions,
            patch=item.patch,
            blob_url=item.blob_url,
            raw_url=item.raw_url,
            contents_b64=contents_b64,
            contents_omitted=omitted,
        )

    def _guidelines(self) -> str | None:
        path = self.config.guidelines_path
        if not path:
            return None
        encoded = self._read_b64(path)
        if encoded is None:
            logger.warning(f"Guidelines file {path} is missing or over {self.config.max_file_bytes} bytes; skipping")
        return encoded

    def _extra_files(self) -> tuple[ExtraFile, ...]:
        seen: set[str] = set()
        extras: list[ExtraFile] = []
        for pattern in self.config.extra_globs:
            for match in sorted(self.workspace.glob(pattern)):
                relative = self._relative(match)
                if relative is None or relative in seen or not match.is_file():
                    continue
                seen.add(relative)
                encoded = self._read_b64(relative)
                if encoded is None:
                    logger.info(f"Skipping extra file {relative} (over {self.config.max_file_bytes} bytes)")
                    continue
                extras.append(ExtraFile(path=relative, contents_b64=encoded))
        return tuple(extras)

    def _read_b64(self, relative_path: str) -> str | None:
        """Read a checkout file whole, or return None when absent or too large."""
        candidate = (self.workspace / relative_path).resolve()
        if self._relative(candidate) is None or not candidate.is_file():
            return None
        try:
            if candidate.stat().st_size > self.config.max_file_bytes:
                return None
            data = candidate.read_bytes()
        except OSError as e:
            raise CollectionError(
                f"Could not read {relative_path} from the checkout: {e}", code="CHECKOUT_READ_FAILED"
            ) from e
        return base64.b64encode(data).decode("ascii")

    def _relative(self, path: Path) -> str | None:
        """Workspace-relative POSIX path, or None for paths outside the workspace."""
        try:
            return path.resolve().relative_to(self.workspace).as_posix()
        except ValueError:
            return None


def _repository(payload: dict[str, Any]) -> tuple[str, str]:
    repository = payload.get("repository") or {}
    owner = (repository.get("owner") or {}).get("login")
    name = repository.get("name")
    if not owner or not name:
        raise CollectionError("Event payload has no repository owner/name", code="MISSING_REPOSITORY")
    return owner, name


def _parse_event_pull(payload: dict[str, Any]) -> PullRequest:
    data = payload.get("pull_request")
    if not isinstance(data, dict) or not isinstance(data.get("number"), int):
        raise CollectionError("Event payload has no pull request number", code="MISSING_NUMBER")
    try:
        return parse_pull_request(data)
    except PlatformError as e:
        raise CollectionError(
            f"Event payload pull request is malformed: {e.message}", code="INVALID_EVENT"
        ) from e


def _unique(values: list[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))
