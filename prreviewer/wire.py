"""
JSON wire codec for the tool contract.

PRContext travels to the tool, ReviewResult travels back. Encoding is
deterministic (sorted keys, compact separators) so a fixed context always
serializes to the same bytes. Decoding is strict: every violation raises
ToolContractError naming the offending field.
"""

import json
from typing import Any

from prreviewer.exceptions import ToolContractError
from prreviewer.types.context import ChangedFile, ExtraFile, FileStatus, PRContext
from prreviewer.types.result import (
    Comment,
    FileAnchor,
    LineAnchor,
    ReviewDecision,
    ReviewResult,
    Side,
)


def dumps(document: dict[str, Any], indent: int | None = None) -> str:
    """Serialize a wire document deterministically."""
    if indent is not None:
        return json.dumps(document, sort_keys=True, indent=indent, ensure_ascii=False)
    return json.dumps(document, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


# ============================================================================
# PRContext
# ============================================================================


def context_to_dict(context: PRContext) -> dict[str, Any]:
    """Convert a PRContext to its wire object."""
    data: dict[str, Any] = {
        "owner": context.owner,
        "repo": context.repo,
        "number": context.number,
        "title": context.title,
        "body": context.body,
        "base_ref": context.base_ref,
        "head_ref": context.head_ref,
        "head_sha": context.head_sha,
        "user_login": context.user_login,
        "labels": list(context.labels),
        "assignees": list(context.assignees),
        "changed_files": [_changed_file_to_dict(f) for f in context.changed_files],
        "triggered_by": context.triggered_by,
        "event_name": context.event_name,
        "trigger_text": context.trigger_text,
        "run_id": context.run_id,
    }
    if context.guidelines_b64 is not None:
        data["guidelines_b64"] = context.guidelines_b64
    if context.extra_files:
        data["extra_files"] = [
            {"path": extra.path, "contents_b64": extra.contents_b64}
            for extra in context.extra_files
        ]
    return data


def _changed_file_to_dict(changed: ChangedFile) -> dict[str, Any]:
    data: dict[str, Any] = {
        "path": changed.path,
        "status": changed.status.value,
        "patch": changed.patch,
        "additions": changed.additions,
        "deletions": changed.deletions,
        "blob_url": changed.blob_url,
        "raw_url": changed.raw_url,
    }
    if changed.contents_b64 is not None:
        data["contents_b64"] = changed.contents_b64
    if changed.contents_omitted:
        data["contents_omitted"] = True
    return data


def encode_context(context: PRContext) -> str:
    """Serialize a PRContext to its wire JSON."""
    return dumps(context_to_dict(context))


def context_from_dict(data: Any) -> PRContext:
    """
    Rebuild a PRContext from its wire object.

    Raises:
        ToolContractError: If a field is missing or has the wrong type
    """
    obj = _require_object(data, "context")
    files = _require_list(obj, "changed_files", "changed_files")
    extras = obj.get("extra_files") or []
    if not isinstance(extras, list):
        raise ToolContractError("extra_files", "must be an array")

    return PRContext(
        owner=_require_str(obj, "owner"),
        repo=_require_str(obj, "repo"),
        number=_require_int(obj, "number"),
        title=_require_str(obj, "title"),
        body=_optional_str(obj, "body") or "",
        base_ref=_require_str(obj, "base_ref"),
        head_ref=_require_str(obj, "head_ref"),
        head_sha=_optional_str(obj, "head_sha") or "",
        user_login=_optional_str(obj, "user_login") or "",
        labels=tuple(_require_str_list(obj, "labels")),
        assignees=tuple(_require_str_list(obj, "assignees")),
        changed_files=tuple(
            _changed_file_from_dict(item, f"changed_files[{i}]")
            for i, item in enumerate(files)
        ),
        guidelines_b64=_optional_str(obj, "guidelines_b64"),
        extra_files=tuple(
            ExtraFile(
                path=_require_str(_require_object(item, f"extra_files[{i}]"), "path", f"extra_files[{i}]"),
                contents_b64=_require_str(item, "contents_b64", f"extra_files[{i}]"),
            )
            for i, item in enumerate(extras)
        ),
        triggered_by=_optional_str(obj, "triggered_by") or "",
        event_name=_optional_str(obj, "event_name") or "",
        trigger_text=_optional_str(obj, "trigger_text") or "",
        run_id=_optional_str(obj, "run_id") or "",
    )


def _changed_file_from_dict(data: Any, where: str) -> ChangedFile:
    obj = _require_object(data, where)
    status = _require_str(obj, "status", where)
    try:
        file_status = FileStatus(status)
    except ValueError:
        raise ToolContractError(f"{where}.status", f"unknown status {status!r}") from None
    return ChangedFile(
        path=_require_str(obj, "path", where),
        status=file_status,
        additions=_optional_int(obj, "additions", where) or 0,
        deletions=_optional_int(obj, "deletions", where) or 0,
        patch=_optional_str(obj, "patch", where),
        blob_url=_optional_str(obj, "blob_url", where),
        raw_url=_optional_str(obj, "raw_url", where),
        contents_b64=_optional_str(obj, "contents_b64", where),
        contents_omitted=bool(obj.get("contents_omitted", False)),
    )


def decode_context(text: str | bytes) -> PRContext:
    """Parse wire JSON into a PRContext."""
    return context_from_dict(_loads(text))


# ============================================================================
# ReviewResult
# ============================================================================


def result_to_dict(result: ReviewResult) -> dict[str, Any]:
    """Convert a ReviewResult to its wire object."""
    data: dict[str, Any] = {
        "summary_markdown": result.summary_markdown,
        "review_decision": result.review_decision.value,
        "review_body": result.review_body,
        "comments": [_comment_to_dict(c) for c in result.comments],
    }
    if result.issue_comment is not None:
        data["issue_comment"] = result.issue_comment
    return data


def _comment_to_dict(comment: Comment) -> dict[str, Any]:
    data: dict[str, Any] = {"path": comment.path, "body": comment.body}
    anchor = comment.anchor
    if isinstance(anchor, FileAnchor):
        data["subject_type"] = "file"
        return data
    data["line"] = anchor.line
    data["side"] = anchor.side.value
    if anchor.start_line is not None:
        data["start_line"] = anchor.start_line
    if anchor.start_side is not None:
        data["start_side"] = anchor.start_side.value
    return data


def encode_result(result: ReviewResult, indent: int | None = None) -> str:
    """Serialize a ReviewResult to its wire JSON."""
    return dumps(result_to_dict(result), indent=indent)


def result_from_dict(data: Any) -> ReviewResult:
    """
    Validate a tool response object and build a ReviewResult.

    Raises:
        ToolContractError: Naming the first field that violates the contract
    """
    obj = _require_object(data, "result")

    decision_raw = _require_str(obj, "review_decision")
    try:
        decision = ReviewDecision(decision_raw)
    except ValueError:
        allowed = ", ".join(d.value for d in ReviewDecision)
        raise ToolContractError(
            "review_decision", f"{decision_raw!r} is not one of: {allowed}"
        ) from None

    comments_raw = obj.get("comments")
    if comments_raw is None:
        comments_raw = []
    elif not isinstance(comments_raw, list):
        raise ToolContractError("comments", "must be an array")

    return ReviewResult(
        summary_markdown=_require_str(obj, "summary_markdown"),
        review_decision=decision,
        review_body=_require_str(obj, "review_body"),
        comments=tuple(
            _comment_from_dict(item, f"comments[{i}]")
            for i, item in enumerate(comments_raw)
        ),
        issue_comment=_optional_str(obj, "issue_comment"),
    )


def _comment_from_dict(data: Any, where: str) -> Comment:
    obj = _require_object(data, where)
    path = _require_str(obj, "path", where)
    if not path:
        raise ToolContractError(f"{where}.path", "must not be empty")
    body = _require_str(obj, "body", where)

    subject_type = obj.get("subject_type")
    line_keys = [k for k in ("line", "side", "start_line", "start_side") if obj.get(k) is not None]

    if subject_type == "file":
        if line_keys:
            raise ToolContractError(
                f"{where}.{line_keys[0]}",
                "file-level comment must not carry a line anchor",
            )
        return Comment(path=path, body=body, anchor=FileAnchor())

    if subject_type not in (None, "line"):
        raise ToolContractError(f"{where}.subject_type", f"unknown subject type {subject_type!r}")

    if obj.get("line") is None:
        raise ToolContractError(
            f"{where}.line",
            "comment must be file-level (subject_type=file) or carry a line",
        )
    line = _require_positive_int(obj, "line", where)
    side = _parse_side(obj.get("side"), f"{where}.side") or Side.RIGHT

    start_line = None
    if obj.get("start_line") is not None:
        start_line = _require_positive_int(obj, "start_line", where)
        if start_line > line:
            raise ToolContractError(f"{where}.start_line", "must not be greater than line")
    start_side = _parse_side(obj.get("start_side"), f"{where}.start_side")
    if start_side is not None and start_line is None:
        raise ToolContractError(f"{where}.start_side", "requires start_line")

    return Comment(
        path=path,
        body=body,
        anchor=LineAnchor(line=line, side=side, start_line=start_line, start_side=start_side),
    )


def _parse_side(value: Any, where: str) -> Side | None:
    if value is None:
        return None
    try:
        return Side(value)
    except ValueError:
        raise ToolContractError(where, f"{value!r} is not one of: LEFT, RIGHT") from None


def decode_result(text: str | bytes) -> ReviewResult:
    """Parse a tool's JSON response into a ReviewResult."""
    return result_from_dict(_loads(text))


# ============================================================================
# Field helpers
# ============================================================================


def _loads(text: str | bytes) -> Any:
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ToolContractError("<body>", f"not valid UTF-8: {e}") from e
    if not text.strip():
        raise ToolContractError("<body>", "empty response")
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ToolContractError("<body>", f"invalid JSON: {e}") from e


def _qualify(where: str | None, key: str) -> str:
    return f"{where}.{key}" if where else key


def _require_object(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ToolContractError(where, "must be a JSON object")
    return value


def _require_str(obj: dict[str, Any], key: str, where: str | None = None) -> str:
    value = obj.get(key)
    if value is None:
        raise ToolContractError(_qualify(where, key), "is required")
    if not isinstance(value, str):
        raise ToolContractError(_qualify(where, key), "must be a string")
    return value


def _optional_str(obj: dict[str, Any], key: str, where: str | None = None) -> str | None:
    value = obj.get(key)
    if value is not None and not isinstance(value, str):
        raise ToolContractError(_qualify(where, key), "must be a string")
    return value


def _require_int(obj: dict[str, Any], key: str, where: str | None = None) -> int:
    value = obj.get(key)
    if value is None:
        raise ToolContractError(_qualify(where, key), "is required")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ToolContractError(_qualify(where, key), "must be an integer")
    return value


def _optional_int(obj: dict[str, Any], key: str, where: str | None = None) -> int | None:
    if obj.get(key) is None:
        return None
    return _require_int(obj, key, where)


def _require_positive_int(obj: dict[str, Any], key: str, where: str | None = None) -> int:
    value = _require_int(obj, key, where)
    if value < 1:
        raise ToolContractError(_qualify(where, key), "must be a positive integer")
    return value


def _require_list(obj: dict[str, Any], key: str, where: str) -> list[Any]:
    value = obj.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ToolContractError(where, "must be an array")
    return value


def _require_str_list(obj: dict[str, Any], key: str) -> list[str]:
    values = _require_list(obj, key, key)
    for i, value in enumerate(values):
        if not isinstance(value, str):
            raise ToolContractError(f"{key}[{i}]", "must be a string")
    return values
