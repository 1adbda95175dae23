"""Deterministic in-process review tool."""

from prreviewer.tools.base import ReviewTool
from prreviewer.types.context import PRContext
from prreviewer.types.result import Comment, FileAnchor, ReviewDecision, ReviewResult


class DeterministicTool(ReviewTool):
    """
    Review tool computed from the context alone.

    No network, no subprocess, no clock: identical contexts always produce
    identical results. Useful as a smoke test of the whole pipeline and as a
    reference for what a tool's output looks like.
    """

    kind = "mock"

    def invoke(self, context: PRContext) -> ReviewResult:
        files = context.changed_files
        labels = ", ".join(context.labels) if context.labels else "(none)"

        lines = [
            f"## Review of {context.full_name}#{context.number}",
            "",
            f"**{context.title}**" if context.title else "_(untitled)_",
            "",
            f"- {len(files)} changed file(s), +{context.additions}/-{context.deletions}",
            f"- Labels: {labels}",
            f"- Base: `{context.base_ref}` ← Head: `{context.head_ref}`",
            f"- Guidelines: {'provided' if context.guidelines_b64 else 'none'}",
        ]
        if context.extra_files:
            lines.append(f"- Extra files: {len(context.extra_files)}")
        if files:
            lines += ["", "| File | Status | + | - |", "| --- | --- | --- | --- |"]
            lines += [
                f"| `{f.path}` | {f.status.value} | {f.additions} | {f.deletions} |"
                for f in files
            ]

        comments: tuple[Comment, ...] = ()
        if files:
            first = files[0]
            comments = (
                Comment(
                    path=first.path,
                    body=(
                        f"Reviewed `{first.path}` ({first.status.value}, "
                        f"+{first.additions}/-{first.deletions})."
                    ),
                    anchor=FileAnchor(),
                ),
            )

        issue_comment = None
        if context.trigger_text:
            issue_comment = (
                f"Review requested by @{context.triggered_by or 'unknown'} completed: "
                f"{len(files)} changed file(s) looked at."
            )

        return ReviewResult(
            summary_markdown="\n".join(lines) + "\n",
            review_decision=ReviewDecision.COMMENT,
            review_body=f"Automated review of {len(files)} changed file(s).",
            comments=comments,
            issue_comment=issue_comment,
        )
