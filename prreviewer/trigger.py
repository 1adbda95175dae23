"""
Trigger evaluation.

Configured gates are combined with OR: any matching gate authorizes the run.
With no gate configured the run is always authorized.
"""

from dataclasses import dataclass
from enum import Enum

from prreviewer.config import TriggerConfig
from prreviewer.types.context import PRContext


class Verdict(str, Enum):
    RUN = "run"
    SKIP = "skip"


@dataclass(frozen=True)
class TriggerDecision:
    """Outcome of trigger evaluation with the reason behind it."""

    verdict: Verdict
    reason: str

    @property
    def should_run(self) -> bool:
        return self.verdict is Verdict.RUN


def evaluate(context: PRContext, trigger: TriggerConfig) -> TriggerDecision:
    """
    Decide whether a review should run for this context.

    Pure: reads only its arguments and has no side effects.

    Args:
        context: The collected pull request snapshot
        trigger: Configured gates

    Returns:
        TriggerDecision naming the gate that matched, or why none did
    """
    if trigger.is_open:
        return TriggerDecision(Verdict.RUN, "no trigger configured")

    if trigger.phrase:
        if trigger.phrase in context.trigger_text:
            return TriggerDecision(Verdict.RUN, f"phrase {trigger.phrase!r} found in trigger text")
        if trigger.phrase in context.body:
            return TriggerDecision(Verdict.RUN, f"phrase {trigger.phrase!r} found in pull request body")

    if trigger.label and trigger.label in context.labels:
        return TriggerDecision(Verdict.RUN, f"label {trigger.label!r} present")

    if trigger.assignee and trigger.assignee in context.assignees:
        return TriggerDecision(Verdict.RUN, f"assignee {trigger.assignee!r} present")

    gates = [
        f"{name}={value!r}"
        for name, value in (
            ("phrase", trigger.phrase),
            ("label", trigger.label),
            ("assignee", trigger.assignee),
        )
        if value
    ]
    return TriggerDecision(Verdict.SKIP, "no trigger matched (" + ", ".join(gates) + ")")
