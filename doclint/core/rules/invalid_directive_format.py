"""
Invalid Directive Format Rule - Malformed ``@!directive`` blocks reported by the engine.
"""

from __future__ import annotations

from doclint.core.parsers import OneLineParser
from doclint.models.rule_models import (
    ExecutionStrategy,
    RuleDescriptor,
    Severity,
    ViolationRecord,
)

RULE_ID = "Warnings/InvalidDirectiveFormat"

GENERAL = r"^\[warn\]: Invalid directive format"


def build_message(offense: ViolationRecord) -> str:
    return offense.get("message") or "InvalidDirectiveFormat detected"


RULE = RuleDescriptor(
    id=RULE_ID,
    default_severity=Severity.ERROR,
    category="line",
    strategy=ExecutionStrategy.EXTERNAL_PROCESS,
    subcommand="stats",
    extra_flags=("--compact",),
    parser=OneLineParser(
        "InvalidDirectiveFormat",
        {
            "general": GENERAL,
            "message": r"\[warn\]: (.*) in file",
            "location": r"in file `(.*)`",
            "line": r"line (\d*)",
        },
    ),
    message_builder=build_message,
    warning_pattern=GENERAL,
)
