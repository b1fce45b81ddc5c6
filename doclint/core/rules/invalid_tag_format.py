"""
Invalid Tag Format Rule - Passes through the engine's "Invalid tag format" diagnostics.

    [warn]: Invalid tag format for @example in file `lib/a.rb` near line 12
"""

from __future__ import annotations

from doclint.core.parsers import OneLineParser
from doclint.models.rule_models import (
    ExecutionStrategy,
    RuleDescriptor,
    Severity,
    ViolationRecord,
)

RULE_ID = "Warnings/InvalidTagFormat"

GENERAL = r"^\[warn\]: Invalid tag format"


def build_message(offense: ViolationRecord) -> str:
    return offense.get("message") or "InvalidTagFormat detected"


RULE = RuleDescriptor(
    id=RULE_ID,
    default_severity=Severity.ERROR,
    category="line",
    strategy=ExecutionStrategy.EXTERNAL_PROCESS,
    subcommand="stats",
    extra_flags=("--compact",),
    parser=OneLineParser(
        "InvalidTagFormat",
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
