"""
Duplicated Parameter Name Rule - The same parameter documented twice.

    [warn]: @param tag has duplicate parameter name: name in file `lib/a.rb` near line 7
"""

from __future__ import annotations

from doclint.core.parsers import OneLineParser
from doclint.models.rule_models import (
    ExecutionStrategy,
    RuleDescriptor,
    Severity,
    ViolationRecord,
)

RULE_ID = "Warnings/DuplicatedParameterName"

GENERAL = r"^\[warn\]: @param tag has duplicate parameter name"


def build_message(offense: ViolationRecord) -> str:
    return offense.get("message") or "DuplicatedParameterName detected"


RULE = RuleDescriptor(
    id=RULE_ID,
    default_severity=Severity.WARNING,
    category="line",
    strategy=ExecutionStrategy.EXTERNAL_PROCESS,
    subcommand="stats",
    extra_flags=("--compact",),
    parser=OneLineParser(
        "DuplicatedParameterName",
        {
            "general": GENERAL,
            "message": r"\[warn\]: (.*?) in file",
            "location": r"in file `(.*)`",
            "line": r"near line (\d*)",
        },
    ),
    message_builder=build_message,
    warning_pattern=GENERAL,
)
