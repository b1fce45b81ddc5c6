"""
Unknown Parameter Name Rule - @param tags naming a parameter the method lacks.

    [warn]: @param tag has unknown parameter name: nmae in file `lib/a.rb` near line 3
"""

from __future__ import annotations

from doclint.core.parsers import OneLineParser
from doclint.models.rule_models import (
    ExecutionStrategy,
    RuleDescriptor,
    Severity,
    ViolationRecord,
)

RULE_ID = "Warnings/UnknownParameterName"

GENERAL = r"^\[warn\]: @param tag has unknown parameter name"


def build_message(offense: ViolationRecord) -> str:
    return offense.get("message") or "UnknownParameterName detected"


RULE = RuleDescriptor(
    id=RULE_ID,
    default_severity=Severity.ERROR,
    category="line",
    strategy=ExecutionStrategy.EXTERNAL_PROCESS,
    subcommand="stats",
    extra_flags=("--compact",),
    parser=OneLineParser(
        "UnknownParameterName",
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
