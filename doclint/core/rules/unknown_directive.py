"""
Unknown Directive Rule - Passes through "Unknown directive" diagnostics.

    [warn]: Unknown directive @!mehtod in file `lib/engine.rb` near line 12
"""

from __future__ import annotations

import re

from doclint.core.parsers import OneLineParser
from doclint.core.tag_catalog import known_directives, suggest
from doclint.models.rule_models import (
    ExecutionStrategy,
    RuleDescriptor,
    Severity,
    ViolationRecord,
)

RULE_ID = "Warnings/UnknownDirective"

GENERAL = r"^\[warn\]: Unknown directive.*@!.*near line"

UNKNOWN_DIRECTIVE = re.compile(r"Unknown directive @!(\w+)")


def build_message(offense: ViolationRecord) -> str:
    message = offense.get("message") or "Unknown directive detected"

    match = UNKNOWN_DIRECTIVE.search(message)
    if not match:
        return message

    suggestion = suggest(match.group(1), known_directives())
    if suggestion is None:
        return message
    return f"{message} (did you mean '@!{suggestion}'?)"


RULE = RuleDescriptor(
    id=RULE_ID,
    default_severity=Severity.ERROR,
    category="line",
    strategy=ExecutionStrategy.EXTERNAL_PROCESS,
    subcommand="stats",
    extra_flags=("--compact",),
    parser=OneLineParser(
        "UnknownDirective",
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
