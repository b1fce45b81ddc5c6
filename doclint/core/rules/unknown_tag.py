"""
Unknown Tag Rule - Passes through the engine's "Unknown tag" diagnostics.

Messages get a "did you mean" hint from the known tag catalogue.

    [warn]: Unknown tag @exmaple in file `lib/engine.rb` near line 32
"""

from __future__ import annotations

import re

from doclint.core.parsers import OneLineParser
from doclint.core.tag_catalog import known_directives, known_tags, suggest
from doclint.models.rule_models import (
    ExecutionStrategy,
    RuleDescriptor,
    Severity,
    ViolationRecord,
)

RULE_ID = "Warnings/UnknownTag"

GENERAL = r"^\[warn\]: Unknown tag.*@.*near line"

UNKNOWN_TAG = re.compile(r"Unknown tag @(\w+)")


def build_message(offense: ViolationRecord) -> str:
    message = offense.get("message") or "Unknown tag detected"

    match = UNKNOWN_TAG.search(message)
    if not match:
        return message

    unknown = match.group(1)
    suggestion = suggest(unknown, known_tags() | known_directives())
    if suggestion is None:
        return message

    return UNKNOWN_TAG.sub(
        f"Unknown tag @{unknown} (did you mean '@{suggestion}'?)", message, count=1
    )


RULE = RuleDescriptor(
    id=RULE_ID,
    default_severity=Severity.ERROR,
    category="line",
    strategy=ExecutionStrategy.EXTERNAL_PROCESS,
    subcommand="stats",
    extra_flags=("--compact",),
    parser=OneLineParser(
        "UnknownTag",
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
