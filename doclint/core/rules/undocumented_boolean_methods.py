"""
Undocumented Boolean Methods Rule - Predicate methods must document a return type.

Runs inside the external documentation engine: the query below is handed
to ``<engine> list --query`` verbatim and prints the two-line protocol for
every predicate method (name ending in '?') without a typed @return.
"""

from __future__ import annotations

from doclint.core.parsers import TwoLineParser
from doclint.models.rule_models import (
    ExecutionStrategy,
    RuleDescriptor,
    Severity,
    ViolationRecord,
)

RULE_ID = "Documentation/UndocumentedBooleanMethods"

QUERY = (
    'type == :method && !is_alias? && is_explicit? && name.to_s.end_with?("?") && '
    "(tag(:return).nil? || tag(:return).types.to_a.empty?) && "
    '(puts("#{file}:#{line}: #{title}\\nmissing_return"); false)'
)


def build_message(offense: ViolationRecord) -> str:
    return (
        f"The `{offense.get('object_name')}` boolean method is missing a return type "
        "(expected `[Boolean]`)."
    )


RULE = RuleDescriptor(
    id=RULE_ID,
    default_severity=Severity.WARNING,
    category="method",
    display_name="UndocumentedBooleanMethod",
    strategy=ExecutionStrategy.EXTERNAL_PROCESS,
    query=QUERY,
    subcommand="list",
    parser=TwoLineParser(fields=("reason",)),
    message_builder=build_message,
)
