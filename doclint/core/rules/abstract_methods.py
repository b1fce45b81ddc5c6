"""
Abstract Methods Rule - Methods tagged @abstract must not carry an implementation.

The body is everything after the signature line, minus a closing block
terminator. Comments, docstrings, raise statements and placeholders do not
count as implementation.
"""

from __future__ import annotations

from doclint.core.parsers import TwoLineParser
from doclint.models.entity_models import DocumentableEntity, Visibility
from doclint.models.rule_models import RuleDescriptor, Severity, ViolationRecord

RULE_ID = "Semantic/AbstractMethods"

TERMINATORS = {"end", "}"}
PLACEHOLDERS = {"pass", "..."}


def query(entity: DocumentableEntity, collector, options) -> None:
    if entity.kind != "method" or not entity.has_tag("abstract"):
        return
    if not entity.source.strip():
        return

    lines = [line.strip() for line in entity.source.splitlines() if line.strip()]
    body = lines[1:]
    if body and body[-1] in TERMINATORS:
        body = body[:-1]

    has_implementation = any(
        not line.startswith(("#", '"""', "'''"))
        and "NotImplementedError" not in line
        and not line.startswith("raise")
        and line not in PLACEHOLDERS
        for line in body
    )
    if not has_implementation:
        return

    collector.puts(f"{entity.file}:{entity.line}: {entity.title}")
    collector.puts("has_implementation")


def build_message(offense: ViolationRecord) -> str:
    return (
        f"Abstract method `{offense.get('object_name')}` has an implementation. "
        "Abstract methods should only raise NotImplementedError."
    )


RULE = RuleDescriptor(
    id=RULE_ID,
    default_severity=Severity.WARNING,
    category="method",
    display_name="AbstractMethodWithImplementation",
    visibility=Visibility.ALL,
    query=query,
    parser=TwoLineParser(fields=("reason",)),
    message_builder=build_message,
)
