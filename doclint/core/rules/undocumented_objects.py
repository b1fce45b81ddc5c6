"""
Undocumented Objects Rule - Flags classes, modules and methods without docs.

Methods listed in ``excluded_methods`` (by name, or ``name/arity``) are
skipped, e.g. ``initialize/0``.
"""

from __future__ import annotations

from doclint.core.parsers import TwoLineParser
from doclint.models.entity_models import DocumentableEntity
from doclint.models.rule_models import RuleDescriptor, Severity, ViolationRecord

RULE_ID = "Documentation/UndocumentedObjects"


def query(entity: DocumentableEntity, collector, options) -> None:
    if entity.is_documented:
        return

    arity = len([p for p in entity.parameters if not p.is_splat])
    if entity.kind == "method" and _excluded(entity.name, arity, options.get("excluded_methods")):
        return

    collector.puts(f"{entity.file}:{entity.line}: {entity.title}")
    collector.puts(f"{entity.kind}|{arity}")


def _excluded(name: str, arity: int, patterns: list[str] | None) -> bool:
    for pattern in patterns or []:
        if "/" in pattern:
            pattern_name, _, pattern_arity = pattern.partition("/")
            if pattern_name == name and pattern_arity == str(arity):
                return True
        elif pattern == name:
            return True
    return False


def build_message(offense: ViolationRecord) -> str:
    return f"Documentation required for `{offense.get('object_name')}`"


RULE = RuleDescriptor(
    id=RULE_ID,
    default_severity=Severity.WARNING,
    category="line",
    display_name="UndocumentedObject",
    defaults={"excluded_methods": ["initialize/0"]},
    query=query,
    parser=TwoLineParser(fields=("kind", "arity")),
    message_builder=build_message,
)
