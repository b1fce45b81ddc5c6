"""
Undocumented Method Arguments Rule - Every parameter needs a @param tag.
"""

from __future__ import annotations

from doclint.core.parsers import TwoLineParser
from doclint.models.entity_models import DocumentableEntity
from doclint.models.rule_models import RuleDescriptor, Severity, ViolationRecord

RULE_ID = "Documentation/UndocumentedMethodArguments"


def query(entity: DocumentableEntity, collector, options) -> None:
    if entity.kind != "method" or entity.is_alias or not entity.is_explicit:
        return

    param_tags = entity.tags_named("param")
    if len(entity.parameters) <= len(param_tags):
        return

    documented = {tag.param_name for tag in param_tags}
    missing = [
        p.name.lstrip("*&") for p in entity.parameters if p.name.lstrip("*&") not in documented
    ]

    collector.puts(f"{entity.file}:{entity.line}: {entity.title}")
    collector.puts(",".join(missing))


def build_message(offense: ViolationRecord) -> str:
    message = (
        f"The `{offense.get('object_name')}` method is missing documentation "
        "for some of the arguments"
    )
    missing = offense.get("missing") or ""
    if missing:
        names = ", ".join(f"`{name}`" for name in missing.split(","))
        return f"{message}: {names}."
    return f"{message}."


RULE = RuleDescriptor(
    id=RULE_ID,
    default_severity=Severity.WARNING,
    category="method",
    display_name="UndocumentedMethodArgument",
    query=query,
    parser=TwoLineParser(fields=("missing",)),
    message_builder=build_message,
)
