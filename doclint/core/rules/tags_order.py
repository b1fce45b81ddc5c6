"""
Tags Order Rule - Tags must appear in the configured order.

Only tags listed in ``enforced_order`` take part in the comparison;
consecutive repeats (several @param tags) count once.
"""

from __future__ import annotations

from doclint.core.parsers import TwoLineParser
from doclint.models.entity_models import DocumentableEntity, Visibility
from doclint.models.rule_models import RuleDescriptor, Severity, ViolationRecord

RULE_ID = "Tags/Order"

DEFAULT_ORDER = [
    "param",
    "option",
    "yield",
    "yieldparam",
    "yieldreturn",
    "return",
    "raise",
    "see",
    "example",
    "note",
    "todo",
]


def query(entity: DocumentableEntity, collector, options) -> None:
    if entity.is_alias:
        return

    order = list(options.get("enforced_order") or [])

    seen: list[str] = []
    for tag in entity.tags:
        if tag.name in order and (not seen or seen[-1] != tag.name):
            seen.append(tag.name)

    expected = [name for name in order if name in seen]
    if seen == expected:
        return

    collector.puts(f"{entity.file}:{entity.line}: {entity.title}")
    collector.puts(",".join(expected))


def build_message(offense: ViolationRecord) -> str:
    expected = ", ".join(f"`{tag}`" for tag in str(offense.get("order") or "").split(",") if tag)
    return (
        f"The `{offense.get('object_name')}` has documentation tags in an invalid order. "
        f"Following tags need to be in the presented order: {expected}."
    )


RULE = RuleDescriptor(
    id=RULE_ID,
    default_severity=Severity.CONVENTION,
    category="method",
    display_name="InvalidTagsOrder",
    visibility=Visibility.ALL,
    defaults={"enforced_order": DEFAULT_ORDER},
    query=query,
    parser=TwoLineParser(fields=("order",)),
    message_builder=build_message,
)
