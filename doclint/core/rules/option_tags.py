"""
Option Tags Rule - Methods taking an options hash must document it with @option.

Which parameter names count as an options hash is configurable through
``parameter_names``. Checks every visibility.
"""

from __future__ import annotations

from doclint.core.parsers import TwoLineParser
from doclint.models.entity_models import DocumentableEntity, Visibility
from doclint.models.rule_models import RuleDescriptor, Severity, ViolationRecord

RULE_ID = "Tags/OptionTags"

DEFAULT_PARAMETER_NAMES = ["options", "opts", "kwargs"]


def query(entity: DocumentableEntity, collector, options) -> None:
    if entity.kind != "method":
        return

    names = set(options.get("parameter_names", DEFAULT_PARAMETER_NAMES))
    if not any(p.name.strip("*:") in names for p in entity.parameters):
        return
    if entity.has_tag("option"):
        return

    collector.puts(f"{entity.file}:{entity.line}: {entity.title}")
    collector.puts("missing_option_tags")


def build_message(offense: ViolationRecord) -> str:
    return (
        f"Method `{offense.get('object_name')}` has options parameter but no @option tags "
        "documenting the available options"
    )


RULE = RuleDescriptor(
    id=RULE_ID,
    default_severity=Severity.WARNING,
    category="method",
    display_name="MissingOptionTags",
    defaults={"parameter_names": DEFAULT_PARAMETER_NAMES},
    visibility=Visibility.ALL,
    query=query,
    parser=TwoLineParser(fields=("reason",)),
    message_builder=build_message,
)
