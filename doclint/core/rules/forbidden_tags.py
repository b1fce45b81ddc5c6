"""
Forbidden Tags Rule - Reject tag (and tag/type) combinations a project bans.

Configured with ``forbidden_patterns``, a list of ``{"tag": ..., "types": [...]}``
entries. Without ``types`` the tag itself is forbidden.
"""

from __future__ import annotations

from doclint.core.parsers import TwoLineParser
from doclint.models.entity_models import DocumentableEntity, Tag, Visibility
from doclint.models.rule_models import RuleDescriptor, Severity, ViolationRecord

RULE_ID = "Tags/ForbiddenTags"


def query(entity: DocumentableEntity, collector, options) -> None:
    patterns = options.get("forbidden_patterns") or []
    if not patterns:
        return

    for tag in entity.tags:
        for pattern in patterns:
            if not _matches(tag, pattern):
                continue
            collector.puts(f"{entity.file}:{entity.line}: {entity.title}")
            collector.puts(
                f"{tag.name}|{','.join(tag.types)}|{','.join(pattern.get('types') or [])}"
            )


def _matches(tag: Tag, pattern: dict) -> bool:
    if tag.name != pattern.get("tag"):
        return False
    pattern_types = pattern.get("types") or []
    if not pattern_types:
        return True
    return bool(set(tag.types) & set(pattern_types))


def build_message(offense: ViolationRecord) -> str:
    tag_name = offense.get("tag_name")
    types_text = offense.get("types_text") or ""
    pattern_types = offense.get("pattern_types") or ""

    if not pattern_types:
        return (
            f"Forbidden tag detected: @{tag_name}. "
            "This tag is not allowed by project configuration."
        )

    type_display = f" [{types_text}]" if types_text else ""
    return (
        f"Forbidden tag pattern detected: @{tag_name}{type_display}. "
        f"Type(s) '{pattern_types}' are not allowed for @{tag_name}."
    )


RULE = RuleDescriptor(
    id=RULE_ID,
    default_severity=Severity.CONVENTION,
    category="tag",
    default_enabled=False,
    visibility=Visibility.ALL,
    defaults={"forbidden_patterns": []},
    query=query,
    parser=TwoLineParser(fields=("tag_name", "types_text", "pattern_types")),
    message_builder=build_message,
)
