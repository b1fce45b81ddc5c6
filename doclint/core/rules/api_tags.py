"""
API Tags Rule - Public objects declare an @api tag with an allowed value.
"""

from __future__ import annotations

from doclint.core.parsers import TwoLineParser
from doclint.models.entity_models import DocumentableEntity, Visibility
from doclint.models.rule_models import RuleDescriptor, Severity, ViolationRecord

RULE_ID = "Tags/ApiTags"

DEFAULT_ALLOWED_APIS = ["public", "private", "internal"]


def query(entity: DocumentableEntity, collector, options) -> None:
    allowed = list(options.get("allowed_apis") or DEFAULT_ALLOWED_APIS)
    api_tag = entity.tag("api")

    if api_tag is not None:
        value = api_tag.text.strip()
        if value not in allowed:
            collector.puts(f"{entity.file}:{entity.line}: {entity.title}")
            collector.puts(f"invalid|{value}|{','.join(allowed)}")
    elif options.get("require_api_tags") and entity.visibility in (None, Visibility.PUBLIC):
        if entity.kind == "root":
            return
        collector.puts(f"{entity.file}:{entity.line}: {entity.title}")
        collector.puts("missing||")


def build_message(offense: ViolationRecord) -> str:
    object_name = offense.get("object_name")
    if offense.get("status") == "invalid":
        allowed = ", ".join(a for a in (offense.get("allowed") or "").split(",") if a)
        return (
            f"Object `{object_name}` has invalid @api tag value "
            f"'{offense.get('api_value')}'. Allowed values: {allowed}"
        )
    return f"Public object `{object_name}` is missing @api tag"


RULE = RuleDescriptor(
    id=RULE_ID,
    default_severity=Severity.WARNING,
    category="line",
    display_name="ApiTag",
    default_enabled=False,
    visibility=Visibility.ALL,
    defaults={"allowed_apis": DEFAULT_ALLOWED_APIS, "require_api_tags": True},
    query=query,
    parser=TwoLineParser(fields=("status", "api_value", "allowed")),
    message_builder=build_message,
)
