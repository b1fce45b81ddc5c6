"""
Undocumented Options Rule - Public methods with options-style parameters need @option tags.

Options-style means ``options``, ``option``, ``opts``, ``opt``, ``kwargs``
or a double splat. The payload line lists the whole signature.
"""

from __future__ import annotations

import re

from doclint.core.parsers import TwoLineParser
from doclint.models.entity_models import DocumentableEntity, Parameter
from doclint.models.rule_models import RuleDescriptor, Severity, ViolationRecord

RULE_ID = "Documentation/UndocumentedOptions"

OPTIONS_NAME = re.compile(r"^(options?|opts?|kwargs)$")


def _is_options(param: Parameter) -> bool:
    return bool(OPTIONS_NAME.match(param.name)) or param.name.startswith("**")


def _signature(params: list[Parameter]) -> str:
    return ", ".join(f"{p.name} {p.default}" if p.default is not None else p.name for p in params)


def query(entity: DocumentableEntity, collector, options) -> None:
    if entity.kind != "method":
        return
    if not any(_is_options(p) for p in entity.parameters):
        return
    if entity.has_tag("option"):
        return

    collector.puts(f"{entity.file}:{entity.line}: {entity.title}")
    collector.puts(_signature(entity.parameters))


def build_message(offense: ViolationRecord) -> str:
    return (
        f"Method '{offense.get('object_name')}' has options parameter ({offense.get('params')}) "
        "but no @option tags in documentation."
    )


RULE = RuleDescriptor(
    id=RULE_ID,
    default_severity=Severity.WARNING,
    category="line",
    display_name="UndocumentedOptions",
    query=query,
    parser=TwoLineParser(fields=("params",)),
    message_builder=build_message,
)
