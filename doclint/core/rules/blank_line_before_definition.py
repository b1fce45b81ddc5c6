"""
Blank Line Before Definition Rule - Documentation must touch its definition.

One blank line between a comment block and the definition it documents is a
"single" violation; two or more orphan the docs entirely (the engine no
longer attaches them), which is an "orphaned" violation. Each subtype has
its own severity option: ``single_severity`` and ``orphaned_severity``.
"""

from __future__ import annotations

import os
import re

from doclint.core.parsers import TwoLineParser
from doclint.models.entity_models import DocumentableEntity
from doclint.models.rule_models import RuleDescriptor, Severity, ViolationRecord

RULE_ID = "Documentation/BlankLineBeforeDefinition"

MAGIC_COMMENT = re.compile(
    r"^#\s*(frozen[_-]string[_-]literal|encoding|coding|warn[_-]indent"
    r"|shareable[_-]constant[_-]value)\s*:",
    re.IGNORECASE,
)

ERROR_DESCRIPTIONS = {
    "single": "Blank line between documentation and definition",
    "orphaned": "Documentation is orphaned (ignored due to blank lines)",
}


def query(entity: DocumentableEntity, collector, options) -> None:
    if not entity.file or not os.path.exists(entity.file) or (entity.line or 0) <= 1:
        return

    with open(entity.file, encoding="utf-8") as f:
        source_lines = f.readlines()

    prefixes = tuple(options.get("comment_prefixes") or ["#"])
    blank_count, has_doc_block = _analyze_spacing(source_lines, entity.line - 1, prefixes)
    if blank_count == 0 or not has_doc_block:
        return

    violation_type = "orphaned" if blank_count >= 2 else "single"
    if not _pattern_enabled(violation_type, options.get("enabled_patterns") or {}):
        return

    collector.puts(f"{entity.file}:{entity.line}: {entity.title}")
    collector.puts(f"{violation_type}:{blank_count}")


def _analyze_spacing(
    source_lines: list[str], definition_index: int, prefixes: tuple[str, ...]
) -> tuple[int, bool]:
    """Count blank lines directly above the definition and look for a doc block."""
    blank_count = 0
    for index in range(definition_index - 1, -1, -1):
        stripped = source_lines[index].strip() if index < len(source_lines) else ""
        if not stripped:
            blank_count += 1
            continue
        if stripped.startswith(prefixes):
            if MAGIC_COMMENT.match(stripped):
                continue
            return blank_count, True
        break
    return blank_count, False


def _pattern_enabled(violation_type: str, patterns: dict) -> bool:
    if violation_type == "single":
        return patterns.get("single_blank_line", True) is not False
    if violation_type == "orphaned":
        return patterns.get("orphaned_docs", True) is not False
    return True


class BlankLineParser(TwoLineParser):
    """Payload is ``<violation_type>:<blank_count>``."""

    def __init__(self) -> None:
        super().__init__(fields=("violation_type", "blank_count"), separator=":")

    def build_record(self, file, line, object_name, payload):
        record = super().build_record(file, line, object_name, payload)
        if not record["violation_type"] or not record["blank_count"]:
            return None
        record["blank_count"] = int(record["blank_count"])
        return record


def build_message(offense: ViolationRecord) -> str:
    violation_type = offense.get("violation_type")
    object_name = offense.get("object_name")
    description = ERROR_DESCRIPTIONS.get(violation_type, "Blank line before definition")

    if violation_type == "orphaned":
        return f"{description} for '{object_name}' ({offense.get('blank_count')} blank lines)"
    return f"{description} for '{object_name}'"


RULE = RuleDescriptor(
    id=RULE_ID,
    default_severity=Severity.CONVENTION,
    category="line",
    defaults={
        "single_severity": None,
        "orphaned_severity": "convention",
        "comment_prefixes": ["#"],
        "enabled_patterns": {"single_blank_line": True, "orphaned_docs": True},
    },
    query=query,
    parser=BlankLineParser(),
    message_builder=build_message,
    subtype_field="violation_type",
    subtype_severities={"single": "single_severity", "orphaned": "orphaned_severity"},
)
