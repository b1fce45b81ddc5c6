"""
Result Builder - Normalizes violation records into Offenses.
"""

from __future__ import annotations

from typing import Iterable

from doclint.core.config_resolver import ConfigResolver
from doclint.errors import ConfigurationError, MissingMessageBuilderError
from doclint.models.rule_models import Offense, RuleDescriptor, ViolationRecord

# Normalized keys; a record's own values for these never leak through
_NORMALIZED = (
    "severity", "type", "category", "name", "message", "location", "location_line", "rule_id",
)


class ResultBuilder:
    """Builds Offenses for one rule using the run's configuration."""

    def __init__(self, config: ConfigResolver) -> None:
        self.config = config

    def build(self, records: Iterable[ViolationRecord], rule: RuleDescriptor) -> list[Offense]:
        records = list(records)
        if not records:
            return []

        if rule.message_builder is None:
            raise MissingMessageBuilderError(rule.id)
        if rule.default_severity is None:
            raise ConfigurationError(f"Rule '{rule.id}' does not define a default severity")

        return [self._build_one(record, rule) for record in records]

    def _build_one(self, record: ViolationRecord, rule: RuleDescriptor) -> Offense:
        subtype = record.get(rule.subtype_field) if rule.subtype_field else None
        severity = self.config.severity(rule.id, subtype)

        extra = {key: value for key, value in record.items() if key not in _NORMALIZED}

        return Offense(
            **extra,
            severity=severity,
            category=rule.category,
            name=rule.offense_name,
            message=rule.message_builder(record),
            location=record.get("location") or record.get("file"),
            location_line=_location_line(record),
            rule_id=rule.id,
        )


def _location_line(record: ViolationRecord) -> int:
    for key in ("line", "location_line"):
        value = record.get(key)
        if value is None or value == "":
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            continue
    return 0
