"""
Rule Data Models - Descriptors, raw execution output, offenses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

from pydantic import BaseModel, ConfigDict, Field

from doclint.models.entity_models import Visibility


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    CONVENTION = "convention"


class ExecutionStrategy(str, Enum):
    IN_PROCESS = "in_process"
    EXTERNAL_PROCESS = "external_process"


# Untyped parse result of one rule's raw output. Always carries a location
# (file + line) and an object identity; every other key is rule-specific.
ViolationRecord = dict[str, Any]

ParserFn = Callable[[str | None], list[ViolationRecord]]
MessageBuilderFn = Callable[[ViolationRecord], str]


@dataclass(frozen=True)
class RuleDescriptor:
    """
    Static description of a rule.

    ``query`` is the per-entity callback ``(entity, collector, options)`` for
    in-process rules and an opaque query expression for external-process
    rules. Options declared in ``defaults`` are the compiled defaults that
    the configuration layers override.
    """

    id: str
    default_severity: Severity | str | None
    category: str = "line"
    default_enabled: bool = True
    defaults: Mapping[str, Any] = field(default_factory=dict)
    strategy: ExecutionStrategy = ExecutionStrategy.IN_PROCESS
    visibility: Visibility = Visibility.PUBLIC
    display_name: str | None = None
    query: Callable[..., None] | str | None = None
    subcommand: str = "list"
    extra_flags: tuple[str, ...] = ()
    parser: ParserFn | None = None
    message_builder: MessageBuilderFn | None = None
    subtype_field: str | None = None
    subtype_severities: Mapping[str, str] = field(default_factory=dict)
    warning_pattern: str | None = None

    @property
    def offense_name(self) -> str:
        """Display name, derived from the id's last segment when not declared."""
        if self.display_name:
            return self.display_name
        return self.id.rsplit("/", 1)[-1] or "Unknown"

    def compiled_defaults(self) -> dict[str, Any]:
        severity = self.default_severity
        if isinstance(severity, Severity):
            severity = severity.value
        return {
            "enabled": self.default_enabled,
            "severity": severity,
            "exclude": [],
            **self.defaults,
        }


class ExecutionResult(BaseModel):
    """Raw output of one rule execution, kept three-way like a process."""

    model_config = ConfigDict(frozen=True)

    stdout: str = ""
    stderr: str = ""
    exit_status: int = 0

    @property
    def inconclusive(self) -> bool:
        """Non-zero exit without output: neither clean nor dirty."""
        return self.exit_status != 0 and not self.stdout.strip()


class Offense(BaseModel):
    """
    A normalized, located, severity-tagged violation.

    Rule-specific fields from the violation record are kept as extra fields.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    severity: str
    category: str = Field(..., serialization_alias="type")
    name: str
    message: str
    location: str | None = None
    location_line: int = 0
    rule_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class RuleResult(BaseModel):
    """Offenses produced by a single rule."""

    rule_id: str
    offenses: list[Offense] = Field(default_factory=list)
    inconclusive: bool = False
    duration_ms: float = 0.0
