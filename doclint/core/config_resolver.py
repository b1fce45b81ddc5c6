"""
Config Resolver - Effective per-rule settings from a layered document.

The document is a plain mapping with one global section and one section
per rule id:

    all_rules:
      fail_on_severity: warning
      engine_options: ["--private"]
    Tags/Order:
      enforced_order: [param, return]

Resolution is strictly two-level on top of the rule's compiled defaults:
rule section, then ``all_rules``, then the descriptor. A key overrides as
soon as it is present with a non-None value; an explicitly empty list or
``False`` still wins over the layer below.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterable, Mapping

from doclint.core.rule_registry import RULE_REGISTRY, get_rule
from doclint.errors import ConfigurationError
from doclint.models.entity_models import Visibility
from doclint.models.rule_models import RuleDescriptor

logger = logging.getLogger("doclint.config")

GLOBAL_SECTION = "all_rules"

DEFAULT_FAIL_ON_SEVERITY = "warning"

ELEVATED_FLAGS = ("--private", "--protected")


def _present(layer: Mapping[str, Any], option: str) -> bool:
    return option in layer and layer[option] is not None


def _elevated(options: Iterable[str]) -> bool:
    return any(flag in str(opt) for opt in options for flag in ELEVATED_FLAGS)


class RuleOptions:
    """Read-only view of one rule's effective options, handed to rule callbacks."""

    def __init__(self, resolver: ConfigResolver, rule_id: str) -> None:
        self._resolver = resolver
        self.rule_id = rule_id

    def get(self, option: str, default: Any = None) -> Any:
        value = self._resolver.resolve(self.rule_id, option)
        return default if value is None else value

    def __getitem__(self, option: str) -> Any:
        return self._resolver.resolve(self.rule_id, option)


class ConfigResolver:
    """Resolves enabled flag, severity, options, exclusions and visibility per rule."""

    def __init__(
        self,
        document: Mapping[str, Any] | None = None,
        registry: dict[str, RuleDescriptor] | None = None,
    ) -> None:
        self._document: dict[str, Any] = copy.deepcopy(dict(document or {}))
        self.registry = RULE_REGISTRY if registry is None else registry
        self._validate()

    def _validate(self) -> None:
        """Reject unknown rule sections and unusable run-level values up front."""
        for key, value in self._document.items():
            if key == GLOBAL_SECTION:
                if value is not None and not isinstance(value, Mapping):
                    raise ConfigurationError(f"'{GLOBAL_SECTION}' must be a mapping")
                continue

            if "/" not in key:
                logger.warning(f"Ignoring unknown configuration section '{key}'")
                continue

            get_rule(key, self.registry)
            if value is not None and not isinstance(value, Mapping):
                raise ConfigurationError(f"Configuration for rule '{key}' must be a mapping")

        min_coverage = self.global_layer().get("min_coverage")
        if min_coverage is not None:
            try:
                float(min_coverage)
            except (TypeError, ValueError):
                raise ConfigurationError(
                    f"min_coverage must be a number, got {min_coverage!r}"
                ) from None

    # ── Layers ──

    def global_layer(self) -> Mapping[str, Any]:
        return self._document.get(GLOBAL_SECTION) or {}

    def rule_layer(self, rule_id: str) -> Mapping[str, Any]:
        return self._document.get(rule_id) or {}

    # ── Generic resolution ──

    def resolve(self, rule_id: str, option: str) -> Any:
        """Effective value of an option: rule layer, global layer, compiled default."""
        descriptor = get_rule(rule_id, self.registry)

        rule_layer = self.rule_layer(rule_id)
        if _present(rule_layer, option):
            return rule_layer[option]

        global_layer = self.global_layer()
        if _present(global_layer, option):
            return global_layer[option]

        return descriptor.compiled_defaults().get(option)

    def is_enabled(self, rule_id: str) -> bool:
        return bool(self.resolve(rule_id, "enabled"))

    def severity(self, rule_id: str, subtype: str | None = None) -> str | None:
        """
        Severity for a rule, optionally for one violation subtype.

        A subtype's own severity option wins when it resolves to a value;
        otherwise the rule's general severity applies.
        """
        descriptor = get_rule(rule_id, self.registry)

        if subtype is not None:
            option = descriptor.subtype_severities.get(subtype)
            if option:
                value = self.resolve(rule_id, option)
                if value is not None:
                    return str(value)

        value = self.resolve(rule_id, "severity")
        return str(value) if value is not None else None

    def file_excludes(self, rule_id: str) -> list[str]:
        return list(self.resolve(rule_id, "exclude") or [])

    def engine_options(self, rule_id: str) -> list[str]:
        return [str(opt) for opt in self.resolve(rule_id, "engine_options") or []]

    def visibility(self, rule_id: str) -> Visibility:
        """
        Visibility scope for in-process execution.

        Rule-level engine options, when explicitly set (even empty), decide
        alone. Otherwise elevated global options widen the scope to all,
        and failing that the rule's declared scope applies.
        """
        descriptor = get_rule(rule_id, self.registry)

        rule_layer = self.rule_layer(rule_id)
        if _present(rule_layer, "engine_options"):
            if _elevated(rule_layer["engine_options"]):
                return Visibility.ALL
            return Visibility.PUBLIC

        if _elevated(self.global_layer().get("engine_options") or []):
            return Visibility.ALL

        return descriptor.visibility

    def options_for(self, rule_id: str) -> RuleOptions:
        get_rule(rule_id, self.registry)
        return RuleOptions(self, rule_id)

    # ── Run-level policy ──

    @property
    def fail_on_severity(self) -> str:
        value = self.global_layer().get("fail_on_severity")
        return str(value) if value is not None else DEFAULT_FAIL_ON_SEVERITY

    @property
    def min_coverage(self) -> float | None:
        value = self.global_layer().get("min_coverage")
        return float(value) if value is not None else None

    def rule_ids(self, only: Iterable[str] | None = None) -> list[str]:
        """
        Rule ids to run, in registry order.

        Rules named in ``only`` run even when disabled by configuration;
        unknown names raise ``UnknownRuleError``.
        """
        if only is not None:
            requested = set()
            for rule_id in only:
                get_rule(rule_id, self.registry)
                requested.add(rule_id)
            return [rule_id for rule_id in self.registry if rule_id in requested]

        return [rule_id for rule_id in self.registry if self.is_enabled(rule_id)]

    # ── Programmatic configuration ──

    def set_rule_option(self, rule_id: str, option: str, value: Any) -> None:
        get_rule(rule_id, self.registry)
        section = self._document.get(rule_id)
        if section is None:
            section = self._document[rule_id] = {}
        section[option] = value
        self._validate()

    def set_global_option(self, option: str, value: Any) -> None:
        section = self._document.get(GLOBAL_SECTION)
        if section is None:
            section = self._document[GLOBAL_SECTION] = {}
        section[option] = value
        self._validate()

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._document)
