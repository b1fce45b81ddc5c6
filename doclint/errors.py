"""
doclint errors.

Configuration and rule-contract errors are fatal and abort a run.
Everything else (malformed rule output, per-entity data failures,
non-zero engine exits) degrades to fewer offenses instead of raising.
"""

from __future__ import annotations


class DocLintError(Exception):
    """Base error for everything doclint raises on purpose."""


class ConfigurationError(DocLintError):
    """The configuration or a rule descriptor cannot be used."""


class UnknownRuleError(ConfigurationError):
    """A rule id does not resolve to any registered rule."""

    def __init__(self, rule_id: str) -> None:
        self.rule_id = rule_id
        super().__init__(f"Unknown rule: {rule_id}")


class MissingMessageBuilderError(ConfigurationError):
    """A rule produced violations but has no way to describe them."""

    def __init__(self, rule_id: str) -> None:
        self.rule_id = rule_id
        super().__init__(f"Rule '{rule_id}' does not define a message builder")


class RuleContractError(DocLintError, NotImplementedError):
    """The rule itself is broken (no callback, wrong signature)."""

    def __init__(self, rule_id: str, reason: str) -> None:
        self.rule_id = rule_id
        super().__init__(f"Rule '{rule_id}' cannot run: {reason}")


class CoverageUnavailableError(DocLintError):
    """The coverage collaborator could not produce numbers."""
