"""
Warning Dispatcher - Routes engine diagnostics to the warning rules.

When the documentation model was built with its diagnostics captured, the
warning rules read those lines instead of re-running the engine. Each
warning goes to the first rule (registry order) whose ``warning_pattern``
matches it.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Iterable, Sequence

from doclint.models.rule_models import RuleDescriptor

logger = logging.getLogger("doclint.warnings")

WARN_PREFIX = "[warn]:"

_LEVEL_PREFIX = re.compile(r"^\[(warn|warning)\]:?\s*", re.IGNORECASE)
_FILE_REFERENCE = re.compile(r"in file `(.*?)`")


def format_warning(raw: str) -> str:
    """Normalize one diagnostic to the ``[warn]: <message>`` form."""
    text = raw.strip()
    text = _LEVEL_PREFIX.sub("", text, count=1)
    return f"{WARN_PREFIX} {text}"


class WarningDispatcher:
    """Assigns captured warnings to the rules that report them."""

    def __init__(self, warnings: Iterable[str], rules: Iterable[RuleDescriptor]) -> None:
        self._warnings = [format_warning(w) for w in warnings if w and w.strip()]
        self._rules = [rule for rule in rules if self.handles(rule)]
        self._dispatched: dict[str, list[str]] | None = None

    @staticmethod
    def handles(rule: RuleDescriptor) -> bool:
        return rule.warning_pattern is not None

    def dispatch(self) -> dict[str, list[str]]:
        """Warning lines per rule id. Computed once."""
        if self._dispatched is not None:
            return self._dispatched

        patterns = [(rule.id, re.compile(rule.warning_pattern)) for rule in self._rules]
        dispatched: dict[str, list[str]] = {rule_id: [] for rule_id, _ in patterns}
        unrouted = 0

        for warning in self._warnings:
            for rule_id, pattern in patterns:
                if pattern.search(warning):
                    dispatched[rule_id].append(warning)
                    break
            else:
                unrouted += 1

        if unrouted:
            logger.debug(f"{unrouted} engine warnings matched no warning rule")

        self._dispatched = dispatched
        return dispatched

    def format_for_rule(self, rule_id: str, file_selection: Sequence[str] | None = None) -> str:
        """Raw rule output for one warning rule, limited to the selected files."""
        lines = self.dispatch().get(rule_id, [])

        if file_selection is not None:
            if not file_selection:
                return ""
            selected = {os.path.abspath(path) for path in file_selection}
            lines = [line for line in lines if _in_selection(line, selected)]

        return "\n".join(lines)


def _in_selection(line: str, selected: set[str]) -> bool:
    # Warnings without a file reference are not file-scoped
    match = _FILE_REFERENCE.search(line)
    if not match:
        return True
    return os.path.abspath(match.group(1)) in selected
