"""
Rule Executor - Runs one rule through its declared execution strategy.

Returns raw protocol text plus an exit status; parsing happens later.
"""

from __future__ import annotations

import logging
from typing import Sequence

from doclint.core.config_resolver import ConfigResolver
from doclint.core.entity_registry import EntityRegistry, path_matches
from doclint.core.execution.external_process import ExternalProcessExecutor
from doclint.core.execution.in_process import InProcessExecutor
from doclint.core.execution.warning_dispatcher import WarningDispatcher
from doclint.models.rule_models import ExecutionResult, ExecutionStrategy, RuleDescriptor

logger = logging.getLogger("doclint.executor")


class RuleExecutor:
    """
    Strategy dispatch for a single rule.

    Warning rules read the registry's captured engine diagnostics when there
    are any; otherwise they run like any other external-process rule.
    """

    def __init__(
        self,
        registry: EntityRegistry,
        config: ConfigResolver,
        external: ExternalProcessExecutor | None = None,
        in_process: InProcessExecutor | None = None,
    ) -> None:
        self.registry = registry
        self.config = config
        self.external = external or ExternalProcessExecutor(config)
        self.in_process = in_process or InProcessExecutor(registry, config)

        self.dispatcher: WarningDispatcher | None = None
        if registry.warnings is not None:
            self.dispatcher = WarningDispatcher(registry.warnings, config.registry.values())

    def execute(
        self, rule: RuleDescriptor, file_selection: Sequence[str] | None = None
    ) -> ExecutionResult:
        if self.dispatcher is not None and self.dispatcher.handles(rule):
            logger.debug(f"[{rule.id}] Reading captured engine warnings")
            return ExecutionResult(stdout=self.dispatcher.format_for_rule(rule.id, file_selection))

        if rule.strategy is ExecutionStrategy.IN_PROCESS:
            return self.in_process.execute(rule, file_selection)

        return self.external.execute(rule, self._external_files(rule, file_selection))

    def _external_files(
        self, rule: RuleDescriptor, file_selection: Sequence[str] | None
    ) -> list[str]:
        files = list(file_selection) if file_selection is not None else self.registry.files()
        excludes = self.config.file_excludes(rule.id)
        if not excludes:
            return files
        return [path for path in files if not path_matches(path, excludes)]
