"""
In-Process Executor - Runs a rule's per-entity callback over the registry view.

Per-entity data errors are logged and that entity is skipped. A broken rule
(no callback, a callback that cannot take ``(entity, collector, options)``,
one that raises NotImplementedError or AttributeError, or one that raises
TypeError for every entity) aborts the run.
"""

from __future__ import annotations

import inspect
import logging
from typing import Sequence

from doclint.config import settings
from doclint.core.config_resolver import ConfigResolver
from doclint.core.entity_registry import EntityRegistry
from doclint.core.execution.collector import LineCollector
from doclint.errors import RuleContractError
from doclint.models.rule_models import ExecutionResult, RuleDescriptor

logger = logging.getLogger("doclint.executor")


def check_callback(rule: RuleDescriptor) -> None:
    """Raise RuleContractError unless the rule has a usable per-entity callback."""
    if not callable(rule.query):
        raise RuleContractError(rule.id, "no per-entity callback defined")

    try:
        signature = inspect.signature(rule.query)
    except (TypeError, ValueError):
        return

    try:
        signature.bind(None, None, None)
    except TypeError:
        raise RuleContractError(
            rule.id, f"callback signature {signature} cannot accept (entity, collector, options)"
        ) from None


class InProcessExecutor:
    """Iterates the filtered entity view and collects protocol lines."""

    def __init__(self, registry: EntityRegistry, config: ConfigResolver) -> None:
        self.registry = registry
        self.config = config

    def execute(
        self, rule: RuleDescriptor, file_selection: Sequence[str] | None = None
    ) -> ExecutionResult:
        check_callback(rule)

        if file_selection is not None and not list(file_selection):
            return ExecutionResult()

        entities = self.registry.objects_for_rule(
            self.config.visibility(rule.id),
            self.config.file_excludes(rule.id),
            file_selection,
        )
        options = self.config.options_for(rule.id)
        collector = LineCollector()
        attempted = failures = type_errors = 0
        last_type_error: TypeError | None = None

        for entity in entities:
            # Nothing to report against
            if not entity.file or entity.line is None:
                continue

            attempted += 1
            # Per-entity buffer keeps a failing callback's partial output out
            entity_lines = LineCollector()
            try:
                rule.query(entity, entity_lines, options)
            except NotImplementedError:
                raise
            except AttributeError as e:
                raise RuleContractError(rule.id, f"callback calls a missing method: {e}") from e
            except Exception as e:
                failures += 1
                if isinstance(e, TypeError):
                    type_errors += 1
                    last_type_error = e
                level = logging.WARNING if settings.verbose else logging.DEBUG
                logger.log(
                    level,
                    f"[{rule.id}] Skipping {entity.path} ({entity.file}:{entity.line}): "
                    f"{type(e).__name__}: {e}",
                )
                continue

            collector.extend(entity_lines.lines)

        # A TypeError on every entity is a broken call inside the rule, not bad data
        if attempted and type_errors == attempted:
            raise RuleContractError(
                rule.id, f"callback failed on every entity: {last_type_error}"
            ) from last_type_error

        if failures:
            logger.debug(f"[{rule.id}] {failures} entities skipped after callback errors")

        return ExecutionResult(stdout=collector.to_stdout(), exit_status=0)
