"""
Rule Engine - Orchestrates every enabled rule over one documentation model.

Each rule runs as an independent task on a worker pool. Results are put
back in rule id order before aggregation, so reports never depend on
completion order.
"""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Sequence

from doclint.config import settings
from doclint.core.aggregator import Aggregator, Report
from doclint.core.config_resolver import ConfigResolver
from doclint.core.coverage import (
    CoverageCalculator,
    EngineCoverageCalculator,
    RegistryCoverageCalculator,
)
from doclint.core.entity_registry import EntityRegistry, path_matches
from doclint.core.execution.in_process import check_callback
from doclint.core.result_builder import ResultBuilder
from doclint.core.rule_executor import RuleExecutor
from doclint.core.rule_registry import get_rule
from doclint.errors import ConfigurationError, DocLintError, MissingMessageBuilderError
from doclint.models.rule_models import ExecutionStrategy, Offense, RuleDescriptor, RuleResult

logger = logging.getLogger("doclint.engine")


def validate_rule(rule: RuleDescriptor) -> None:
    """Contract checks done before anything runs."""
    if rule.default_severity is None:
        raise ConfigurationError(f"Rule '{rule.id}' does not define a default severity")
    if rule.message_builder is None:
        raise MissingMessageBuilderError(rule.id)
    if rule.parser is None:
        raise ConfigurationError(f"Rule '{rule.id}' does not define an output parser")
    if rule.strategy is ExecutionStrategy.IN_PROCESS:
        check_callback(rule)


class RuleEngine:
    """
    Runs rules, parses their output and aggregates the offenses.

    Configuration and rule-contract errors abort the run. Any other failure
    inside one rule is logged and that rule reported as inconclusive.
    """

    def __init__(
        self,
        registry: EntityRegistry,
        config: ConfigResolver | None = None,
        rules: dict[str, RuleDescriptor] | None = None,
        coverage_calculator: CoverageCalculator | None = None,
        executor: RuleExecutor | None = None,
    ) -> None:
        self.registry = registry
        self.config = config or ConfigResolver(registry=rules)
        self.rules = rules or self.config.registry
        self.executor = executor or RuleExecutor(registry, self.config)
        self.builder = ResultBuilder(self.config)
        self.coverage_calculator = coverage_calculator or self._default_coverage()

    def run(
        self,
        files: Sequence[str] | None = None,
        only: Iterable[str] | None = None,
    ) -> Report:
        """
        Run all enabled rules (or only the named ones) over a file selection.

        Args:
            files: Files to analyse. Defaults to every file in the registry.
            only: Rule ids to run instead of the enabled set.

        Returns:
            The aggregated Report.
        """
        start = time.monotonic()
        selection = list(files) if files is not None else self.registry.files()

        rule_ids = self.config.rule_ids(only)
        rules = [self.rules[rule_id] for rule_id in rule_ids]
        for rule in rules:
            validate_rule(rule)

        results: dict[str, RuleResult] = {}
        if rules:
            workers = settings.max_workers or os.cpu_count() or 1
            with ThreadPoolExecutor(max_workers=min(workers, len(rules))) as pool:
                futures = {rule.id: pool.submit(self.run_rule, rule, selection) for rule in rules}
                for rule_id, future in futures.items():
                    results[rule_id] = future.result()

        ordered = [results[rule_id] for rule_id in rule_ids]
        report = Aggregator(self.config, selection, self.coverage_calculator).aggregate(ordered)

        elapsed = (time.monotonic() - start) * 1000
        logger.info(
            f"Ran {len(rules)} rules over {len(selection)} files in {elapsed:.1f}ms: "
            f"{report.count} offenses"
        )
        return report

    def run_rule(self, rule: RuleDescriptor, files: Sequence[str]) -> RuleResult:
        """Execute, parse and build offenses for a single rule."""
        start = time.monotonic()

        try:
            result = self.executor.execute(rule, files)
            if result.inconclusive:
                logger.warning(
                    f"[{rule.id}] Engine exited {result.exit_status} without output, "
                    f"result inconclusive: {result.stderr.strip()[:500]}"
                )
                return RuleResult(
                    rule_id=rule.id, inconclusive=True, duration_ms=_since(start)
                )

            records = rule.parser(result.stdout)
            offenses = self._drop_excluded(rule, self.builder.build(records, rule))
        except (DocLintError, NotImplementedError):
            raise
        except Exception as e:
            # One broken rule should not take the whole run down
            logger.error(f"[{rule.id}] Rule failed: {type(e).__name__}: {e}")
            return RuleResult(rule_id=rule.id, inconclusive=True, duration_ms=_since(start))

        logger.debug(f"[{rule.id}] {len(offenses)} offenses")
        return RuleResult(rule_id=rule.id, offenses=offenses, duration_ms=_since(start))

    def run_single_rule(self, rule_id: str, files: Sequence[str] | None = None) -> RuleResult:
        """Run one rule regardless of whether it is enabled."""
        rule = get_rule(rule_id, self.rules)
        validate_rule(rule)
        selection = list(files) if files is not None else self.registry.files()
        return self.run_rule(rule, selection)

    def _default_coverage(self) -> CoverageCalculator:
        if settings.coverage_source == "engine":
            return EngineCoverageCalculator(self.executor.external)
        return RegistryCoverageCalculator(self.registry)

    def _drop_excluded(self, rule: RuleDescriptor, offenses: list[Offense]) -> list[Offense]:
        excludes = self.config.file_excludes(rule.id)
        if not excludes:
            return offenses
        return [
            offense
            for offense in offenses
            if not (offense.location and path_matches(offense.location, excludes))
        ]


def _since(start: float) -> float:
    return round((time.monotonic() - start) * 1000, 2)
