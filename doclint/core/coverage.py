"""
Coverage Calculators - Documented-entity ratio for the coverage gate.

The aggregator only needs ``calculate(files) -> Coverage``. Two sources:
the in-memory registry, or the external engine itself.
"""

from __future__ import annotations

import logging
import os
import re
import shlex
from typing import Protocol, Sequence

from doclint.config import settings
from doclint.core.entity_registry import EntityRegistry
from doclint.core.execution.engine_database import database_dir
from doclint.core.execution.external_process import ExternalProcessExecutor
from doclint.errors import CoverageUnavailableError
from doclint.models.report_models import Coverage

logger = logging.getLogger("doclint.coverage")

COVERAGE_QUERY = (
    'puts("#{type}:#{docstring.all.empty? ? "undoc" : "doc"}"); false'
)

_COVERAGE_LINE = re.compile(r"^(\w+):(doc|undoc)$")


class CoverageCalculator(Protocol):
    def calculate(self, files: Sequence[str]) -> Coverage: ...


def coverage_from_counts(total: int, documented: int) -> Coverage:
    percentage = 100.0 if total == 0 else round(documented / total * 100, 2)
    return Coverage(total=total, documented=documented, coverage=percentage)


class RegistryCoverageCalculator:
    """Counts documented entities in the selected files."""

    def __init__(self, registry: EntityRegistry) -> None:
        self.registry = registry

    def calculate(self, files: Sequence[str]) -> Coverage:
        selected = {os.path.abspath(path) for path in files}
        entities = [
            entity
            for entity in self.registry.all_objects()
            if entity.file and os.path.abspath(entity.file) in selected
        ]
        documented = sum(1 for entity in entities if entity.is_documented)
        return coverage_from_counts(len(entities), documented)


class EngineCoverageCalculator:
    """Asks the documentation engine for one ``kind:doc|undoc`` line per entity."""

    def __init__(self, executor: ExternalProcessExecutor) -> None:
        self.executor = executor

    def argv(self) -> list[str]:
        argv = shlex.split(settings.engine_command)
        argv.append("list")
        argv.extend(settings.engine_default_options)
        argv.extend(["--query", COVERAGE_QUERY, "-q", "-b", database_dir()])
        return argv

    def calculate(self, files: Sequence[str]) -> Coverage:
        logger.debug(f"Requesting engine coverage for {len(files)} files")
        result = self.executor.run_argv("coverage", self.argv(), files)
        if result.inconclusive:
            raise CoverageUnavailableError(
                f"Engine exited {result.exit_status} without coverage output"
            )
        return parse_coverage(result.stdout)


def parse_coverage(raw: str | None) -> Coverage:
    total = documented = 0
    for line in (raw or "").splitlines():
        match = _COVERAGE_LINE.match(line.strip())
        if not match:
            continue
        total += 1
        if match.group(2) == "doc":
            documented += 1
    return coverage_from_counts(total, documented)
