"""
Aggregator - Merges rule results into one Report.

Statistics, coverage and the exit code are derived lazily and memoized;
a Report never changes after it is built.

Exit code policy, in order:
  1. min_coverage configured and coverage below it  -> 1
  2. no offenses                                    -> 0
  3. no configuration                               -> 0
  4. fail_on_severity: error / warning / convention -> 1 when matched
     anything else (e.g. "never")                   -> 0
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Iterable, Sequence

from doclint.core.config_resolver import ConfigResolver
from doclint.core.coverage import CoverageCalculator
from doclint.errors import CoverageUnavailableError
from doclint.models.report_models import Coverage, LintReport, Statistics
from doclint.models.rule_models import Offense, RuleResult

logger = logging.getLogger("doclint.aggregate")


class Report:
    """Offenses of a run plus derived statistics, coverage and exit code."""

    def __init__(
        self,
        offenses: Iterable[Offense],
        config: ConfigResolver | None = None,
        files: Sequence[str] = (),
        coverage_calculator: CoverageCalculator | None = None,
        inconclusive: Iterable[str] = (),
    ) -> None:
        self._offenses = tuple(offenses)
        self._config = config
        self._files = tuple(files)
        self._coverage_calculator = coverage_calculator
        self._inconclusive = tuple(inconclusive)

        self._statistics: Statistics | None = None
        self._coverage: Coverage | None = None
        self._coverage_computed = False
        self._exit_code: int | None = None

    @property
    def offenses(self) -> list[Offense]:
        return list(self._offenses)

    @property
    def inconclusive(self) -> list[str]:
        """Rules whose engine run exited non-zero without output."""
        return list(self._inconclusive)

    @property
    def count(self) -> int:
        return len(self._offenses)

    @property
    def clean(self) -> bool:
        return not self._offenses and not self._inconclusive

    @property
    def statistics(self) -> Statistics:
        if self._statistics is None:
            counts = Counter(offense.severity for offense in self._offenses)
            self._statistics = Statistics(
                error=counts["error"],
                warning=counts["warning"],
                convention=counts["convention"],
                total=len(self._offenses),
            )
        return self._statistics

    @property
    def coverage(self) -> Coverage | None:
        if not self._coverage_computed:
            self._coverage_computed = True
            self._coverage = self._compute_coverage()
        return self._coverage

    def _compute_coverage(self) -> Coverage | None:
        if self._config is None or not self._files or self._coverage_calculator is None:
            return None

        try:
            return self._coverage_calculator.calculate(self._files)
        except CoverageUnavailableError as e:
            logger.warning(f"Coverage unavailable, skipping coverage gate: {e}")
            return None

    @property
    def exit_code(self) -> int:
        if self._exit_code is None:
            self._exit_code = self._compute_exit_code()
        return self._exit_code

    def _compute_exit_code(self) -> int:
        min_coverage = self._config.min_coverage if self._config is not None else None
        if min_coverage is not None:
            coverage = self.coverage
            if coverage is not None and coverage.coverage < min_coverage:
                logger.info(
                    f"Coverage {coverage.coverage:.2f}% is below the minimum {min_coverage:.2f}%"
                )
                return 1

        if not self._offenses:
            return 0

        if self._config is None:
            return 0

        stats = self.statistics
        threshold = self._config.fail_on_severity

        if threshold == "error":
            return 1 if stats.error > 0 else 0
        if threshold == "warning":
            return 1 if stats.error + stats.warning > 0 else 0
        if threshold == "convention":
            return 1 if stats.total > 0 else 0
        return 0

    def to_dict(self) -> dict[str, Any]:
        coverage = self.coverage
        return {
            "offenses": [offense.to_dict() for offense in self._offenses],
            "statistics": self.statistics.model_dump(),
            "coverage": coverage.model_dump() if coverage is not None else None,
            "exit_code": self.exit_code,
        }

    def to_response(self) -> LintReport:
        return LintReport(**self.to_dict(), inconclusive=self.inconclusive)


class Aggregator:
    """Builds the Report of a run from its per-rule results."""

    def __init__(
        self,
        config: ConfigResolver | None = None,
        files: Sequence[str] = (),
        coverage_calculator: CoverageCalculator | None = None,
    ) -> None:
        self.config = config
        self.files = list(files)
        self.coverage_calculator = coverage_calculator

    def aggregate(self, results: Iterable[RuleResult]) -> Report:
        """Concatenate offenses in the order the results are given."""
        results = list(results)
        offenses = [offense for result in results for offense in result.offenses]
        inconclusive = [result.rule_id for result in results if result.inconclusive]

        logger.debug(
            f"Aggregated {len(offenses)} offenses from {len(results)} rules"
            + (f" ({len(inconclusive)} inconclusive)" if inconclusive else "")
        )

        return Report(
            offenses,
            config=self.config,
            files=self.files,
            coverage_calculator=self.coverage_calculator,
            inconclusive=inconclusive,
        )
