"""
doclint - POST /lint endpoint.

Accepts an exported documentation model plus an optional configuration
document, runs the enabled rules and returns the serialized report.
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException

from doclint.api.dependencies import get_command_cache, get_rule_registry
from doclint.core.config_resolver import ConfigResolver
from doclint.core.entity_registry import EntityRegistry
from doclint.core.execution.external_process import ExternalProcessExecutor
from doclint.core.rule_engine import RuleEngine
from doclint.core.rule_executor import RuleExecutor
from doclint.errors import ConfigurationError, RuleContractError
from doclint.models.report_models import LintReport, LintRequest

logger = logging.getLogger("doclint.lint")
router = APIRouter()


def _lint(req: LintRequest, rules, cache) -> LintReport:
    registry = EntityRegistry(req.entities, req.warnings)
    config = ConfigResolver(req.config, registry=rules)
    executor = RuleExecutor(
        registry, config, external=ExternalProcessExecutor(config, cache=cache)
    )
    engine = RuleEngine(registry, config, rules=rules, executor=executor)
    return engine.run(files=req.files, only=req.only).to_response()


@router.post("/lint", response_model=LintReport)
async def lint(
    req: LintRequest,
    rules=Depends(get_rule_registry),
    cache=Depends(get_command_cache),
):
    """Lint an exported documentation model."""
    try:
        # Rules block on subprocesses and file reads
        report = await asyncio.to_thread(_lint, req, rules, cache)
    except ConfigurationError as e:
        logger.warning(f"Rejected lint request: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except RuleContractError as e:
        logger.error(f"Broken rule: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(
        f"Lint finished: {report.statistics.total} offenses, exit code {report.exit_code}"
    )
    return report
