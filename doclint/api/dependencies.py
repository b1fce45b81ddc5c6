"""
FastAPI Dependencies - Shared singletons injected via Depends().
"""

from __future__ import annotations

from functools import lru_cache

from doclint.core.execution.command_cache import CommandCache, shared_command_cache
from doclint.core.rule_registry import RULE_REGISTRY
from doclint.models.rule_models import RuleDescriptor


@lru_cache
def get_rule_registry() -> dict[str, RuleDescriptor]:
    """Rule catalogue every request runs against."""
    return RULE_REGISTRY


@lru_cache
def get_command_cache() -> CommandCache:
    """Process-wide engine command cache."""
    return shared_command_cache()
