"""
Health Check Route - GET /health
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from doclint.api.dependencies import get_command_cache, get_rule_registry
from doclint.config import VERSION, settings

router = APIRouter()


@router.get("/health")
async def health(
    rules=Depends(get_rule_registry),
    cache=Depends(get_command_cache),
):
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": VERSION,
        "engine": settings.engine_command,
        "rules": len(rules),
        "command_cache": cache.stats(),
    }
