"""
Report Models - Serializable report shape and API contract schemas.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from doclint.models.entity_models import DocumentableEntity


class Statistics(BaseModel):
    """Offense counts per severity."""

    error: int = 0
    warning: int = 0
    convention: int = 0
    total: int = 0


class Coverage(BaseModel):
    """Documentation coverage of the analysed files."""

    total: int = 0
    documented: int = 0
    coverage: float = Field(default=100.0, description="Documented percentage 0-100")


class LintReport(BaseModel):
    """Serialized form of a Report."""

    offenses: list[dict[str, Any]] = Field(default_factory=list)
    statistics: Statistics = Field(default_factory=Statistics)
    coverage: Coverage | None = None
    exit_code: int = 0
    inconclusive: list[str] = Field(
        default_factory=list, description="Rules whose engine run gave no usable output"
    )


class LintRequest(BaseModel):
    """Request body for POST /lint."""

    entities: list[DocumentableEntity] = Field(default_factory=list)
    warnings: list[str] | None = Field(
        default=None, description="Diagnostics the engine emitted while building the model"
    )
    files: list[str] | None = Field(
        default=None, description="File selection. Defaults to every entity file."
    )
    config: dict[str, Any] | None = Field(
        default=None, description="Layered rule configuration document"
    )
    only: list[str] | None = Field(default=None, description="Run only these rule ids")
