"""
Test fixtures shared across all doclint tests.
"""

import shlex
import sys
from pathlib import Path

import pytest

from doclint.config import settings
from doclint.core.entity_registry import EntityRegistry
from doclint.core.execution.command_cache import reset_command_cache
from doclint.core.execution.engine_database import clear_engine_database
from doclint.core.tag_catalog import reset_tag_catalog
from doclint.models.entity_models import DocumentableEntity

FAKE_ENGINE = Path(__file__).parent / "fixtures" / "fake_engine.py"


@pytest.fixture(autouse=True)
def reset_process_state():
    """Process-scoped caches must not leak between tests."""
    reset_command_cache()
    reset_tag_catalog()
    yield
    reset_command_cache()
    reset_tag_catalog()
    clear_engine_database()


@pytest.fixture
def fake_engine(monkeypatch):
    """Point the external-process strategy at the fake engine script."""
    command = f"{shlex.quote(sys.executable)} {shlex.quote(str(FAKE_ENGINE))}"
    monkeypatch.setattr(settings, "engine_command", command)
    monkeypatch.setattr(settings, "engine_default_options", [])
    return command


@pytest.fixture
def ruby_source(tmp_path):
    """A small source file with documented and undocumented definitions."""
    source = tmp_path / "user.rb"
    source.write_text(
        "# frozen_string_literal: true\n"
        "\n"
        "# A user\n"
        "class User\n"
        "  # Full name\n"
        "\n"
        "  def name\n"
        "  end\n"
        "\n"
        "  # Orphaned docs\n"
        "\n"
        "\n"
        "  def email\n"
        "  end\n"
        "end\n",
        encoding="utf-8",
    )
    return source


@pytest.fixture
def sample_entities(ruby_source):
    """Entities as the engine would export them for ``ruby_source``."""
    path = str(ruby_source)
    return [
        DocumentableEntity(
            path="User",
            kind="class",
            file=path,
            line=4,
            docstring="A user",
        ),
        DocumentableEntity(
            path="User#name",
            file=path,
            line=7,
            visibility="public",
            docstring="",
        ),
        DocumentableEntity(
            path="User#email",
            file=path,
            line=13,
            visibility="public",
            docstring="",
        ),
        DocumentableEntity(
            path="User#secret",
            file=path,
            line=20,
            visibility="private",
        ),
    ]


@pytest.fixture
def sample_registry(sample_entities):
    return EntityRegistry(sample_entities)
