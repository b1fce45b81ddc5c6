"""
Tests for the external-process strategy, run against the fake engine.
"""

import shlex

import pytest

from doclint.config import settings
from doclint.core.config_resolver import ConfigResolver
from doclint.core.execution.command_cache import CommandCache, shared_command_cache
from doclint.core.execution.engine_database import clear_engine_database, database_dir
from doclint.core.execution.external_process import (
    ExternalProcessExecutor,
    build_command,
    engine_argv,
)
from doclint.core.rules.undocumented_boolean_methods import RULE as BOOLEAN_RULE
from doclint.core.rules.unknown_tag import RULE as UNKNOWN_TAG_RULE


@pytest.fixture
def engine_log(tmp_path, monkeypatch):
    log = tmp_path / "invocations.log"
    monkeypatch.setenv("FAKE_ENGINE_LOG", str(log))
    return log


def _invocations(log):
    return log.read_text().splitlines() if log.exists() else []


def test_command_composition(fake_engine):
    argv = engine_argv(BOOLEAN_RULE, ["--private"])
    command = build_command(argv, "/tmp/list with space.txt")

    assert command.startswith("cat '/tmp/list with space.txt' | xargs ")
    assert shlex.quote(BOOLEAN_RULE.query) in command
    assert argv[-3:] == ["-q", "-b", database_dir()]
    assert "--private" in argv
    assert argv[argv.index("--query") + 1] == BOOLEAN_RULE.query


def test_extra_flags_of_warning_rules(fake_engine):
    argv = engine_argv(UNKNOWN_TAG_RULE)
    assert "stats" in argv
    assert "--compact" in argv
    assert "--query" not in argv


def test_runs_engine_and_separates_streams(fake_engine, tmp_path):
    source = tmp_path / "my file.rb"
    source.write_text("class A; end\n")

    result = ExternalProcessExecutor(ConfigResolver()).execute(BOOLEAN_RULE, [str(source)])

    assert result.exit_status == 0
    assert result.stdout.splitlines() == [f"{source}:10: Foo#valid?", "missing_return"]
    assert "diagnostics go to stderr" in result.stderr
    assert "diagnostics" not in result.stdout

    records = BOOLEAN_RULE.parser.parse(result.stdout)
    assert records[0]["location"] == str(source)
    assert records[0]["reason"] == "missing_return"


def test_non_zero_exit_without_output_is_inconclusive(fake_engine, monkeypatch):
    monkeypatch.setenv("FAKE_ENGINE_EXIT", "3")
    result = ExternalProcessExecutor(ConfigResolver()).execute(BOOLEAN_RULE, ["lib/a.rb"])
    assert result.exit_status != 0
    assert result.stdout == ""
    assert result.inconclusive is True


def test_empty_selection_does_not_spawn(fake_engine, engine_log):
    result = ExternalProcessExecutor(ConfigResolver()).execute(BOOLEAN_RULE, [])
    assert result.stdout == ""
    assert result.exit_status == 0
    assert _invocations(engine_log) == []


def test_identical_commands_are_cached(fake_engine, engine_log):
    executor = ExternalProcessExecutor(ConfigResolver(), cache=CommandCache())

    first = executor.execute(BOOLEAN_RULE, ["lib/a.rb"])
    second = executor.execute(BOOLEAN_RULE, ["lib/a.rb"])
    executor.execute(BOOLEAN_RULE, ["lib/b.rb"])

    assert first == second
    assert len(_invocations(engine_log)) == 2
    assert executor.cache.stats() == {"total_entries": 2, "hits": 1, "misses": 2}


def test_shared_cache_reset(fake_engine, engine_log):
    from doclint.core.execution.command_cache import reset_command_cache

    executor = ExternalProcessExecutor(ConfigResolver())
    executor.execute(BOOLEAN_RULE, ["lib/a.rb"])
    assert shared_command_cache().size == 1

    reset_command_cache()
    executor.execute(BOOLEAN_RULE, ["lib/a.rb"])
    assert len(_invocations(engine_log)) == 2


def test_engine_database_is_process_scoped(monkeypatch):
    monkeypatch.setattr(settings, "engine_db_dir", None)
    first = database_dir()
    assert database_dir() == first

    clear_engine_database()
    assert database_dir() != first


def test_engine_database_can_be_pinned(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "engine_db_dir", str(tmp_path / "db"))
    assert database_dir() == str(tmp_path / "db")


@pytest.fixture
def staging_root(tmp_path, monkeypatch):
    import tempfile

    root = tmp_path / "staging"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    monkeypatch.setattr(settings, "engine_db_dir", str(tmp_path / "db"))
    return root


def _staged(root):
    return [p.name for p in root.iterdir() if p.name.startswith("doclint_")]


def test_staging_directory_removed_after_run(fake_engine, staging_root):
    executor = ExternalProcessExecutor(ConfigResolver(), cache=CommandCache())
    result = executor.execute(BOOLEAN_RULE, ["lib/a.rb"])
    assert result.exit_status == 0
    assert _staged(staging_root) == []


def test_staging_directory_removed_when_spawn_fails(fake_engine, staging_root, monkeypatch):
    import subprocess

    def explode(*args, **kwargs):
        raise OSError("cannot spawn")

    monkeypatch.setattr(subprocess, "run", explode)
    executor = ExternalProcessExecutor(ConfigResolver(), cache=CommandCache())
    with pytest.raises(OSError):
        executor.execute(BOOLEAN_RULE, ["lib/a.rb"])
    assert _staged(staging_root) == []


def test_staging_directory_removed_on_timeout(fake_engine, staging_root, monkeypatch):
    import subprocess

    def too_slow(command, **kwargs):
        raise subprocess.TimeoutExpired(command, kwargs.get("timeout") or 1)

    monkeypatch.setattr(subprocess, "run", too_slow)
    monkeypatch.setattr(settings, "engine_timeout", 1)
    executor = ExternalProcessExecutor(ConfigResolver(), cache=CommandCache())
    result = executor.execute(BOOLEAN_RULE, ["lib/a.rb"])
    assert result.exit_status == 124
    assert result.inconclusive is True
    assert _staged(staging_root) == []
