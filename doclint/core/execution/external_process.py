"""
External Process Executor - Runs a rule inside the documentation engine.

The rule only contributes a query expression and extra flags. The command is

    cat <file-list> | xargs <engine> <subcommand> <flags> --query <query> -q -b <db>

with every path and flag quoted for the host shell. stdout, stderr and the
exit status are captured separately; a non-zero exit is passed through, not
raised.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import tempfile
import time
from typing import Sequence

from doclint.config import settings
from doclint.core.config_resolver import ConfigResolver
from doclint.core.execution.command_cache import CommandCache, shared_command_cache
from doclint.core.execution.engine_database import database_dir
from doclint.models.rule_models import ExecutionResult, RuleDescriptor

logger = logging.getLogger("doclint.executor")

FILE_LIST_NAME = "files.txt"

# Exit status reported when an engine run is abandoned at the timeout
TIMEOUT_EXIT_STATUS = 124


def engine_argv(
    rule: RuleDescriptor, engine_options: Sequence[str] = ()
) -> list[str]:
    """Unquoted engine argv for a rule, without the file list."""
    argv = shlex.split(settings.engine_command)
    argv.append(rule.subcommand)
    argv.extend(settings.engine_default_options)
    argv.extend(rule.extra_flags)
    argv.extend(engine_options)
    if isinstance(rule.query, str) and rule.query:
        argv.extend(["--query", rule.query])
    argv.extend(["-q", "-b", database_dir()])
    return argv


def build_command(argv: Sequence[str], file_list_path: str) -> str:
    quoted = " ".join(shlex.quote(arg) for arg in argv)
    return f"cat {shlex.quote(file_list_path)} | xargs {quoted}"


class ExternalProcessExecutor:
    """Spawns the engine once per rule and file selection."""

    def __init__(self, config: ConfigResolver, cache: CommandCache | None = None) -> None:
        self.config = config
        self.cache = cache or shared_command_cache()

    def execute(self, rule: RuleDescriptor, file_selection: Sequence[str]) -> ExecutionResult:
        files = list(file_selection)
        if not files:
            return ExecutionResult()

        argv = engine_argv(rule, self.config.engine_options(rule.id))
        return self.run_argv(rule.id, argv, files)

    def run_argv(self, label: str, argv: list[str], files: Sequence[str]) -> ExecutionResult:
        """Run an engine argv over a file list, through the command cache."""
        files = list(files)
        if not files:
            return ExecutionResult()

        command_hash = self.cache.hash_command(argv, files)
        cached = self.cache.get(command_hash)
        if cached is not None:
            logger.debug(f"[{label}] Command cache hit")
            return cached

        result = self._run(label, argv, files)
        self.cache.put(command_hash, result)
        return result

    def _run(self, label: str, argv: list[str], files: list[str]) -> ExecutionResult:
        start = time.monotonic()

        with tempfile.TemporaryDirectory(prefix="doclint_") as staging:
            file_list = os.path.join(staging, FILE_LIST_NAME)
            with open(file_list, "w", encoding="utf-8") as f:
                # xargs honours shell-style quoting in its input
                f.write("\n".join(shlex.quote(path) for path in files))
                f.write("\n")

            command = build_command(argv, file_list)
            logger.debug(f"[{label}] Running: {command}")

            try:
                proc = subprocess.run(
                    command,
                    shell=True,
                    capture_output=True,
                    text=True,
                    env=os.environ.copy(),
                    timeout=settings.engine_timeout,
                )
            except subprocess.TimeoutExpired:
                logger.warning(
                    f"[{label}] Engine did not finish within {settings.engine_timeout}s"
                )
                return ExecutionResult(
                    stdout="",
                    stderr=f"timed out after {settings.engine_timeout}s",
                    exit_status=TIMEOUT_EXIT_STATUS,
                )

        elapsed = (time.monotonic() - start) * 1000
        logger.debug(f"[{label}] Engine exited {proc.returncode} in {elapsed:.1f}ms")

        return ExecutionResult(
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            exit_status=proc.returncode,
        )
