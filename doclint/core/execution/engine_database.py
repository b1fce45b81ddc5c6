"""
Engine Database - Process-scoped build directory of the external engine.

Every external invocation in a process points the engine at the same
database directory so it is parsed once. ``settings.engine_db_dir`` pins
it; otherwise a temporary directory is created on first use.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import threading

from doclint.config import settings

logger = logging.getLogger("doclint.engine_db")

_lock = threading.Lock()
_temp_dir: str | None = None


def database_dir() -> str:
    global _temp_dir

    if settings.engine_db_dir:
        return settings.engine_db_dir

    with _lock:
        if _temp_dir is None:
            _temp_dir = tempfile.mkdtemp(prefix="doclint_db_")
            logger.debug(f"Created engine database dir {_temp_dir}")
        return _temp_dir


def clear_engine_database() -> None:
    """Drop the temporary database dir; the next invocation starts fresh."""
    global _temp_dir

    with _lock:
        if _temp_dir is not None:
            shutil.rmtree(_temp_dir, ignore_errors=True)
            _temp_dir = None
