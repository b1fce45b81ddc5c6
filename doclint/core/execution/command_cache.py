"""
Command Cache - SHA-256 keyed results of external engine invocations.

Identical logical commands (argv plus file list) run once per process.
The staging path of the file list is not part of the key.
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Iterable

from doclint.models.rule_models import ExecutionResult

logger = logging.getLogger("doclint.cache")


@dataclass
class CacheEntry:
    """A cached engine result for one logical command."""

    command_hash: str
    result: ExecutionResult
    timestamp: float = field(default_factory=time.time)


class CommandCache:
    """
    In-memory command cache keyed by SHA-256 of the normalized command.

    Process-scoped; tests reset it through ``reset_command_cache()``.
    """

    def __init__(self) -> None:
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def hash_command(argv: Iterable[str], files: Iterable[str] = ()) -> str:
        """Compute SHA-256 of the command line and its file list."""
        normalized = "\0".join(argv) + "\n" + "\0".join(files)
        return hashlib.sha256(normalized.encode("utf-8")).hexdigest()

    def get(self, command_hash: str) -> ExecutionResult | None:
        with self._lock:
            entry = self._store.get(command_hash)
            if entry is None:
                self.misses += 1
                return None
            self.hits += 1
            return entry.result

    def put(self, command_hash: str, result: ExecutionResult) -> None:
        with self._lock:
            self._store[command_hash] = CacheEntry(command_hash=command_hash, result=result)

    def clear(self) -> None:
        """Clear all cached entries and statistics."""
        with self._lock:
            self._store.clear()
            self.hits = 0
            self.misses = 0

    @property
    def size(self) -> int:
        return len(self._store)

    def stats(self) -> dict[str, Any]:
        return {
            "total_entries": len(self._store),
            "hits": self.hits,
            "misses": self.misses,
        }


_shared_cache = CommandCache()


def shared_command_cache() -> CommandCache:
    return _shared_cache


def reset_command_cache() -> None:
    logger.debug("Resetting command cache")
    _shared_cache.clear()
