"""
Line Collector - Append-only output buffer for in-process rule callbacks.
"""

from __future__ import annotations

import threading


class LineCollector:
    """Collects protocol lines emitted by a rule, in emission order."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._lines: list[str] = []

    def puts(self, line: object = "") -> None:
        """Append one line. Embedded newlines are kept as separate lines."""
        with self._lock:
            self._lines.extend(str(line).split("\n"))

    def extend(self, lines: list[str]) -> None:
        with self._lock:
            self._lines.extend(lines)

    @property
    def lines(self) -> list[str]:
        with self._lock:
            return list(self._lines)

    def to_stdout(self) -> str:
        with self._lock:
            return "\n".join(self._lines)
