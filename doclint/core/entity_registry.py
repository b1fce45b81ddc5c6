"""
Entity Registry - Read-only store of the documentation model.

Holds the entities exported by the external documentation engine for one
run, plus any warnings the engine emitted while building them. Rules never
see the registry directly; they get a filtered view per rule.
"""

from __future__ import annotations

import logging
import os
import re
import threading
from functools import lru_cache
from typing import Any, Iterable

from doclint.models.entity_models import DocumentableEntity, Visibility

logger = logging.getLogger("doclint.registry")

# Visibilities admitted by each requested scope.
_SCOPES: dict[Visibility, set[Visibility]] = {
    Visibility.PUBLIC: {Visibility.PUBLIC},
    Visibility.PROTECTED: {Visibility.PUBLIC, Visibility.PROTECTED},
    Visibility.PRIVATE: {Visibility.PUBLIC, Visibility.PROTECTED, Visibility.PRIVATE},
}

_BRACES = re.compile(r"\{([^{}]*)\}")


def _expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives into plain glob patterns."""
    match = _BRACES.search(pattern)
    if not match:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(_expand_braces(head + option + tail))
    return expanded


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> re.Pattern[str]:
    """
    Path-aware glob: ``*`` and ``?`` stay inside one path segment, ``**/``
    spans zero or more directories, ``[...]`` is a character class.
    """
    parts: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        char = pattern[i]
        if pattern.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif char == "*":
            parts.append("[^/]*")
            i += 1
        elif char == "?":
            parts.append("[^/]")
            i += 1
        elif char == "[":
            end = pattern.find("]", i + 2)
            if end == -1:
                parts.append(re.escape(char))
                i += 1
                continue
            body = pattern[i + 1 : end]
            if body.startswith("!"):
                body = "^" + body[1:]
            parts.append(f"[{body}]")
            i = end + 1
        else:
            parts.append(re.escape(char))
            i += 1
    return re.compile("".join(parts) + r"\Z")


def path_matches(path: str, patterns: Iterable[str]) -> bool:
    """Shell-glob match of a file path against exclusion patterns.

    Both the path as given and its form relative to the working directory
    are tried.
    """
    candidates = {path.replace(os.sep, "/")}
    if os.path.isabs(path):
        cwd = os.getcwd()
        if path.startswith(cwd + os.sep):
            candidates.add(os.path.relpath(path, cwd).replace(os.sep, "/"))

    for pattern in patterns:
        for variant in _expand_braces(pattern):
            regex = _compile_glob(variant)
            if any(regex.match(candidate) for candidate in candidates):
                return True
    return False


class EntityRegistry:
    """In-memory documentation model shared by every rule of a run."""

    def __init__(
        self,
        entities: Iterable[DocumentableEntity] | None = None,
        warnings: list[str] | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._entities: list[DocumentableEntity] = list(entities or [])
        self._warnings = list(warnings) if warnings is not None else None

    @classmethod
    def from_export(
        cls,
        objects: Iterable[dict[str, Any]],
        warnings: list[str] | None = None,
    ) -> EntityRegistry:
        """Build a registry from the engine's JSON export."""
        entities = [DocumentableEntity.model_validate(obj) for obj in objects]
        logger.debug(f"Loaded {len(entities)} entities from export")
        return cls(entities, warnings)

    @property
    def warnings(self) -> list[str] | None:
        """Engine warnings captured while building the model, None if not captured."""
        return self._warnings

    def all_objects(self) -> list[DocumentableEntity]:
        return list(self._entities)

    def files(self) -> list[str]:
        """Distinct entity files, in first-seen order."""
        seen: dict[str, None] = {}
        for entity in self._entities:
            if entity.file:
                seen.setdefault(entity.file, None)
        return list(seen)

    def objects_for_rule(
        self,
        visibility: Visibility | str,
        file_excludes: Iterable[str] = (),
        file_selection: Iterable[str] | None = None,
    ) -> list[DocumentableEntity]:
        """
        Filtered view of the model for one rule.

        Args:
            visibility: public, protected, private or all.
            file_excludes: Glob patterns; entities in matching files are dropped.
            file_selection: Only entities from these files (None = all files).

        Returns:
            Matching entities in registry order.
        """
        visibility = Visibility(visibility)
        objects = self.all_objects()

        if visibility is not Visibility.ALL:
            allowed = _SCOPES[visibility]
            objects = [
                obj for obj in objects if obj.visibility is None or obj.visibility in allowed
            ]

        selection = list(file_selection) if file_selection is not None else []
        if selection:
            expanded = {os.path.abspath(f) for f in selection}
            objects = [
                obj for obj in objects if obj.file and os.path.abspath(obj.file) in expanded
            ]

        excludes = list(file_excludes)
        if excludes:
            objects = [
                obj for obj in objects if not (obj.file and path_matches(obj.file, excludes))
            ]

        return objects

    def clear(self) -> None:
        with self._lock:
            self._entities = []
            self._warnings = None
