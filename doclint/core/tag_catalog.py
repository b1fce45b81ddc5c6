"""
Known tag catalogue - the tag and directive names the engine understands.

Process-scoped and memoized; ``reset_tag_catalog()`` drops registrations
and the memoized sets (used between runs and by tests).
"""

from __future__ import annotations

import difflib
import threading
from typing import Iterable

KNOWN_TAGS: tuple[str, ...] = (
    "abstract",
    "api",
    "attr",
    "attr_reader",
    "attr_writer",
    "author",
    "deprecated",
    "example",
    "note",
    "option",
    "overload",
    "param",
    "private",
    "raise",
    "return",
    "see",
    "since",
    "todo",
    "version",
    "yield",
    "yieldparam",
    "yieldreturn",
)

KNOWN_DIRECTIVES: tuple[str, ...] = (
    "attribute",
    "endgroup",
    "group",
    "macro",
    "method",
    "parse",
    "scope",
    "visibility",
)

_lock = threading.Lock()
_extra_tags: set[str] = set()
_extra_directives: set[str] = set()
_known_tags: frozenset[str] | None = None
_known_directives: frozenset[str] | None = None


def known_tags() -> frozenset[str]:
    global _known_tags
    with _lock:
        if _known_tags is None:
            _known_tags = frozenset(KNOWN_TAGS) | frozenset(_extra_tags)
        return _known_tags


def known_directives() -> frozenset[str]:
    global _known_directives
    with _lock:
        if _known_directives is None:
            _known_directives = frozenset(KNOWN_DIRECTIVES) | frozenset(_extra_directives)
        return _known_directives


def register_tags(names: Iterable[str], directives: bool = False) -> None:
    """Teach the catalogue about custom tags (or directives) defined by a project."""
    global _known_tags, _known_directives
    with _lock:
        target = _extra_directives if directives else _extra_tags
        target.update(name.lstrip("@!") for name in names)
        _known_tags = None
        _known_directives = None


def reset_tag_catalog() -> None:
    global _known_tags, _known_directives
    with _lock:
        _extra_tags.clear()
        _extra_directives.clear()
        _known_tags = None
        _known_directives = None


def suggest(name: str, candidates: Iterable[str]) -> str | None:
    """Closest known name for a misspelled one, or None."""
    if not name:
        return None
    matches = difflib.get_close_matches(name, sorted(candidates), n=1, cutoff=0.6)
    return matches[0] if matches else None
