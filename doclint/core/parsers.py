"""
Output Protocol Parsers - Turn raw rule output into violation records.

Both execution strategies emit the same line-oriented text, so one family
of parsers serves either. Parsers are pure and total: foreign or malformed
text is dropped, never raised on.

Two-line format (rule queries):

    lib/a.rb:10: Foo#bar
    single:1

One-line format (engine diagnostics passed through):

    [warn]: Unknown tag @exmaple in file `lib/a.rb` near line 3
"""

from __future__ import annotations

import re
from typing import Mapping, Pattern, Sequence

from doclint.models.rule_models import ViolationRecord

LOCATION_PATTERN = re.compile(r"^(.+):(\d+): (.+)$")


class TwoLineParser:
    """Parser for location-line + payload-line output."""

    def __init__(self, fields: Sequence[str] = (), separator: str = "|") -> None:
        self.fields = tuple(fields)
        self.separator = separator

    def __call__(self, raw: str | None) -> list[ViolationRecord]:
        return self.parse(raw)

    def parse(self, raw: str | None) -> list[ViolationRecord]:
        if not raw:
            return []

        records: list[ViolationRecord] = []
        lines = raw.splitlines()

        i = 0
        while i < len(lines):
            location = LOCATION_PATTERN.match(lines[i])
            if not location:
                i += 1
                continue

            # A location line without a payload line cannot be reported
            if i + 1 >= len(lines):
                break

            try:
                record = self.build_record(
                    location.group(1),
                    int(location.group(2)),
                    location.group(3),
                    lines[i + 1],
                )
            except (ValueError, IndexError, TypeError):
                record = None

            if record is not None:
                records.append(record)
            i += 2

        return records

    def split_payload(self, payload: str) -> dict[str, str]:
        if not self.fields:
            return {}
        parts = payload.split(self.separator, len(self.fields) - 1)
        parts += [""] * (len(self.fields) - len(parts))
        return dict(zip(self.fields, parts))

    def build_record(
        self, file: str, line: int, object_name: str, payload: str
    ) -> ViolationRecord | None:
        """Build one record. Subclasses coerce rule-specific fields here."""
        return {
            "location": file,
            "line": line,
            "object_name": object_name,
            **self.split_payload(payload),
        }


class OneLineParser:
    """Parser for single log-style lines selected by a ``general`` regexp."""

    def __init__(self, name: str, regexps: Mapping[str, str | Pattern[str]]) -> None:
        self.name = name
        self.regexps = {key: re.compile(value) for key, value in regexps.items()}

    def __call__(self, raw: str | None) -> list[ViolationRecord]:
        return self.parse(raw)

    def match(self, text: str, regexp_name: str) -> list[str]:
        """Captures of the named regexp, or an empty list when it does not match."""
        regexp = self.regexps.get(regexp_name)
        if regexp is None:
            return []
        found = regexp.search(text)
        return list(found.groups()) if found else []

    def parse(self, raw: str | None) -> list[ViolationRecord]:
        if not raw:
            return []

        general = self.regexps.get("general")
        if general is None:
            return []

        records: list[ViolationRecord] = []
        for row in raw.splitlines():
            if not general.search(row):
                continue

            line = _last(self.match(row, "line"))
            records.append(
                {
                    "name": self.name,
                    "message": _last(self.match(row, "message")),
                    "location": _last(self.match(row, "location")),
                    "line": int(line) if line and line.isdigit() else 0,
                }
            )

        return records


def _last(captures: list[str]) -> str | None:
    return captures[-1] if captures else None
