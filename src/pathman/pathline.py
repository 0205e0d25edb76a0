"""Locate and edit directories inside `export PATH="..."` lines.

Only lines of the form::

    export PATH="/some/dir:/other/dir:$PATH"

are understood. The value is treated as a `:`-separated list, so a directory
matches a whole entry and never a prefix or suffix of one (`/usr/bin` is not
found in `/usr/bin2`). When several export lines exist, the first one in the
file that holds the directory is used.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from pathman.errors import DirectoryNotFound

EXPORT_LINE_RE = re.compile(
    r'^[ \t]*export[ \t]+PATH="(?P<value>[^"\n]*)"[^\n]*$', re.MULTILINE
)

# Values left behind that no longer add anything to PATH.
_EMPTY_VALUES = ("", "$PATH", "${PATH}")

# Three or more line breaks = two or more consecutive empty lines.
_BLANK_RUN_RE = re.compile(r"(?:\r?\n){3,}")
_LINE_BREAK_RE = re.compile(r"\r?\n")


class AddResult(Enum):
    APPLIED = "applied"
    ALREADY_PRESENT = "already_present"


@dataclass(frozen=True)
class MatchSpan:
    """Offsets of a directory entry and of the export line holding it."""

    start: int
    end: int
    line_start: int
    line_end: int
    value_start: int
    value_end: int


def export_line(directory: str) -> str:
    return f'export PATH="{directory}:$PATH"'


def _newline(content: str) -> str:
    """Line break style of `content`: CRLF if it uses any, else LF."""
    return "\r\n" if "\r\n" in content else "\n"


def _collapse_blank_runs(match: re.Match) -> str:
    return "".join(_LINE_BREAK_RE.findall(match.group())[:2])


def find(content: str, directory: str) -> MatchSpan | None:
    """Return the span of `directory` in the first export line listing it, or None."""
    for match in EXPORT_LINE_RE.finditer(content):
        value_start = match.start("value")
        offset = value_start
        for entry in match.group("value").split(":"):
            if entry == directory:
                return MatchSpan(
                    start=offset,
                    end=offset + len(entry),
                    line_start=match.start(),
                    line_end=match.end(),
                    value_start=value_start,
                    value_end=match.end("value"),
                )
            offset += len(entry) + 1
    return None


def path_entries(content: str) -> list[tuple[int, list[str]]]:
    """Return (line number, entries) for every export line, in file order."""
    result = []
    for match in EXPORT_LINE_RE.finditer(content):
        lineno = content.count("\n", 0, match.start()) + 1
        result.append((lineno, match.group("value").split(":")))
    return result


def apply_add(content: str, directory: str) -> tuple[str, AddResult]:
    """Append an export line for `directory` unless it is already on PATH."""
    if find(content, directory) is not None:
        return content, AddResult.ALREADY_PRESENT

    newline = _newline(content)
    if content and not content.endswith("\n"):
        content += newline
    return content + export_line(directory) + newline, AddResult.APPLIED


def apply_remove(content: str, directory: str) -> str:
    """Remove `directory` from the first export line holding it.

    Raises DirectoryNotFound when no export line lists it. An export line
    left with nothing but $PATH is dropped, runs of empty lines are collapsed
    and the document is trimmed.
    """
    span = find(content, directory)
    if span is None:
        raise DirectoryNotFound(directory)
    newline = _newline(content)

    value = content[span.value_start:span.value_end]
    start = span.start - span.value_start
    end = span.end - span.value_start
    if end < len(value):
        # drop the entry and the ':' after it
        new_value = value[:start] + value[end + 1:]
    elif start > 0:
        # last entry: drop the ':' before it
        new_value = value[:start - 1]
    else:
        new_value = ""

    if new_value in _EMPTY_VALUES:
        line_end = span.line_end
        if content[line_end:line_end + 1] == "\n":
            line_end += 1
        content = content[:span.line_start] + content[line_end:]
    else:
        content = content[:span.value_start] + new_value + content[span.value_end:]

    content = _BLANK_RUN_RE.sub(_collapse_blank_runs, content).strip()
    return content + newline if content else ""
