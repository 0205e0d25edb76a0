"""Console output helpers."""

from __future__ import annotations

import sys


def error(message: str) -> None:
    """Print an error message to stderr."""
    print(f"Error: {message}", file=sys.stderr)


def warn(message: str) -> None:
    """Print a warning to stderr."""
    print(f"Warning: {message}", file=sys.stderr)


def info(message: str) -> None:
    """Print an info message."""
    print(message)


def print_table(headers: list[str], rows: list[list[str]]) -> None:
    """Print a simple formatted table to stdout."""
    if not rows:
        print("  (none)")
        return

    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            col_widths[i] = max(col_widths[i], len(cell))

    print("  ".join(h.ljust(col_widths[i]) for i, h in enumerate(headers)))
    print("  ".join("-" * col_widths[i] for i in range(len(headers))))
    for row in rows:
        print("  ".join(cell.ljust(col_widths[i]) for i, cell in enumerate(row)))
