"""
console.py - Console output helpers for awsutils

Coloured status messages (errors, warnings, progress) are written to stderr
so that table and CSV output on stdout can be piped elsewhere untouched.
"""

import sys
from typing import List, Sequence

from colorama import init, Fore, Style

# Spaces between table columns
TABLE_PADDING = 3

USE_COLOR = True


def setup_console(color: bool = True) -> None:
    """Initialise colorama and enable or disable coloured diagnostics."""
    global USE_COLOR
    USE_COLOR = color
    if color:
        init()


def colorize(text: str, color_code: str) -> str:
    """Apply color to text if coloured output is enabled."""
    if USE_COLOR:
        return f"{color_code}{text}{Style.RESET_ALL}"
    return text


def error(msg: str) -> None:
    """Print error message."""
    print(colorize(f"ERROR: {msg}", Fore.RED), file=sys.stderr)


def warning(msg: str) -> None:
    """Print warning message."""
    print(colorize(f"WARNING: {msg}", Fore.YELLOW), file=sys.stderr)


def info(msg: str) -> None:
    """Print info message."""
    print(colorize(msg, Fore.CYAN), file=sys.stderr)


def success(msg: str) -> None:
    """Print success message."""
    print(colorize(msg, Fore.GREEN), file=sys.stderr)


def format_table(columns: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """
    Lay out a header and rows as left-aligned, space separated columns.

    Every column except the last is padded to its widest cell plus
    TABLE_PADDING spaces; the last cell of each line is written as-is.
    """
    lines = [list(columns)] + [[str(cell) for cell in row] for row in rows]
    widths = [max(len(line[i]) for line in lines) for i in range(len(columns))]

    output: List[str] = []
    for line in lines:
        cells = [cell.ljust(widths[i] + TABLE_PADDING) for i, cell in enumerate(line[:-1])]
        cells.append(line[-1])
        output.append("".join(cells))
    return "\n".join(output)
