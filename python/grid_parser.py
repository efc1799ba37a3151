"""
Construction utilities for zeta values.

Provides:
1. A compact text format for grids (with nesting and named transforms)
2. Shorthand constructors for the common building blocks
"""

from __future__ import annotations

import re
from typing import Mapping

from zeta import FAILURE, SUCCESS, Grid, Operand, Transform, TransformFn, Value, encode

__all__ = [
    "empty",
    "func",
    "grid",
    "omega",
    "operand_of",
    "parse_cell",
    "parse_grid",
    "parse_grids",
    "zn",
]

_INT_RE = re.compile(r"^-?\d+$")


# =============================================================================
# Shorthands
# =============================================================================


def omega() -> Value:
    """The failure atom."""
    return FAILURE


def empty() -> Value:
    """The success marker: one row, zero cells."""
    return SUCCESS


def zn(n: int) -> Grid:
    return encode(n)


def func(fn: TransformFn, label: str) -> Transform:
    return Transform(fn, label)


def grid(*rows: list[Value] | tuple[Value, ...]) -> Grid:
    """Build a grid from row sequences: grid([a, b], [c, d])."""
    return Grid(tuple(tuple(row) for row in rows))


# =============================================================================
# Text Format
# =============================================================================


def _split_top_level(text: str, sep: str) -> list[str]:
    """Split on sep, ignoring separators inside parentheses or braces."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char in "({":
            depth += 1
        elif char in ")}":
            depth -= 1
            if depth < 0:
                raise ValueError(f"Unbalanced '{char}' in: '{text}'")
        if char == sep and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    if depth != 0:
        raise ValueError(f"Unclosed bracket in: '{text}'")
    parts.append("".join(current))
    return parts


def parse_cell(
    token: str,
    transforms: Mapping[str, Transform] | None = None,
) -> Value:
    """
    Parse a single cell token.

    Tokens:
    - 'o': failure atom
    - 'e': success marker
    - Signed integer ('3', '-2'): encoded integer grid
    - '{name}': transform looked up in transforms
    - '(...)': nested grid in the grid format

    Raises:
        ValueError: For unknown tokens or transform names
    """
    if token == "o":
        return FAILURE
    if token == "e":
        return SUCCESS
    if _INT_RE.match(token):
        return encode(int(token))
    if token.startswith("{") and token.endswith("}") and len(token) >= 3:
        name = token[1:-1]
        available = transforms or {}
        if name not in available:
            raise ValueError(
                f"Unknown transform '{name}'\n"
                f"  Available transforms: {', '.join(sorted(available)) or '(none)'}"
            )
        return available[name]
    if token.startswith("(") and token.endswith(")"):
        return parse_grid(token[1:-1], transforms)

    raise ValueError(
        f"Invalid cell string: '{token}'\n"
        f"  Valid formats:\n"
        f"    - 'o': failure atom\n"
        f"    - 'e': success marker\n"
        f"    - Integer (e.g., '3', '-2'): encoded integer\n"
        f"    - '{{name}}': named transform\n"
        f"    - '(...)': nested grid"
    )


def parse_grid(
    definition: str,
    transforms: Mapping[str, Transform] | None = None,
    strict: bool = False,
) -> Grid:
    """
    Parse a grid from a compact string format.

    Format:
    - Rows separated by |
    - Cells separated by spaces (repeated spaces are ignored)
    - Cells use the parse_cell tokens; parentheses nest a whole grid
    - An empty definition is the grid with no rows
    - A row with no tokens is a zero-width row, so '|' is two empty rows

    Example:
        parse_grid("o {inc}|(o|o) e", {"inc": inc})
        Creates:
        - Row 0: [FAILURE, inc]
        - Row 1: [Grid(((FAILURE,), (FAILURE,))), SUCCESS]

    Args:
        definition: Grid definition string
        transforms: Named transforms available to '{name}' tokens
        strict: If True, reject rows whose length differs from row 0

    Returns:
        The parsed Grid
    """
    if not definition.strip():
        return Grid()

    row_strings = _split_top_level(definition, "|")
    rows: list[tuple[Value, ...]] = []

    for row_idx, row_str in enumerate(row_strings):
        cells: list[Value] = []
        tokens = [t for t in _split_top_level(row_str, " ") if t]
        for col_idx, token in enumerate(tokens):
            try:
                cells.append(parse_cell(token, transforms))
            except ValueError as exc:
                raise ValueError(
                    f"{exc}\n"
                    f"  Row {row_idx}: \"{row_str.strip()}\"\n"
                    f"  Position: column {col_idx}"
                ) from exc
        rows.append(tuple(cells))

    if strict and rows:
        cols = len(rows[0])
        mismatched = [(i, len(row)) for i, row in enumerate(rows) if len(row) != cols]
        if mismatched:
            error_msg = (
                f"Inconsistent row lengths\n"
                f"  Expected: {cols} columns (from row 0)\n"
                f"  Mismatched rows:\n"
            )
            for row_idx, actual_cols in mismatched:
                error_msg += f"    Row {row_idx}: {actual_cols} columns - \"{row_strings[row_idx].strip()}\"\n"
            error_msg += "  All rows must have the same number of cells"
            raise ValueError(error_msg)

    return Grid(tuple(rows))


def parse_grids(
    definitions: Mapping[str, str],
    transforms: Mapping[str, Transform] | None = None,
    strict: bool = False,
) -> dict[str, Grid]:
    """
    Parse several named grids.

    Example:
        {
            "main": "{inc} {inc}|o e",
            "three": "3"
        }
    """
    return {
        name: parse_grid(definition, transforms, strict)
        for name, definition in definitions.items()
    }


def operand_of(definition: str, transforms: Mapping[str, Transform] | None = None) -> Operand:
    """Parse a grid and wrap it in a fresh operand handle."""
    return Operand(parse_grid(definition, transforms))
