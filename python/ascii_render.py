"""
ASCII rendering for zeta values.

Provides:
1. Inline rendering of any value, with bracketed multi-line grids
2. Rendering of evaluation results and individual trace steps
3. Grid rendering with a highlighted cursor cell (for stepping)
"""

from __future__ import annotations

import logging
from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from zeta import Atom, EvaluationResult, Grid, Step, Transform, Value

logger = logging.getLogger(__name__)

ATOM_TEXT = "*O*"
NESTED_TEXT = "*Z*"  # Stand-in for a multi-row grid inside a cell


def _plain(s: str) -> str:
    return s


# =============================================================================
# Values
# =============================================================================


def _cell_text(value: Value, color: bool) -> tuple[str, int]:
    """Return (display text, visible width) for a value placed inside a grid row."""
    if isinstance(value, Grid) and value.rows > 1:
        text = NESTED_TEXT
        return (chalk.yellow(text) if color else text, len(text))
    plain = render_value(value)
    if not color:
        return (plain, len(plain))
    return (render_value(value, color=True), len(plain))


def _column_widths(grid: Grid) -> list[int]:
    widths = [0] * max((len(row) for row in grid.cells), default=0)
    for row in grid.cells:
        for c_idx, cell in enumerate(row):
            _, width = _cell_text(cell, color=False)
            widths[c_idx] = max(widths[c_idx], width)
    return widths


def render_value(value: Value, color: bool = False) -> str:
    """
    Render any value as text.

    - Atom: *O*
    - Transform: {label}
    - Grid with no rows: []
    - Single-row grid: [ a b ]
    - Multi-row grid: one line per row inside ⎡ ⎤ / ⎢ ⎥ / ⎣ ⎦ brackets,
      columns padded to a common width. Multi-row grids nested in a cell
      show as *Z*. Short rows are padded with blanks.

    Args:
        value: The value to render
        color: If True, add ANSI colors (atoms red, transforms cyan)

    Returns:
        Rendered string, identical for equal values
    """
    match value:
        case Atom():
            return chalk.red(ATOM_TEXT) if color else ATOM_TEXT
        case Transform(label=label):
            text = "{" + label + "}"
            return chalk.cyan(text) if color else text
        case Grid():
            return "\n".join(render_grid_lines(value, color=color))
        case _:
            raise ValueError(f"Unknown value type: {value!r}")


def render_grid_lines(
    grid: Grid,
    color: bool = False,
    highlight: tuple[int, int] | None = None,
) -> list[str]:
    """
    Render a grid as a list of lines.

    Args:
        grid: The grid to render
        color: If True, add ANSI colors
        highlight: Optional (row, col) cell to show with a white background

    Returns:
        One line per row (a single '[]' line for a grid with no rows)
    """
    if grid.rows == 0:
        return ["[]"]

    widths = _column_widths(grid)
    logger.debug("render_grid_lines: %d rows, column widths=%s", grid.rows, widths)
    bracket: Callable[[str], str] = chalk.yellow if color else _plain

    lines: list[str] = []
    for r_idx, row in enumerate(grid.cells):
        parts: list[str] = []
        for c_idx, width in enumerate(widths):
            if c_idx < len(row):
                text, visible = _cell_text(row[c_idx], color)
            else:
                text, visible = ("", 0)
            content = text + " " * (width - visible)
            if highlight == (r_idx, c_idx):
                content = chalk.bgWhite.black(content)
            parts.append(content + " ")

        if grid.rows == 1:
            left, right = "[", "]"
        elif r_idx == 0:
            left, right = "⎡", "⎤"
        elif r_idx == grid.rows - 1:
            left, right = "⎣", "⎦"
        else:
            left, right = "⎢", "⎥"
        lines.append(bracket(left) + " " + "".join(parts) + bracket(right))

    return lines


# =============================================================================
# Evaluation
# =============================================================================


def render_result(res: EvaluationResult, color: bool = False) -> str:
    """Render an evaluation record as a labelled block."""
    heading: Callable[[str], str] = chalk.bold if color else _plain
    return "\n".join(
        [
            heading("Tried:"),
            render_value(res.operator, color),
            heading("With:"),
            render_value(res.operand, color),
            f"{heading('Successes:')} {res.successes}",
            f"{heading('Failures:')} {res.failures}",
            heading("Result:"),
            render_value(res.result, color),
            f"{heading('Stopped:')} {res.termination_reason.value}",
        ]
    )


def render_step(step: Step, color: bool = False) -> str:
    """One-line summary of a trace step: (row, col) cell -> ok|fail."""
    cell = _cell_text(step.cell, color)[0].replace("\n", " ")
    if step.failed:
        outcome = chalk.red("fail") if color else "fail"
    else:
        outcome = chalk.green("ok") if color else "ok"
    return f"({step.row}, {step.col}) {cell} -> {outcome}"


def render_cursor(grid: Grid, row: int, col: int, color: bool = True) -> str:
    """Render a grid with the cursor cell highlighted. Out-of-range cursors highlight nothing."""
    return "\n".join(render_grid_lines(grid, color=color, highlight=(row, col)))
