"""
Grids as programs: integer codec, staircase evaluation and grid algebra.

A grid is evaluated against an operand with a row/column cursor. A cell whose
result is the failure atom moves the cursor down (try the next alternative);
any other result moves it right (next step of the current plan). The column
never resets, so a later row resumes from the column where the previous row
stopped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from zeta_types import (
    FAILURE,
    SUCCESS,
    Atom,
    Grid,
    Operand,
    Transform,
    TransformFn,
    Value,
    apply_to,
    is_empty_grid,
    is_grid,
    is_terminal_failure,
    is_transform,
    is_value,
)

__all__ = [
    "Atom",
    "ColumnFallback",
    "DEFAULT_RULES",
    "DivisionGuard",
    "EvaluationResult",
    "EvaluationTrace",
    "FAILURE",
    "Grid",
    "Operand",
    "RuleSet",
    "SUCCESS",
    "Step",
    "TerminationReason",
    "Transform",
    "TransformFn",
    "Value",
    "add",
    "apply_to",
    "column_union",
    "decode",
    "divide",
    "encode",
    "evaluate",
    "is_empty_grid",
    "is_grid",
    "is_terminal_failure",
    "is_transform",
    "is_value",
    "multiply",
    "row_union",
    "subtract",
    "trace",
]

logger = logging.getLogger(__name__)


class TerminationReason(Enum):
    """Reason why evaluation stopped."""

    ROWS_EXHAUSTED = "rows_exhausted"  # Every alternative failed
    COLUMNS_EXHAUSTED = "columns_exhausted"  # A plan ran past the last column
    NOT_A_GRID = "not_a_grid"  # Operator was an atom or transform


class DivisionGuard(Enum):
    """Which zero divisors `divide` turns into FAILURE."""

    ZERO_VALUE = "zero_value"  # Empty grids and anything decoding to 0
    EMPTY_GRID = "empty_grid"  # Only empty grids; other zeros raise ZeroDivisionError


class ColumnFallback(Enum):
    """How `column_union` treats a non-grid operand."""

    ROW_UNION = "row_union"  # Delegate to row_union (historical behavior)
    WRAP = "wrap"  # Wrap as a 1x1 grid and join column-wise


@dataclass(frozen=True)
class RuleSet:
    """Rules governing operation behavior."""

    division_guard: DivisionGuard = DivisionGuard.ZERO_VALUE
    column_fallback: ColumnFallback = ColumnFallback.ROW_UNION


DEFAULT_RULES = RuleSet()


# =============================================================================
# Codec
# =============================================================================


def encode(n: int) -> Grid:
    """
    Encode an integer as a grid.

    |n| rows of [FAILURE], followed by a [SUCCESS] sign row when n < 0.
    Zero is the grid with no rows.
    """
    rows: list[tuple[Value, ...]] = [(FAILURE,)] * abs(n)
    if n < 0:
        rows.append((SUCCESS,))
    return Grid(tuple(rows))


def decode(value: Value) -> int:
    """
    Decode a grid back to an integer.

    Counts rows whose first cell is the failure atom, negated when the first
    cell of the last row is a grid. Rows with no cells are not counted.

    Raises:
        TypeError: If value is not a Grid
    """
    if not isinstance(value, Grid):
        raise TypeError(
            f"Cannot decode a non-grid value\n"
            f"  Got: {type(value).__name__}\n"
            f"  Only Grid values encode integers"
        )

    count = sum(1 for row in value.cells if row and isinstance(row[0], Atom))
    if value.cells:
        last = value.cells[-1]
        if last and isinstance(last[0], Grid):
            count = -count
    return count


def add(a: Value, b: Value) -> Grid:
    return encode(decode(a) + decode(b))


def subtract(a: Value, b: Value) -> Grid:
    return encode(decode(a) - decode(b))


def multiply(a: Value, b: Value) -> Grid:
    return encode(decode(a) * decode(b))


def divide(a: Value, b: Value, rules: RuleSet = DEFAULT_RULES) -> Value:
    """
    Divide two encoded integers, truncating toward zero.

    Returns FAILURE for an empty-grid divisor. With the default ZERO_VALUE
    guard any divisor decoding to 0 also gives FAILURE; with EMPTY_GRID such
    a divisor raises ZeroDivisionError.
    """
    if is_empty_grid(b):
        return FAILURE

    numerator = decode(a)
    denominator = decode(b)
    if denominator == 0 and rules.division_guard is DivisionGuard.ZERO_VALUE:
        return FAILURE

    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        quotient = -quotient
    return encode(quotient)


# =============================================================================
# Evaluation
# =============================================================================


@dataclass(frozen=True)
class Step:
    """One cell application during evaluation."""

    row: int
    col: int
    cell: Value
    result: Value
    operand: Value  # Operand value after the cell ran

    @property
    def failed(self) -> bool:
        return isinstance(self.result, Atom)


@dataclass(frozen=True)
class EvaluationResult:
    """
    Outcome of evaluating an operator against an operand.

    failures is the final row index (alternatives abandoned), successes the
    final column index (steps completed).
    """

    operator: Value
    operand: Value
    failures: int
    successes: int
    result: Value
    termination_reason: TerminationReason

    @property
    def succeeded(self) -> bool:
        return not isinstance(self.result, Atom)


class EvaluationTrace:
    """
    Iterator wrapper for trace() that exposes the final record.

    Usage:
        steps = trace(operator, operand)
        for step in steps:
            print(step.row, step.col)
        print(steps.result)  # EvaluationResult once exhausted
    """

    def __init__(self, generator: Iterator[Step]):
        self._iterator = generator
        self.result: EvaluationResult | None = None

    def __iter__(self) -> Iterator[Step]:
        return self

    def __next__(self) -> Step:
        return next(self._iterator)


def _as_operand(operand: Operand | Value) -> Operand:
    if isinstance(operand, Operand):
        return operand
    return Operand(operand)


def trace(operator: Value, operand: Operand | Value) -> EvaluationTrace:
    """
    Evaluate step by step, yielding a Step for every cell applied.

    Args:
        operator: The grid to run. Non-grids finish immediately.
        operand: Handle threaded through every step. A plain Value is wrapped
                 in a fresh handle.

    Returns:
        EvaluationTrace whose `result` is set once iteration finishes
    """
    handle = _as_operand(operand)
    result = EvaluationTrace.__new__(EvaluationTrace)
    result.result = None
    result._iterator = _trace_generator(operator, handle, result)
    return result


def _trace_generator(
    operator: Value,
    operand: Operand,
    trace_result: EvaluationTrace,
) -> Iterator[Step]:
    """Internal generator for trace(). Do not call directly."""
    if not isinstance(operator, Grid):
        trace_result.result = EvaluationResult(
            operator=operator,
            operand=operand.value,
            failures=0,
            successes=0,
            result=operator,
            termination_reason=TerminationReason.NOT_A_GRID,
        )
        return

    grid = operator
    row = 0
    col = 0
    result: Value = SUCCESS

    # Column bound comes from row 0 for the whole run
    while row < grid.rows and col < grid.cols:
        cells = grid.cells[row]
        if col >= len(cells):
            raise ValueError(
                f"Ragged grid: cursor left a short row\n"
                f"  Cursor: row {row}, column {col}\n"
                f"  Row {row} has {len(cells)} cells, row 0 has {grid.cols}\n"
                f"  Row lengths: {[len(r) for r in grid.cells]}"
            )

        cell = cells[col]
        result = apply_to(cell, operand)
        step = Step(row, col, cell, result, operand.value)
        logger.debug(
            "step (%d, %d): %s -> %s",
            row,
            col,
            type(cell).__name__,
            "fail" if step.failed else "ok",
        )
        if step.failed:
            row += 1
        else:
            col += 1
        yield step

    reason = (
        TerminationReason.ROWS_EXHAUSTED
        if row >= grid.rows
        else TerminationReason.COLUMNS_EXHAUSTED
    )
    logger.info(
        "evaluate: %dx%d grid stopped at (%d, %d), reason=%s",
        grid.rows,
        grid.cols,
        row,
        col,
        reason.value,
    )
    trace_result.result = EvaluationResult(
        operator=operator,
        operand=operand.value,
        failures=row,
        successes=col,
        result=result,
        termination_reason=reason,
    )


def evaluate(operator: Value, operand: Operand | Value) -> EvaluationResult:
    """
    Run an operator against an operand to completion.

    When an Operand handle is passed, transforms that replace its value do so
    in place and the caller sees the change. Evaluating twice with the same
    handle may therefore give different results.
    """
    steps = trace(operator, operand)
    for _ in steps:
        pass
    assert steps.result is not None
    return steps.result


# =============================================================================
# Grid Algebra
# =============================================================================


def _as_grid(value: Value) -> Grid:
    if isinstance(value, Grid):
        return value
    return Grid(((value,),))


def _pad_row(row: tuple[Value, ...], width: int) -> tuple[Value, ...]:
    if len(row) >= width:
        return row
    return row + (FAILURE,) * (width - len(row))


def row_union(a: Value, b: Value) -> Grid:
    """
    Stack b's rows beneath a's.

    Non-grids are wrapped as 1x1 grids first. When the row-0 widths differ,
    the narrower grid's rows are padded with FAILURE to the wider width.
    """
    top = _as_grid(a)
    bottom = _as_grid(b)

    width = max(top.cols, bottom.cols)
    if top.cols != bottom.cols:
        logger.debug("row_union: padding %d -> %d columns", min(top.cols, bottom.cols), width)
        if top.cols < width:
            top = Grid(tuple(_pad_row(row, width) for row in top.cells))
        else:
            bottom = Grid(tuple(_pad_row(row, width) for row in bottom.cells))

    return Grid(top.cells + bottom.cells)


def column_union(a: Value, b: Value, rules: RuleSet = DEFAULT_RULES) -> Grid:
    """
    Join b's rows onto the ends of a's rows.

    The grid with fewer rows gets synthetic rows of FAILURE (as wide as its
    row 0), so the result has max(rows) rows of width(a) + width(b) cells.

    A non-grid operand follows rules.column_fallback: ROW_UNION stacks the
    operands instead (historical behavior), WRAP joins it as a 1x1 grid.
    """
    if not (isinstance(a, Grid) and isinstance(b, Grid)):
        if rules.column_fallback is ColumnFallback.ROW_UNION:
            logger.debug("column_union: non-grid operand, falling back to row_union")
            return row_union(a, b)
        a = _as_grid(a)
        b = _as_grid(b)

    if a.rows != b.rows:
        logger.debug("column_union: extending %d rows to %d", min(a.rows, b.rows), max(a.rows, b.rows))

    rows: list[tuple[Value, ...]] = []
    for i in range(max(a.rows, b.rows)):
        left = a.cells[i] if i < a.rows else (FAILURE,) * a.cols
        right = b.cells[i] if i < b.rows else (FAILURE,) * b.cols
        rows.append(left + right)
    return Grid(tuple(rows))
