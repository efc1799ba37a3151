"""
Shared value definitions for the zeta grid system.

Everything is a Value: the failure atom, a grid of nested values, or a
transform wrapping a native function.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable


# =============================================================================
# Value Types
# =============================================================================


@dataclass(frozen=True)
class Atom:
    """The terminal failure atom. Also the unit digit of encoded integers."""

    pass


@dataclass(frozen=True)
class Grid:
    """A 2D grid of nested values. Rows are not forced to equal length."""

    cells: tuple[tuple[Value, ...], ...] = ()

    @property
    def rows(self) -> int:
        return len(self.cells)

    @property
    def cols(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    @property
    def is_rectangular(self) -> bool:
        return all(len(row) == self.cols for row in self.cells)


@dataclass
class Operand:
    """
    Mutable handle on the value threaded through one evaluation.

    Transforms receive the handle and may replace `value`; later steps of the
    same evaluation see the replacement.
    """

    value: Value


TransformFn = Callable[[Operand], "Value"]


@dataclass(frozen=True)
class Transform:
    """A native unary function with a display label."""

    fn: TransformFn
    label: str = field(default="", compare=False)  # display only


Value = Atom | Grid | Transform


# =============================================================================
# Canonical Constants
# =============================================================================

FAILURE: Atom = Atom()
SUCCESS: Grid = Grid(((),))  # one row, zero cells; not the same as Grid()


# =============================================================================
# Classification
# =============================================================================


def is_terminal_failure(value: Value) -> bool:
    return isinstance(value, Atom)


def is_grid(value: Value) -> bool:
    return isinstance(value, Grid)


def is_transform(value: Value) -> bool:
    return isinstance(value, Transform)


def is_empty_grid(value: Value) -> bool:
    """
    True iff value is a Grid and every row has zero cells.

    A Grid with no rows is empty too (vacuously), so both encode(0) and
    SUCCESS satisfy this.
    """
    if not isinstance(value, Grid):
        return False
    return all(len(row) == 0 for row in value.cells)


def is_value(obj: object) -> bool:
    return isinstance(obj, (Atom, Grid, Transform))


# =============================================================================
# Application
# =============================================================================


def apply_to(cell: Value, operand: Operand) -> Value:
    """
    Apply a cell to the operand handle.

    Transforms run their function (which may replace operand.value). Atoms
    and grids are inert literals and come back unchanged; since values are
    immutable, returning the same object is equivalent to a deep copy.
    """
    if not isinstance(cell, Transform):
        return cell

    result = cell.fn(operand)
    if not is_value(result):
        raise TypeError(
            f"Transform returned a non-value\n"
            f"  Transform: {{{cell.label}}}\n"
            f"  Returned: {result!r} ({type(result).__name__})\n"
            f"  Transforms must return an Atom, Grid or Transform"
        )
    return result
