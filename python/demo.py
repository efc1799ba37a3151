"""
Demonstration scripts for the zeta grid system.

Run with no arguments for every demo, or name one: sample, codec, staircase,
absolute. Add -v for step logging.
"""

from __future__ import annotations

import logging
import sys

from ascii_render import render_result, render_step, render_value
from grid_parser import empty, func, grid, parse_grid, parse_grids
from zeta import (
    FAILURE,
    SUCCESS,
    Grid,
    Operand,
    Value,
    add,
    column_union,
    decode,
    divide,
    encode,
    evaluate,
    multiply,
    row_union,
    subtract,
    trace,
)


# =============================================================================
# Transforms
# =============================================================================


def _increment(operand: Operand) -> Value:
    operand.value = add(operand.value, encode(1))
    return operand.value


def _decrement(operand: Operand) -> Value:
    operand.value = subtract(operand.value, encode(1))
    return operand.value


def _negate(operand: Operand) -> Value:
    operand.value = multiply(operand.value, encode(-1))
    return SUCCESS


def _if_negative(operand: Operand) -> Value:
    return SUCCESS if decode(operand.value) < 0 else FAILURE


def _if_positive(operand: Operand) -> Value:
    return SUCCESS if decode(operand.value) > 0 else FAILURE


def _halve(operand: Operand) -> Value:
    operand.value = divide(operand.value, encode(2))
    return operand.value


TRANSFORMS = {
    "inc": func(_increment, "inc"),
    "dec": func(_decrement, "dec"),
    "neg": func(_negate, "neg"),
    "neg?": func(_if_negative, "neg?"),
    "pos?": func(_if_positive, "pos?"),
    "half": func(_halve, "half"),
}

LAYOUTS = dict(
    # Sequencing: three increments in one row
    count="{inc} {inc} {inc}",
    # Failure drops to row 1 at the same column
    staircase="{inc} o {inc}|o {inc} {inc}",
    # Row 0 negates negative operands; row 1 accepts the rest
    absolute="{neg?} {neg}|e e",
    # Count down while positive, then fall through to the exit row
    countdown="{pos?} {dec} {pos?} {dec} {pos?} {dec}|e e e e e e",
)

START_VALUES = dict(count=0, staircase=0, absolute=-4, countdown=2)


def load_programs() -> dict[str, Grid]:
    return parse_grids(LAYOUTS, TRANSFORMS)


def load_layout(name: str) -> tuple[Grid, Operand]:
    """Parse a named layout into (program, fresh operand)."""
    return parse_grid(LAYOUTS[name], TRANSFORMS), Operand(encode(START_VALUES[name]))


# =============================================================================
# Demos
# =============================================================================


def sample_demo() -> None:
    """The stock sample: column-union three success rows with the operand."""

    def three_rows_beside(operand: Operand) -> Value:
        return column_union(grid([empty()], [empty()], [empty()]), operand.value)

    program = grid([func(three_rows_beside, "HU([ [ ]x3 ], A)")])
    operand = Operand(grid([empty()]))
    print(render_result(evaluate(program, operand)))


def codec_demo() -> None:
    """Show integers as grids and arithmetic on them."""
    for n in (0, 2, -3):
        print(f"encode({n}):")
        print(render_value(encode(n)))
        print()

    a, b = encode(7), encode(-2)
    print(f"add(7, -2)      = {decode(add(a, b))}")
    print(f"subtract(7, -2) = {decode(subtract(a, b))}")
    print(f"multiply(7, -2) = {decode(multiply(a, b))}")
    print(f"divide(7, -2)   = {decode(divide(a, b))}")  # type: ignore[arg-type]
    print(f"divide(7, 0)    = {render_value(divide(a, encode(0)))}")
    print()

    print("row_union(2, 3):")
    print(render_value(row_union(encode(2), encode(3))))
    print()
    print("column_union(1, 3):")
    print(render_value(column_union(encode(1), encode(3))))


def layout_demo(name: str) -> None:
    """Trace one layout step by step, then print the record."""
    program, operand = load_layout(name)
    print(f"Layout: {name}")
    steps = trace(program, operand)
    for step in steps:
        print("  " + render_step(step))
    assert steps.result is not None
    print(render_result(steps.result))
    print(f"Operand as integer: {decode(operand.value)}")


def demo() -> None:
    print("=== Sample program ===")
    sample_demo()
    print()
    print("=== Codec ===")
    codec_demo()
    for name in LAYOUTS:
        print()
        print(f"=== {name} ===")
        layout_demo(name)


if __name__ == "__main__":
    args = [arg for arg in sys.argv[1:] if arg != "-v"]
    if "-v" in sys.argv[1:]:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s: %(message)s')

    if not args:
        demo()
    elif args[0] == "sample":
        sample_demo()
    elif args[0] == "codec":
        codec_demo()
    elif args[0] in LAYOUTS:
        layout_demo(args[0])
    else:
        print(f"Unknown demo: {args[0]!r}. Choose from: sample, codec, {', '.join(LAYOUTS)}")
        sys.exit(1)
