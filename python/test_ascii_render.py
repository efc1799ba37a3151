"""Tests for ascii_render module."""

from ascii_render import (
    render_cursor,
    render_grid_lines,
    render_result,
    render_step,
    render_value,
)
from zeta import FAILURE, SUCCESS, Grid, Operand, Step, Transform, Value, encode, evaluate


def _identity(operand: Operand) -> Value:
    return operand.value


INC = Transform(_identity, "inc")


class TestRenderValue:
    """Tests for rendering values as text."""

    def test_atom(self) -> None:
        """The failure atom."""
        assert render_value(FAILURE) == "*O*"

    def test_transform(self) -> None:
        """Transforms show their label in braces."""
        assert render_value(INC) == "{inc}"

    def test_success_and_zero_rows_differ(self) -> None:
        """One empty row vs no rows at all."""
        assert render_value(SUCCESS) == "[ ]"
        assert render_value(Grid()) == "[]"

    def test_single_row(self) -> None:
        """Single rows use square brackets."""
        assert render_value(Grid(((FAILURE, SUCCESS),))) == "[ *O* [ ] ]"

    def test_multi_row_brackets(self) -> None:
        """Top, middle and bottom rows get their own brackets."""
        assert render_value(encode(2)) == "⎡ *O* ⎤\n⎣ *O* ⎦"
        assert render_value(encode(3)) == "⎡ *O* ⎤\n⎢ *O* ⎥\n⎣ *O* ⎦"

    def test_nested_multi_row_grid_collapses(self) -> None:
        """A multi-row grid inside a cell shows as *Z*."""
        assert render_value(Grid(((encode(2), FAILURE),))) == "[ *Z* *O* ]"

    def test_columns_padded(self) -> None:
        """Cells in a column share a width."""
        lines = render_grid_lines(Grid(((INC, FAILURE), (FAILURE, FAILURE))))
        assert lines == ["⎡ {inc} *O* ⎤", "⎣ *O*   *O* ⎦"]

    def test_ragged_rows_padded(self) -> None:
        """Short rows are padded with blanks so brackets line up."""
        lines = render_grid_lines(Grid(((FAILURE, FAILURE), (FAILURE,))))
        assert lines[0] == "⎡ *O* *O* ⎤"
        assert len(lines[1]) == len(lines[0])
        assert lines[1].endswith("⎦")

    def test_deterministic(self) -> None:
        """Equal values render identically."""
        grid = Grid(((INC, encode(-1)), (SUCCESS, FAILURE)))
        assert render_value(grid) == render_value(grid)

    def test_color_keeps_content(self) -> None:
        """Colored output still contains the glyphs."""
        assert "*O*" in render_value(FAILURE, color=True)
        assert "{inc}" in render_value(INC, color=True)


class TestRenderEvaluation:
    """Tests for rendering evaluation records and steps."""

    def test_render_result(self) -> None:
        """The record lists operator, operand, counts and result."""
        res = evaluate(Grid(((FAILURE,),)), SUCCESS)
        assert render_result(res) == "\n".join(
            [
                "Tried:",
                "[ *O* ]",
                "With:",
                "[ ]",
                "Successes: 0",
                "Failures: 1",
                "Result:",
                "*O*",
                "Stopped: rows_exhausted",
            ]
        )

    def test_render_step(self) -> None:
        """Steps show cursor, cell and outcome."""
        ok = Step(0, 1, INC, encode(1), encode(1))
        failed = Step(1, 0, FAILURE, FAILURE, encode(1))
        assert render_step(ok) == "(0, 1) {inc} -> ok"
        assert render_step(failed) == "(1, 0) *O* -> fail"

    def test_cursor_out_of_range_is_plain(self) -> None:
        """A finished cursor highlights nothing."""
        grid = Grid(((FAILURE, SUCCESS),))
        assert render_cursor(grid, 0, 2, color=False) == render_value(grid)
