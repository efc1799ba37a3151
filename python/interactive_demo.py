"""
Interactive stepper for zeta evaluation.
Display a program grid with its cursor and advance one cell per key press.
"""

import logging
import sys

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_cursor, render_result, render_step, render_value
from demo import LAYOUTS, START_VALUES, load_programs
from zeta import (
    EvaluationResult,
    EvaluationTrace,
    Grid,
    Operand,
    Step,
    encode,
    trace,
)


class InteractiveStepper:
    """Step through one evaluation, cell by cell."""

    def __init__(self, program: Grid, start: int = 0, name: str = "program") -> None:
        self.program = program
        self.start = start
        self.name = name
        self.console = Console()
        self.reset()
        self.status_message = "Ready"

    def reset(self) -> None:
        """Restart evaluation with a fresh operand."""
        self.operand = Operand(encode(self.start))
        self.trace: EvaluationTrace = trace(self.program, self.operand)
        self.history: list[Step] = []
        self.row = 0
        self.col = 0
        self.status_message = "Reset"

    @property
    def finished(self) -> EvaluationResult | None:
        return self.trace.result

    def step(self) -> Step | None:
        """Apply the cell under the cursor. Returns None once evaluation has ended."""
        if self.finished is not None:
            self.status_message = "Evaluation finished - press R to restart"
            return None
        try:
            step = next(self.trace)
        except StopIteration:
            self.status_message = "Evaluation finished"
            return None

        self.history.append(step)
        if step.failed:
            self.row += 1
            self.status_message = f"Failure at ({step.row}, {step.col}) - next alternative"
        else:
            self.col += 1
            self.status_message = f"Success at ({step.row}, {step.col}) - next step"
        return step

    def run_to_end(self) -> EvaluationResult:
        while self.step() is not None:
            pass
        assert self.finished is not None
        return self.finished

    def generate_display(self) -> Panel:
        """Generate the current display with grid, operand and status."""
        status = Text()
        status.append("Program: ", style="bold")
        status.append(f"{self.name}\n\n")

        grid_text = render_cursor(self.program, self.row, self.col)
        status.append(Text.from_ansi(grid_text))
        status.append("\n\n")

        status.append("Cursor: ", style="bold")
        status.append(f"row {self.row}, column {self.col}\n")
        status.append("Operand:\n", style="bold")
        status.append(Text.from_ansi(render_value(self.operand.value, color=True)))
        status.append("\n\n")

        if self.history:
            status.append("Last step: ", style="bold")
            status.append(Text.from_ansi(render_step(self.history[-1], color=True)))
            status.append("\n\n")

        if self.finished is not None:
            status.append(Text.from_ansi(render_result(self.finished, color=True)))
            status.append("\n\n")

        status.append("Keys:\n", style="bold cyan")
        status.append("  N / Space - Step\n")
        status.append("  E - Run to end\n")
        status.append("  R - Reset\n")
        status.append("  Q - Quit\n\n")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        border = "green" if self.finished is not None else "blue"
        return Panel(status, title="Zeta - Stepper", border_style=border)

    def run(self) -> None:
        """Run the interactive loop."""
        with Live(self.generate_display(), console=self.console, auto_refresh=False) as live:
            try:
                while True:
                    live.update(self.generate_display(), refresh=True)

                    key = readchar.readkey()

                    if key.lower() == 'q':
                        self.status_message = "Quitting..."
                        live.update(self.generate_display(), refresh=True)
                        break
                    elif key.lower() == 'r':
                        self.reset()
                    elif key.lower() == 'n' or key == ' ':
                        self.step()
                    elif key.lower() == 'e':
                        self.run_to_end()
                    else:
                        self.status_message = f"Unknown key: {repr(key)}"

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display(), refresh=True)
            except ValueError as exc:
                self.status_message = f"Error: {exc}"
                live.update(self.generate_display(), refresh=True)
                raise


def main(name: str) -> None:
    """Run the stepper on a named layout."""
    programs = load_programs()
    stepper = InteractiveStepper(programs[name], START_VALUES[name], name)
    stepper.run()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == 'sublime':
        # Running from IDE - just print the full trace
        logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
        name = sys.argv[2] if len(sys.argv) > 2 else 'staircase'
        stepper = InteractiveStepper(load_programs()[name], START_VALUES[name], name)
        stepper.run_to_end()
        stepper.console.print(stepper.generate_display())
    else:
        name = sys.argv[1] if len(sys.argv) > 1 else 'staircase'
        if name not in LAYOUTS:
            print(f"Unknown layout: {name!r}. Choose from: {', '.join(LAYOUTS)}")
            sys.exit(1)
        main(name)
