from __future__ import annotations

from collections.abc import Sequence

from rich import box
from rich.console import Console
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from pdflens.contracts import Reporter
from pdflens.models import OutputData, PerFileAnalysis


class RichReporter(Reporter):
    """Render batch outputs using Rich tables."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def render(
        self, outputs: Sequence[OutputData], results: Sequence[PerFileAnalysis]
    ) -> None:
        for output in outputs:
            self._console.print()
            self._console.print(output.title, style="bold underline")
            self._console.print(Rule(style="dim"))
            for note in output.notes:
                self._console.print(note, style="dim", markup=False)
            if output.rows:
                self._console.print(self._build_rows_section(output))
            self._console.print(self._build_totals_section(output))

        self._console.print()
        self._render_errors(results)

    @staticmethod
    def _build_rows_section(output: OutputData) -> Table:
        table = Table(
            box=box.SIMPLE_HEAD,
            show_header=True,
            header_style="bold",
            padding=(0, 2),
        )
        for index, column in enumerate(output.columns):
            table.add_column(column, justify="left" if index == 0 else "right")
        for row in output.rows:
            table.add_row(Text(row.filename), *(value for _, value in row.values))
        return table

    @staticmethod
    def _build_totals_section(output: OutputData) -> Table:
        table = Table.grid(padding=(0, 3))
        table.add_column("Total", style="bold cyan")
        table.add_column("Value", justify="right")
        for label, value in output.totals:
            table.add_row(f"{label}:", value)
        return table

    def _render_errors(self, results: Sequence[PerFileAnalysis]) -> None:
        failures = [
            (result.filename, error) for result in results for error in result.errors
        ]
        self._console.print(f"Errors ({len(failures)})", style="bold")
        self._console.print(Rule(style="dim"))

        if not failures:
            self._console.print("[dim]None[/dim]")
            return

        table = Table(
            box=box.SIMPLE_HEAD,
            show_header=True,
            header_style="bold",
            expand=True,
            padding=(0, 2),
        )
        table.add_column("File", ratio=1)
        table.add_column("Message", ratio=3)
        for filename, error in failures:
            table.add_row(Text(filename), Text(error, style="red"))
        self._console.print(table)
