from __future__ import annotations

from collections.abc import Sequence

from pdflens.config import Config, ConfigParam, as_bool, as_float
from pdflens.contracts import OutputModule
from pdflens.models import ColorAnalysisResult, OutputData, OutputRow, PerFileAnalysis


class CostOutput(OutputModule):
    """Printing cost per file and for the whole batch.

    Costs come from the black & white / color page split; files without a
    color analysis cost nothing.
    """

    def __init__(
        self,
        cost_bw: float = 0.05,
        cost_color: float = 0.15,
        show_per_file: bool = True,
    ) -> None:
        self.cost_bw = cost_bw
        self.cost_color = cost_color
        self.show_per_file = show_per_file

    @property
    def id(self) -> str:
        return "cost"

    @property
    def name(self) -> str:
        return "Cost Calculation"

    def config_params(self) -> list[ConfigParam]:
        return [
            ConfigParam(
                key="cost_bw",
                label="Cost per B&W page",
                default=0.05,
                description="Cost in currency units per black & white page",
            ),
            ConfigParam(
                key="cost_color",
                label="Cost per color page",
                default=0.15,
                description="Cost in currency units per color page",
            ),
            ConfigParam(
                key="show_per_file",
                label="Show per-file breakdown",
                default=True,
                description="Display costs for each individual PDF file",
            ),
        ]

    def apply_config(self, config: Config) -> None:
        cost_bw = as_float(config.get_output_value(self.id, "cost_bw"))
        if cost_bw is not None:
            self.cost_bw = cost_bw
        cost_color = as_float(config.get_output_value(self.id, "cost_color"))
        if cost_color is not None:
            self.cost_color = cost_color
        show = as_bool(config.get_output_value(self.id, "show_per_file"))
        if show is not None:
            self.show_per_file = show

    def file_costs(self, result: PerFileAnalysis) -> tuple[float, float]:
        """Return ``(bw_cost, color_cost)`` for one file."""
        color = result.find(ColorAnalysisResult)
        if color is None:
            return 0.0, 0.0
        return color.bw_pages * self.cost_bw, color.color_pages * self.cost_color

    def generate(self, results: Sequence[PerFileAnalysis]) -> OutputData:
        total_bw_cost = 0.0
        total_color_cost = 0.0
        rows: list[OutputRow] = []

        for result in results:
            bw_cost, color_cost = self.file_costs(result)
            total_bw_cost += bw_cost
            total_color_cost += color_cost
            if self.show_per_file:
                rows.append(
                    OutputRow(
                        filename=result.filename,
                        values=[
                            ("B&W Cost", f"{bw_cost:.2f}"),
                            ("Color Cost", f"{color_cost:.2f}"),
                            ("Total", f"{bw_cost + color_cost:.2f}"),
                        ],
                    )
                )

        grand_total = total_bw_cost + total_color_cost
        return OutputData(
            title="Cost Calculation",
            columns=["File", "B&W Cost", "Color Cost", "Total"],
            rows=rows,
            totals=[
                ("Total B&W Cost", f"{total_bw_cost:.2f}"),
                ("Total Color Cost", f"{total_color_cost:.2f}"),
                ("Grand Total", f"{grand_total:.2f}"),
            ],
            notes=[
                f"Rates: B&W = {self.cost_bw:.2f}/page, "
                f"Color = {self.cost_color:.2f}/page"
            ],
        )
