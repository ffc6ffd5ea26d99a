from __future__ import annotations

from collections.abc import Sequence

from pdflens.config import Config, ConfigParam, as_bool
from pdflens.contracts import OutputModule
from pdflens.models import (
    ColorAnalysisResult,
    OutputData,
    OutputRow,
    PageCountResult,
    PerFileAnalysis,
)


def page_counts(result: PerFileAnalysis) -> tuple[int, int, int]:
    """Return ``(pages, bw, color)`` for one file, zero for missing metrics."""
    page_count = result.find(PageCountResult)
    color = result.find(ColorAnalysisResult)
    pages = page_count.total if page_count is not None else 0
    if color is None:
        return pages, 0, 0
    return pages, color.bw_pages, color.color_pages


class SummaryOutput(OutputModule):
    """Page totals with black & white / color split."""

    def __init__(self, show_per_file: bool = True) -> None:
        self.show_per_file = show_per_file

    @property
    def id(self) -> str:
        return "summary"

    @property
    def name(self) -> str:
        return "Summary"

    def config_params(self) -> list[ConfigParam]:
        return [
            ConfigParam(
                key="show_per_file",
                label="Show per-file breakdown",
                default=True,
                description="Display page counts for each individual PDF file",
            )
        ]

    def apply_config(self, config: Config) -> None:
        show = as_bool(config.get_output_value(self.id, "show_per_file"))
        if show is not None:
            self.show_per_file = show

    def generate(self, results: Sequence[PerFileAnalysis]) -> OutputData:
        total_pages = total_bw = total_color = 0
        rows: list[OutputRow] = []

        for result in results:
            pages, bw, color = page_counts(result)
            total_pages += pages
            total_bw += bw
            total_color += color
            if self.show_per_file:
                rows.append(
                    OutputRow(
                        filename=result.filename,
                        values=[
                            ("Pages", str(pages)),
                            ("B&W", str(bw)),
                            ("Color", str(color)),
                        ],
                    )
                )

        return OutputData(
            title="Page Summary",
            columns=["File", "Pages", "B&W", "Color"],
            rows=rows,
            totals=[
                ("Total Pages", str(total_pages)),
                ("Total B&W", str(total_bw)),
                ("Total Color", str(total_color)),
            ],
        )
