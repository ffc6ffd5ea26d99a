from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from numpy.typing import NDArray

from pdflens.config import Config, ConfigParam, as_int
from pdflens.contracts import Analyzer, LoadedDocument
from pdflens.errors import RenderError
from pdflens.models import ColorAnalysisResult

logger = logging.getLogger(__name__)

RENDER_WIDTH = 200
RENDER_MAX_HEIGHT = 300


def is_color_image(
    pixels: NDArray[np.uint8], *, tolerance: int = 10, sample_grid: int = 20
) -> bool:
    """Return True if any sampled pixel has visibly different RGB channels.

    Pixels are sampled on a roughly ``sample_grid`` x ``sample_grid`` lattice.
    A channel spread of at most *tolerance* counts as gray, which absorbs
    compression noise in scanned pages.
    """
    if pixels.ndim != 3 or pixels.shape[2] < 3:
        return False
    height, width = pixels.shape[:2]
    step_y = max(height // sample_grid, 1)
    step_x = max(width // sample_grid, 1)
    sample = pixels[::step_y, ::step_x, :3].astype(np.int16)
    spread = sample.max(axis=2) - sample.min(axis=2)
    return bool((spread > tolerance).any())


class ColorAnalysisAnalyzer(Analyzer):
    """Classify every page as black & white or color.

    Each page is rendered at low resolution and sampled. A page that fails
    to render is counted as black & white.
    """

    def __init__(self, tolerance: int = 10, sample_grid: int = 20) -> None:
        self.tolerance = tolerance
        self.sample_grid = sample_grid

    @property
    def id(self) -> str:
        return "color_analysis"

    @property
    def name(self) -> str:
        return "Color Analysis"

    def config_params(self) -> list[ConfigParam]:
        return [
            ConfigParam(
                key="tolerance",
                label="Color tolerance",
                default=10,
                description=(
                    "Maximum RGB channel difference still treated as gray"
                ),
            ),
            ConfigParam(
                key="sample_grid",
                label="Sample grid",
                default=20,
                description="Number of sample points per page axis",
            ),
        ]

    def apply_config(self, config: Config) -> None:
        tolerance = as_int(config.get_analyzer_value(self.id, "tolerance"))
        if tolerance is not None and tolerance >= 0:
            self.tolerance = tolerance
        sample_grid = as_int(config.get_analyzer_value(self.id, "sample_grid"))
        if sample_grid is not None and sample_grid > 0:
            self.sample_grid = sample_grid

    def analyze(self, document: LoadedDocument, path: Path) -> ColorAnalysisResult:
        bw_pages = 0
        color_pages = 0
        for index in range(document.page_count()):
            try:
                pixels = document.render_page(index, RENDER_WIDTH, RENDER_MAX_HEIGHT)
            except RenderError as exc:
                logger.warning(
                    "Counting page %d of %s as black & white: %s",
                    index,
                    path.name,
                    exc.reason,
                )
                bw_pages += 1
                continue
            if is_color_image(
                pixels, tolerance=self.tolerance, sample_grid=self.sample_grid
            ):
                color_pages += 1
            else:
                bw_pages += 1
        return ColorAnalysisResult(bw_pages=bw_pages, color_pages=color_pages)
