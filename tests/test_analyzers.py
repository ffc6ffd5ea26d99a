from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from fakes import EchoPageCountAnalyzer, FakeEngine, color_page, gray_page, make_pages
from pdflens.analyzers import AnalyzerRegistry, ColorAnalysisAnalyzer, PageCountAnalyzer
from pdflens.analyzers.color_analysis import is_color_image
from pdflens.config import Config
from pdflens.contracts import LoadedDocument
from pdflens.models import ColorAnalysisResult, PageCountResult


def _load(engine: FakeEngine, path: str) -> LoadedDocument:
    return LoadedDocument(engine=engine, handle=engine.open(path), path=path)


def test_gray_image_is_not_color() -> None:
    assert is_color_image(gray_page()) is False


def test_saturated_image_is_color() -> None:
    assert is_color_image(color_page()) is True


def test_small_channel_noise_is_within_tolerance() -> None:
    pixels = gray_page(120)
    pixels[:, :, 2] = 128

    assert is_color_image(pixels, tolerance=10) is False
    assert is_color_image(pixels, tolerance=5) is True


def test_single_channel_image_is_not_color() -> None:
    pixels = np.zeros((10, 10, 1), dtype=np.uint8)

    assert is_color_image(pixels) is False


def test_color_outside_sample_lattice_is_missed() -> None:
    pixels = gray_page()
    pixels[1, 1] = (255, 0, 0)

    assert is_color_image(pixels, sample_grid=20) is False


def test_page_count_analyzer() -> None:
    engine = FakeEngine({"a.pdf": make_pages(4, 1)})

    result = PageCountAnalyzer().analyze(_load(engine, "a.pdf"), Path("a.pdf"))

    assert result == PageCountResult(total=5)


def test_color_analyzer_counts_pages() -> None:
    engine = FakeEngine({"a.pdf": make_pages(bw=3, color=2)})

    result = ColorAnalysisAnalyzer().analyze(_load(engine, "a.pdf"), Path("a.pdf"))

    assert result == ColorAnalysisResult(bw_pages=3, color_pages=2)
    assert engine.renders == 5


def test_color_analyzer_counts_unrenderable_page_as_bw() -> None:
    engine = FakeEngine({"a.pdf": [color_page(), None, color_page()]})

    result = ColorAnalysisAnalyzer().analyze(_load(engine, "a.pdf"), Path("a.pdf"))

    assert result == ColorAnalysisResult(bw_pages=1, color_pages=2)


def test_color_analyzer_apply_config() -> None:
    analyzer = ColorAnalysisAnalyzer()
    config = Config(
        analyzers={"color_analysis": {"tolerance": 3, "sample_grid": 5}}
    )

    analyzer.apply_config(config)
    analyzer.apply_config(config)

    assert analyzer.tolerance == 3
    assert analyzer.sample_grid == 5


def test_color_analyzer_apply_config_ignores_absent_and_invalid_values() -> None:
    analyzer = ColorAnalysisAnalyzer(tolerance=7, sample_grid=9)
    config = Config(
        analyzers={
            "color_analysis": {
                "tolerance": "high",
                "sample_grid": 0,
                "unknown": True,
            }
        }
    )

    analyzer.apply_config(config)
    analyzer.apply_config(Config())

    assert analyzer.tolerance == 7
    assert analyzer.sample_grid == 9


def test_color_analyzer_declares_params() -> None:
    params = ColorAnalysisAnalyzer().config_params()

    assert [param.key for param in params] == ["tolerance", "sample_grid"]
    assert params[0].default == 10


def test_default_registry_order() -> None:
    registry = AnalyzerRegistry.default()

    assert [analyzer.id for analyzer in registry.analyzers] == [
        "page_count",
        "color_analysis",
    ]
    assert len(registry) == 2


def test_registry_preserves_registration_order() -> None:
    registry = AnalyzerRegistry()
    for analyzer_id in ("zeta", "alpha", "mid"):
        registry.register(EchoPageCountAnalyzer(analyzer_id))

    assert [analyzer.id for analyzer in registry.analyzers] == ["zeta", "alpha", "mid"]


def test_registry_rejects_duplicate_ids() -> None:
    registry = AnalyzerRegistry()
    registry.register(PageCountAnalyzer())

    with pytest.raises(ValueError, match="already registered"):
        registry.register(PageCountAnalyzer())


def test_registry_config_params_skip_modules_without_params() -> None:
    params = AnalyzerRegistry.default().all_config_params()

    assert [(module_id, name) for module_id, name, _ in params] == [
        ("color_analysis", "Color Analysis")
    ]


def test_registry_applies_config_to_every_analyzer() -> None:
    registry = AnalyzerRegistry.default()

    registry.apply_config(Config(analyzers={"color_analysis": {"tolerance": 42}}))

    color = registry.analyzers[1]
    assert isinstance(color, ColorAnalysisAnalyzer)
    assert color.tolerance == 42
