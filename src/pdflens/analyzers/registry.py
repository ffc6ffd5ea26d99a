from __future__ import annotations

import logging

from pdflens.config import Config, ConfigParam
from pdflens.contracts import Analyzer

logger = logging.getLogger(__name__)


class AnalyzerRegistry:
    """Ordered collection of analyzers; registration order is run order."""

    def __init__(self) -> None:
        self._analyzers: list[Analyzer] = []

    @classmethod
    def default(cls) -> AnalyzerRegistry:
        from pdflens.analyzers.color_analysis import ColorAnalysisAnalyzer
        from pdflens.analyzers.page_count import PageCountAnalyzer

        registry = cls()
        registry.register(PageCountAnalyzer())
        registry.register(ColorAnalysisAnalyzer())
        return registry

    def register(self, analyzer: Analyzer) -> None:
        if any(existing.id == analyzer.id for existing in self._analyzers):
            raise ValueError(f"Analyzer {analyzer.id!r} is already registered.")
        self._analyzers.append(analyzer)
        logger.debug("Registered analyzer %s.", analyzer.id)

    @property
    def analyzers(self) -> tuple[Analyzer, ...]:
        return tuple(self._analyzers)

    def __len__(self) -> int:
        return len(self._analyzers)

    def apply_config(self, config: Config) -> None:
        for analyzer in self._analyzers:
            analyzer.apply_config(config)

    def all_config_params(self) -> list[tuple[str, str, list[ConfigParam]]]:
        """Return ``(id, name, params)`` for analyzers that have tunables."""
        entries = [(a.id, a.name, a.config_params()) for a in self._analyzers]
        return [entry for entry in entries if entry[2]]
