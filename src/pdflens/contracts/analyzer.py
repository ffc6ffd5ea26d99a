from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pdflens.config import Config, ConfigParam
    from pdflens.contracts.rendering_engine import LoadedDocument
    from pdflens.models import AnalysisResult


class Analyzer(ABC):
    """Compute one metric from a loaded document."""

    @property
    @abstractmethod
    def id(self) -> str:
        """Stable identifier, also the settings section key."""
        raise NotImplementedError

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name shown in progress text."""
        raise NotImplementedError

    @abstractmethod
    def analyze(self, document: LoadedDocument, path: Path) -> AnalysisResult:
        """Return the metric for *document*.

        Must only read from the document. Any exception is recorded against
        the file and does not stop other analyzers.
        """
        raise NotImplementedError

    def config_params(self) -> list[ConfigParam]:
        """Tunables this analyzer exposes. Default: none."""
        return []

    def apply_config(self, config: Config) -> None:
        """Update tunables from *config*.

        Absent or wrongly typed values leave the current setting unchanged.
        """
