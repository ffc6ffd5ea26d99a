from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pdflens.config import Config, ConfigParam
    from pdflens.models import OutputData, PerFileAnalysis


class OutputModule(ABC):
    """Aggregate a finished batch into a presentation object."""

    @property
    @abstractmethod
    def id(self) -> str:
        raise NotImplementedError

    @property
    @abstractmethod
    def name(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def generate(self, results: Sequence[PerFileAnalysis]) -> OutputData:
        """Return the report for the complete batch *results*.

        Files lacking a metric this module needs contribute zero.
        """
        raise NotImplementedError

    def config_params(self) -> list[ConfigParam]:
        return []

    def apply_config(self, config: Config) -> None:
        """Update tunables from *config*; see :meth:`Analyzer.apply_config`."""
