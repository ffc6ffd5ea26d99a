from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pdflens.models import OutputData, PerFileAnalysis


class Reporter(ABC):
    """Render batch outputs for presentation."""

    @abstractmethod
    def render(
        self, outputs: Sequence[OutputData], results: Sequence[PerFileAnalysis]
    ) -> None:
        """Render the outputs (and per-file errors) to the configured target."""
        raise NotImplementedError
