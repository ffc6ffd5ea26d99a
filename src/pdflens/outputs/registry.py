from __future__ import annotations

import logging
from collections.abc import Sequence

from pdflens.config import Config, ConfigParam
from pdflens.contracts import OutputModule
from pdflens.models import OutputData, PerFileAnalysis

logger = logging.getLogger(__name__)


class OutputRegistry:
    """Ordered collection of output modules."""

    def __init__(self) -> None:
        self._outputs: list[OutputModule] = []

    @classmethod
    def default(cls) -> OutputRegistry:
        from pdflens.outputs.cost import CostOutput
        from pdflens.outputs.summary import SummaryOutput

        registry = cls()
        registry.register(SummaryOutput())
        registry.register(CostOutput())
        return registry

    def register(self, output: OutputModule) -> None:
        if any(existing.id == output.id for existing in self._outputs):
            raise ValueError(f"Output {output.id!r} is already registered.")
        self._outputs.append(output)
        logger.debug("Registered output %s.", output.id)

    @property
    def outputs(self) -> tuple[OutputModule, ...]:
        return tuple(self._outputs)

    def apply_config(self, config: Config) -> None:
        for output in self._outputs:
            output.apply_config(config)

    def all_config_params(self) -> list[tuple[str, str, list[ConfigParam]]]:
        entries = [(o.id, o.name, o.config_params()) for o in self._outputs]
        return [entry for entry in entries if entry[2]]

    def generate_all(self, results: Sequence[PerFileAnalysis]) -> list[OutputData]:
        return [output.generate(results) for output in self._outputs]
