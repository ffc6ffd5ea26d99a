import logging
import sys

from .contracts import (
    Analyzer,
    ConfigStore,
    LoadedDocument,
    OutputModule,
    RenderingEngine,
    Reporter,
)

__all__ = [
    "Analyzer",
    "ConfigStore",
    "LoadedDocument",
    "OutputModule",
    "RenderingEngine",
    "Reporter",
]

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
    force=True,
)
