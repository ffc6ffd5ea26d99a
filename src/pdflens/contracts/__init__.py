from .analyzer import Analyzer
from .config_store import ConfigStore
from .output_module import OutputModule
from .rendering_engine import LoadedDocument, RenderingEngine
from .reporter import Reporter

__all__ = [
    "Analyzer",
    "ConfigStore",
    "LoadedDocument",
    "OutputModule",
    "RenderingEngine",
    "Reporter",
]
