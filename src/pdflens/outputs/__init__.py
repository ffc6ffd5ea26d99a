from .cost import CostOutput
from .registry import OutputRegistry
from .summary import SummaryOutput

__all__ = ["CostOutput", "OutputRegistry", "SummaryOutput"]
