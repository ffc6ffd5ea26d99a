from .color_analysis import ColorAnalysisAnalyzer
from .page_count import PageCountAnalyzer
from .registry import AnalyzerRegistry

__all__ = ["AnalyzerRegistry", "ColorAnalysisAnalyzer", "PageCountAnalyzer"]
